from __future__ import annotations

import argparse
import json
import sys
import time
from collections.abc import Callable
from typing import Any, Sequence, TypeVar

from pathfinder.map_loader import load_map
from pathfinder.objectives import validate_weights
from pathfinder.reporting import format_path_result, path_result_payload
from pathfinder.route_engine import find_optimal_path
from pathfinder.route_errors import RouteEngineError
from pathfinder.settings import settings

T = TypeVar("T")

_PROMPTS: tuple[tuple[str, str, Callable[[str], Any]], ...] = (
    ("map", "Enter map filename (e.g., map.json): ", str),
    ("start", "Enter starting node ID: ", int),
    ("end", "Enter ending node ID: ", int),
    ("w_time", "Weight for time (e.g., 0.7): ", float),
    ("w_dist", "Weight for distance (e.g., 0.1): ", float),
    ("w_cost", "Weight for cost (e.g., 0.2): ", float),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find the best route between two nodes of a JSON road map."
    )
    parser.add_argument("--map", default=None, help="Map JSON path.")
    parser.add_argument("--start", type=int, default=None)
    parser.add_argument("--end", type=int, default=None)
    parser.add_argument("--w-time", dest="w_time", type=float, default=None)
    parser.add_argument("--w-dist", dest="w_dist", type=float, default=None)
    parser.add_argument("--w-cost", dest="w_cost", type=float, default=None)
    parser.add_argument("--json", action="store_true", help="Print the structured result as JSON.")
    return parser


def _prompt(label: str, cast: Callable[[str], T]) -> T:
    while True:
        raw = input(label).strip()
        try:
            return cast(raw)
        except ValueError:
            print(f"Invalid value: {raw!r}", file=sys.stderr)


def fill_missing_args(args: argparse.Namespace) -> argparse.Namespace:
    """Prompt for anything not given on the command line."""
    for attr, label, cast in _PROMPTS:
        if getattr(args, attr) is None:
            setattr(args, attr, _prompt(label, cast))
    return args


def run_find_route(args: argparse.Namespace) -> dict[str, Any]:
    # Weights are rejected before the map is read or the search runs.
    validate_weights(args.w_time, args.w_dist, args.w_cost, tolerance=settings.weight_sum_tolerance)
    graph = load_map(args.map)
    deadline = (
        time.monotonic() + settings.route_search_timeout_s if settings.route_search_timeout_s > 0 else None
    )
    result = find_optimal_path(
        graph,
        args.start,
        args.end,
        args.w_time,
        args.w_dist,
        args.w_cost,
        fuel_price_per_km=settings.fuel_price_per_km,
        deadline_monotonic_s=deadline,
    )
    return {"result": result, "payload": path_result_payload(result)}


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    try:
        fill_missing_args(args)
    except EOFError:
        print("Error: input closed before all route parameters were given", file=sys.stderr)
        return 1
    try:
        outcome = run_find_route(args)
    except RouteEngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(outcome["payload"], indent=2))
    else:
        print(format_path_result(outcome["result"]))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
