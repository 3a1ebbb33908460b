from __future__ import annotations

import argparse
import json
import math
import sys
from pathlib import Path
from typing import Any, Sequence

from pathfinder.graph import RoadGraph
from pathfinder.map_loader import load_map_with_report
from pathfinder.objectives import compute_normalization_bounds
from pathfinder.route_errors import RouteEngineError
from pathfinder.settings import settings


def _isolated_nodes(graph: RoadGraph) -> list[int]:
    return sorted(node_id for node_id in graph.nodes if not graph.edges_from(node_id))


def _component_count(graph: RoadGraph) -> int:
    seen: set[int] = set()
    components = 0
    for root in graph.nodes:
        if root in seen:
            continue
        components += 1
        stack = [root]
        seen.add(root)
        while stack:
            node = stack.pop()
            for edge in graph.edges_from(node):
                if edge.to not in seen:
                    seen.add(edge.to)
                    stack.append(edge.to)
    return components


def validate(*, map_path: Path, strict: bool, fuel_price_per_km: float) -> dict[str, Any]:
    graph, report = load_map_with_report(map_path, strict_references=strict)
    if graph.node_count() == 0:
        raise RuntimeError("Map has no nodes.")
    bounds = compute_normalization_bounds(graph, fuel_price_per_km=fuel_price_per_km)
    return {
        "map_path": str(map_path),
        "nodes": report["node_count"],
        "directed_edges": report["edge_count"],
        "segments_declared": report["segments_declared"],
        "skipped_edges": report["skipped_edges"],
        "isolated_nodes": _isolated_nodes(graph),
        "component_count": _component_count(graph),
        "normalization_bounds": {
            "max_time_min": round(bounds.max_time, 6),
            "max_distance_km": round(bounds.max_dist, 6),
            "max_cost": round(bounds.max_cost, 6),
        },
        "fuel_price_per_km": fuel_price_per_km,
    }


def _fuel_price(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"fuel price must be a number, got {raw!r}") from None
    if not math.isfinite(value) or value < 0.0:
        raise argparse.ArgumentTypeError(f"fuel price must be finite and non-negative, got {raw!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate a road map file and report its shape.")
    parser.add_argument("--map", type=Path, required=True, help="Map JSON path.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on edges that reference unknown nodes instead of skipping them.",
    )
    parser.add_argument("--fuel-price-per-km", type=_fuel_price, default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    fuel_price = settings.fuel_price_per_km if args.fuel_price_per_km is None else args.fuel_price_per_km
    try:
        report = validate(
            map_path=args.map,
            strict=bool(args.strict),
            fuel_price_per_km=fuel_price,
        )
    except (RouteEngineError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
