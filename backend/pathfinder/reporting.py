from __future__ import annotations

from typing import Any

from .route_engine import PathResult


def format_path_result(result: PathResult) -> str:
    """Human-readable rendering of a route for terminal output."""
    lines = ["--- Recommended Optimal Path ---"]
    if not result.found:
        lines.append("No path found.")
        return "\n".join(lines)
    lines.append("Path:")
    for idx, (_node_id, name) in enumerate(result.stops, start=1):
        lines.append(f"  {idx}. {name}")
    lines.append("")
    lines.append(f"Optimality Score: {result.score:.6g} (lower is better)")
    return "\n".join(lines)


def path_result_payload(result: PathResult, *, no_path_reason: str = "") -> dict[str, Any]:
    return {
        "found": result.found,
        "path": [{"node_id": node_id, "name": name} for node_id, name in result.stops],
        "score": result.score,
        "no_path_reason": "" if result.found else (no_path_reason or "no_path"),
    }
