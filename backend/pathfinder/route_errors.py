from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "invalid_weights",
        "unknown_node",
        "node_not_found",
        "invalid_edge",
        "map_file_unavailable",
        "map_file_invalid",
        "search_deadline_exceeded",
        "no_path",
    }
)


@dataclass
class RouteEngineError(ValueError):
    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


class InvalidWeightsError(RouteEngineError):
    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(reason_code="invalid_weights", message=message, details=details)


class UnknownNodeError(RouteEngineError):
    """Start or end of a query is not part of the graph."""

    def __init__(self, node_id: int, *, role: str) -> None:
        super().__init__(
            reason_code="unknown_node",
            message=f"{role} node {node_id} does not exist in the graph",
            details={"node_id": node_id, "role": role},
        )


class NodeNotFoundError(RouteEngineError):
    def __init__(self, node_id: int) -> None:
        super().__init__(
            reason_code="node_not_found",
            message=f"node {node_id} not found",
            details={"node_id": node_id},
        )


class InvalidEdgeError(RouteEngineError):
    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(reason_code="invalid_edge", message=message, details=details)


class MapFileError(RouteEngineError):
    pass


class SearchTimeoutError(RouteEngineError):
    def __init__(self, *, explored_states: int) -> None:
        super().__init__(
            reason_code="search_deadline_exceeded",
            message="search deadline exceeded",
            details={"explored_states": explored_states},
        )


def normalize_reason_code(reason_code: str, *, default: str = "no_path") -> str:
    code = str(reason_code or "").strip()
    if code in FROZEN_REASON_CODES:
        return code
    return default
