from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .graph import RoadGraph
from .logging_utils import log_event
from .route_errors import MapFileError
from .settings import settings


class MapNode(BaseModel):
    id: int
    name: str


class MapEdge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_id: int = Field(..., alias="from")
    to_id: int = Field(..., alias="to")
    distance: float = Field(..., gt=0, allow_inf_nan=False)
    speed_limit: float = Field(..., gt=0, allow_inf_nan=False)
    traffic: float = Field(default=1.0, ge=1.0, allow_inf_nan=False)
    toll: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)


class MapDocument(BaseModel):
    nodes: list[MapNode] = Field(default_factory=list)
    edges: list[MapEdge] = Field(default_factory=list)


def parse_map_payload_with_report(
    payload: Any, *, strict_references: bool | None = None
) -> tuple[RoadGraph, dict[str, Any]]:
    """Build a RoadGraph from a decoded map document.

    Nodes are added before edges. Edges pointing at unknown nodes are skipped
    unless ``strict_references`` is set, in which case the map is rejected.
    """
    strict = settings.strict_map_references if strict_references is None else strict_references
    try:
        doc = MapDocument.model_validate(payload)
    except ValidationError as e:
        raise MapFileError(
            reason_code="map_file_invalid",
            message="map document failed validation",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e

    graph = RoadGraph()
    for node in doc.nodes:
        graph.add_node(node.id, node.name)

    skipped: list[dict[str, int]] = []
    for idx, edge in enumerate(doc.edges):
        missing = [n for n in (edge.from_id, edge.to_id) if not graph.has_node(n)]
        if missing:
            if strict:
                raise MapFileError(
                    reason_code="map_file_invalid",
                    message=f"edge {idx} references unknown node {missing[0]}",
                    details={"edge_index": idx, "missing_node_ids": missing},
                )
            skipped.append({"edge_index": idx, "from": edge.from_id, "to": edge.to_id})
            log_event("map_edge_skipped", level=logging.WARNING, edge_index=idx, missing_node_ids=missing)
            continue
        graph.add_edge(
            edge.from_id,
            edge.to_id,
            edge.distance,
            edge.speed_limit,
            edge.traffic,
            edge.toll,
        )
    return graph, {
        "node_count": graph.node_count(),
        "edge_count": graph.edge_count(),
        "segments_declared": len(doc.edges),
        "skipped_edges": skipped,
    }


def parse_map_payload(payload: Any, *, strict_references: bool | None = None) -> RoadGraph:
    graph, _report = parse_map_payload_with_report(payload, strict_references=strict_references)
    return graph


def load_map_with_report(
    path: str | Path, *, strict_references: bool | None = None
) -> tuple[RoadGraph, dict[str, Any]]:
    map_path = Path(path)
    try:
        text = map_path.read_text(encoding="utf-8")
    except OSError as e:
        raise MapFileError(
            reason_code="map_file_unavailable",
            message=f"could not open map file '{map_path}'",
            details={"path": str(map_path)},
        ) from e
    except UnicodeDecodeError as e:
        raise MapFileError(
            reason_code="map_file_invalid",
            message=f"map file '{map_path}' is not valid UTF-8",
            details={"path": str(map_path), "position": e.start},
        ) from e
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise MapFileError(
            reason_code="map_file_invalid",
            message=f"map file '{map_path}' is not valid JSON: {e.msg}",
            details={"path": str(map_path), "line": e.lineno, "column": e.colno},
        ) from e

    graph, report = parse_map_payload_with_report(payload, strict_references=strict_references)
    log_event(
        "map_loaded",
        path=str(map_path),
        node_count=report["node_count"],
        edge_count=report["edge_count"],
        skipped_edges=len(report["skipped_edges"]),
    )
    return graph, report


def load_map(path: str | Path, *, strict_references: bool | None = None) -> RoadGraph:
    graph, _report = load_map_with_report(path, strict_references=strict_references)
    return graph
