from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .route_errors import InvalidEdgeError, NodeNotFoundError


@dataclass(frozen=True)
class Node:
    node_id: int
    name: str


@dataclass(frozen=True)
class Edge:
    to: int
    distance_km: float
    speed_limit_kph: float
    traffic_multiplier: float
    toll: float


def _check_edge_attributes(
    *,
    distance_km: float,
    speed_limit_kph: float,
    traffic_multiplier: float,
    toll: float,
) -> None:
    values = {
        "distance": distance_km,
        "speed_limit": speed_limit_kph,
        "traffic_multiplier": traffic_multiplier,
        "toll": toll,
    }
    for key, value in values.items():
        if not math.isfinite(value):
            raise InvalidEdgeError(f"{key} must be finite", details={key: value})
    if distance_km <= 0.0:
        raise InvalidEdgeError("distance must be positive", details={"distance": distance_km})
    if speed_limit_kph <= 0.0:
        raise InvalidEdgeError("speed_limit must be positive", details={"speed_limit": speed_limit_kph})
    if traffic_multiplier < 1.0:
        raise InvalidEdgeError(
            "traffic_multiplier must be at least 1.0",
            details={"traffic_multiplier": traffic_multiplier},
        )
    if toll < 0.0:
        raise InvalidEdgeError("toll must be non-negative", details={"toll": toll})
    # Finite inputs can still overflow the minutes formula.
    travel_time_min = (distance_km / speed_limit_kph) * traffic_multiplier * 60.0
    if not math.isfinite(travel_time_min):
        raise InvalidEdgeError(
            "travel time overflows for this distance and speed_limit",
            details={"distance": distance_km, "speed_limit": speed_limit_kph},
        )


class RoadGraph:
    """Undirected road network stored as paired directed adjacency entries.

    Adjacency lists keep insertion order, so searches over the same graph
    always relax edges in the same sequence.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, Node] = {}
        self._adjacency: dict[int, list[Edge]] = {}

    @property
    def nodes(self) -> Mapping[int, Node]:
        return MappingProxyType(self._nodes)

    def add_node(self, node_id: int, name: str) -> Node:
        node = Node(node_id=int(node_id), name=str(name))
        self._nodes[node.node_id] = node
        return node

    def add_edge(
        self,
        from_id: int,
        to_id: int,
        distance_km: float,
        speed_limit_kph: float,
        traffic_multiplier: float = 1.0,
        toll: float = 0.0,
    ) -> None:
        """Add one road segment as two mirrored directed edges."""
        for node_id in (from_id, to_id):
            if node_id not in self._nodes:
                raise NodeNotFoundError(node_id)
        distance_km = float(distance_km)
        speed_limit_kph = float(speed_limit_kph)
        traffic_multiplier = float(traffic_multiplier)
        toll = float(toll)
        _check_edge_attributes(
            distance_km=distance_km,
            speed_limit_kph=speed_limit_kph,
            traffic_multiplier=traffic_multiplier,
            toll=toll,
        )
        self._adjacency.setdefault(from_id, []).append(
            Edge(
                to=to_id,
                distance_km=distance_km,
                speed_limit_kph=speed_limit_kph,
                traffic_multiplier=traffic_multiplier,
                toll=toll,
            )
        )
        self._adjacency.setdefault(to_id, []).append(
            Edge(
                to=from_id,
                distance_km=distance_km,
                speed_limit_kph=speed_limit_kph,
                traffic_multiplier=traffic_multiplier,
                toll=toll,
            )
        )

    def has_node(self, node_id: int) -> bool:
        return node_id in self._nodes

    def node(self, node_id: int) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def edges_from(self, node_id: int) -> tuple[Edge, ...]:
        return tuple(self._adjacency.get(node_id, ()))

    def iter_edges(self) -> Iterator[tuple[int, Edge]]:
        for source_id, edges in self._adjacency.items():
            for edge in edges:
                yield source_id, edge

    def node_count(self) -> int:
        return len(self._nodes)

    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._adjacency.values())
