from __future__ import annotations

import heapq
import time
from dataclasses import dataclass
from math import inf

from .graph import RoadGraph
from .logging_utils import log_event
from .objectives import FUEL_PRICE_PER_KM, compute_normalization_bounds, unified_edge_score
from .route_errors import SearchTimeoutError, UnknownNodeError


@dataclass(frozen=True)
class PathResult:
    stops: tuple[tuple[int, str], ...]
    score: float | None

    @property
    def found(self) -> bool:
        return bool(self.stops)

    @property
    def node_ids(self) -> tuple[int, ...]:
        return tuple(node_id for node_id, _name in self.stops)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(name for _node_id, name in self.stops)

    @classmethod
    def not_found(cls) -> PathResult:
        return cls(stops=(), score=None)


def _reconstruct_path(
    predecessor: dict[int, int],
    *,
    start_id: int,
    end_id: int,
    max_len: int,
) -> list[int] | None:
    path = [end_id]
    node = end_id
    while node != start_id:
        prev = predecessor.get(node)
        # A broken or cyclic chain never yields a partial path.
        if prev is None or len(path) > max_len:
            return None
        path.append(prev)
        node = prev
    path.reverse()
    return path


def find_optimal_path_with_stats(
    graph: RoadGraph,
    start_id: int,
    end_id: int,
    w_time: float,
    w_dist: float,
    w_cost: float,
    *,
    fuel_price_per_km: float = FUEL_PRICE_PER_KM,
    deadline_monotonic_s: float | None = None,
) -> tuple[PathResult, dict[str, int | str]]:
    if not graph.has_node(start_id):
        raise UnknownNodeError(start_id, role="start")
    if not graph.has_node(end_id):
        raise UnknownNodeError(end_id, role="end")

    if start_id == end_id:
        start = graph.node(start_id)
        return PathResult(stops=((start.node_id, start.name),), score=0.0), {
            "explored_states": 0,
            "termination_reason": "trivial",
            "no_path_reason": "",
        }

    bounds = compute_normalization_bounds(graph, fuel_price_per_km=fuel_price_per_km)

    g_cost: dict[int, float] = {start_id: 0.0}
    predecessor: dict[int, int] = {}
    heap: list[tuple[float, int]] = [(0.0, start_id)]
    explored = 0
    reached = False

    while heap:
        if deadline_monotonic_s is not None and time.monotonic() >= float(deadline_monotonic_s):
            raise SearchTimeoutError(explored_states=explored)
        cost, node = heapq.heappop(heap)
        if cost > g_cost.get(node, inf):
            continue
        explored += 1
        if node == end_id:
            reached = True
            break
        for edge in graph.edges_from(node):
            new_cost = cost + unified_edge_score(
                edge,
                bounds,
                w_time=w_time,
                w_dist=w_dist,
                w_cost=w_cost,
                fuel_price_per_km=fuel_price_per_km,
            )
            if new_cost < g_cost.get(edge.to, inf):
                g_cost[edge.to] = new_cost
                predecessor[edge.to] = node
                heapq.heappush(heap, (new_cost, edge.to))

    path = (
        _reconstruct_path(predecessor, start_id=start_id, end_id=end_id, max_len=graph.node_count())
        if reached
        else None
    )
    if path is None:
        return PathResult.not_found(), {
            "explored_states": explored,
            "termination_reason": "queue_exhausted",
            "no_path_reason": "no_path",
        }

    stops = tuple((node_id, graph.node(node_id).name) for node_id in path)
    return PathResult(stops=stops, score=g_cost[end_id]), {
        "explored_states": explored,
        "termination_reason": "target_reached",
        "no_path_reason": "",
    }


def find_optimal_path(
    graph: RoadGraph,
    start_id: int,
    end_id: int,
    w_time: float,
    w_dist: float,
    w_cost: float,
    *,
    fuel_price_per_km: float = FUEL_PRICE_PER_KM,
    deadline_monotonic_s: float | None = None,
) -> PathResult:
    """Best path from start to end under the weighted time/distance/cost blend.

    Weights are expected to be validated by the caller. Unknown start or end
    nodes raise ``UnknownNodeError``; an unreachable target returns
    ``PathResult.not_found()``.
    """
    result, stats = find_optimal_path_with_stats(
        graph,
        start_id,
        end_id,
        w_time,
        w_dist,
        w_cost,
        fuel_price_per_km=fuel_price_per_km,
        deadline_monotonic_s=deadline_monotonic_s,
    )
    log_event(
        "route_search_completed",
        start_id=start_id,
        end_id=end_id,
        found=result.found,
        score=result.score,
        **stats,
    )
    return result
