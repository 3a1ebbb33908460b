from __future__ import annotations

import math
from dataclasses import dataclass

from .graph import Edge, RoadGraph
from .route_errors import InvalidEdgeError, InvalidWeightsError

FUEL_PRICE_PER_KM: float = 1.5
WEIGHT_SUM_TOLERANCE: float = 0.01


@dataclass(frozen=True)
class NormalizationBounds:
    max_time: float
    max_dist: float
    max_cost: float


def edge_travel_time_min(edge: Edge) -> float:
    return (edge.distance_km / edge.speed_limit_kph) * edge.traffic_multiplier * 60.0


def edge_monetary_cost(edge: Edge, *, fuel_price_per_km: float = FUEL_PRICE_PER_KM) -> float:
    return edge.toll + (edge.distance_km * fuel_price_per_km)


def compute_normalization_bounds(
    graph: RoadGraph, *, fuel_price_per_km: float = FUEL_PRICE_PER_KM
) -> NormalizationBounds:
    """Scan every edge once for the per-dimension maxima used as divisors.

    Bounds are global to the graph, not to the search frontier, so an edge
    contributes the same score no matter when the search reaches it.
    """
    max_time = 0.0
    max_dist = 0.0
    max_cost = 0.0
    for source, edge in graph.iter_edges():
        cost = edge_monetary_cost(edge, fuel_price_per_km=fuel_price_per_km)
        if not math.isfinite(cost):
            raise InvalidEdgeError(
                f"monetary cost of edge {source}->{edge.to} is not finite",
                details={"from": source, "to": edge.to, "fuel_price_per_km": fuel_price_per_km},
            )
        max_time = max(max_time, edge_travel_time_min(edge))
        max_dist = max(max_dist, edge.distance_km)
        max_cost = max(max_cost, cost)
    return NormalizationBounds(max_time=max_time, max_dist=max_dist, max_cost=max_cost)


def unified_edge_score(
    edge: Edge,
    bounds: NormalizationBounds,
    *,
    w_time: float,
    w_dist: float,
    w_cost: float,
    fuel_price_per_km: float = FUEL_PRICE_PER_KM,
) -> float:
    """Weighted sum of the edge's normalised time, distance and monetary cost."""

    def norm(v: float, mx: float) -> float:
        return v / mx if mx > 0 else 0.0

    return (
        w_time * norm(edge_travel_time_min(edge), bounds.max_time)
        + w_dist * norm(edge.distance_km, bounds.max_dist)
        + w_cost * norm(edge_monetary_cost(edge, fuel_price_per_km=fuel_price_per_km), bounds.max_cost)
    )


def weights_within_tolerance(
    w_time: float, w_dist: float, w_cost: float, *, tolerance: float = WEIGHT_SUM_TOLERANCE
) -> bool:
    return abs(w_time + w_dist + w_cost - 1.0) <= tolerance


def validate_weights(
    w_time: float, w_dist: float, w_cost: float, *, tolerance: float = WEIGHT_SUM_TOLERANCE
) -> tuple[float, float, float]:
    weights = {"time": w_time, "distance": w_dist, "cost": w_cost}
    for key, value in weights.items():
        if not math.isfinite(value):
            raise InvalidWeightsError(f"{key} weight must be finite", details=weights)
        if value < 0:
            raise InvalidWeightsError(f"{key} weight must be non-negative", details=weights)
    if not weights_within_tolerance(w_time, w_dist, w_cost, tolerance=tolerance):
        total = w_time + w_dist + w_cost
        raise InvalidWeightsError(
            f"weights must sum to 1.0 (got {total:.4f}, tolerance {tolerance})",
            details={**weights, "sum": total, "tolerance": tolerance},
        )
    return (w_time, w_dist, w_cost)
