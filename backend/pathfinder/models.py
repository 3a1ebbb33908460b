from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from .objectives import validate_weights
from .settings import settings


class Weights(BaseModel):
    """User preference weights. Must sum to 1.0 within the configured tolerance."""

    time: float = Field(..., ge=0)
    distance: float = Field(..., ge=0)
    cost: float = Field(..., ge=0)

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_aliases(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        data = dict(value)
        for short, full in (("w_time", "time"), ("w_dist", "distance"), ("w_cost", "cost")):
            if full not in data and short in data:
                data[full] = data[short]
        if "cost" not in data and "money" in data:
            data["cost"] = data["money"]
        return data

    @field_validator("time", "distance", "cost")
    @classmethod
    def finite(cls, v: float) -> float:
        if v != v or v in (float("inf"), float("-inf")):
            raise ValueError("weight must be finite")
        return v

    @model_validator(mode="after")
    def sums_to_one(self) -> Weights:
        # InvalidWeightsError is a ValueError, so pydantic reports it as a validation error.
        validate_weights(self.time, self.distance, self.cost, tolerance=settings.weight_sum_tolerance)
        return self


class RouteRequest(BaseModel):
    start_id: int
    end_id: int
    weights: Weights = Field(default_factory=lambda: Weights(time=1, distance=0, cost=0))


class RouteStop(BaseModel):
    node_id: int
    name: str


class RouteResponse(BaseModel):
    found: bool
    path: list[RouteStop] = Field(default_factory=list)
    score: float | None = None
    no_path_reason: str = ""


class NodeListResponse(BaseModel):
    nodes: list[RouteStop]
