from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from .graph import RoadGraph
from .logging_utils import log_event
from .map_loader import load_map
from .models import NodeListResponse, RouteRequest, RouteResponse, RouteStop
from .reporting import path_result_payload
from .route_engine import find_optimal_path
from .route_errors import InvalidEdgeError, SearchTimeoutError, UnknownNodeError
from .settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.graph = load_map(settings.map_path) if settings.map_path else None
    yield


app = FastAPI(title="Apex Pathfinder", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def road_graph(request: Request) -> RoadGraph:
    graph: RoadGraph | None = getattr(request.app.state, "graph", None)  # type: ignore[attr-defined]
    if graph is None:
        raise HTTPException(status_code=503, detail="road graph not loaded; set MAP_PATH")
    return graph


GraphDep = Annotated[RoadGraph, Depends(road_graph)]


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "Backend is running. Visit /docs for the API UI.", "docs": "/docs"}


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/nodes", response_model=NodeListResponse)
async def list_nodes(graph: GraphDep) -> NodeListResponse:
    return NodeListResponse(
        nodes=[RouteStop(node_id=node.node_id, name=node.name) for node in graph.nodes.values()]
    )


# Plain def: the search is CPU-bound, so FastAPI runs it in the threadpool.
@app.post("/route", response_model=RouteResponse)
def compute_route(req: RouteRequest, graph: GraphDep) -> RouteResponse:
    request_id = str(uuid.uuid4())
    t0 = time.perf_counter()

    deadline = (
        time.monotonic() + settings.route_search_timeout_s if settings.route_search_timeout_s > 0 else None
    )
    try:
        result = find_optimal_path(
            graph,
            req.start_id,
            req.end_id,
            req.weights.time,
            req.weights.distance,
            req.weights.cost,
            fuel_price_per_km=settings.fuel_price_per_km,
            deadline_monotonic_s=deadline,
        )
    except UnknownNodeError as e:
        raise HTTPException(
            status_code=404, detail={"reason_code": e.reason_code, "message": e.message}
        ) from e
    except SearchTimeoutError as e:
        raise HTTPException(
            status_code=504, detail={"reason_code": e.reason_code, "message": e.message}
        ) from e
    except InvalidEdgeError as e:
        # Loaded map cannot be scored with the configured fuel price.
        raise HTTPException(
            status_code=500, detail={"reason_code": e.reason_code, "message": e.message}
        ) from e

    log_event(
        "route_request",
        request_id=request_id,
        start_id=req.start_id,
        end_id=req.end_id,
        weights=req.weights.model_dump(),
        found=result.found,
        score=result.score,
        hop_count=max(0, len(result.stops) - 1),
        duration_ms=round((time.perf_counter() - t0) * 1000, 2),
    )

    return RouteResponse.model_validate(path_result_payload(result))
