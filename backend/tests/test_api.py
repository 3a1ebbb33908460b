from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

import pathfinder.main as main_module
from pathfinder.main import app
from pathfinder.route_errors import SearchTimeoutError
from pathfinder.settings import settings

SAMPLE_MAP = Path(__file__).resolve().parent / "fixtures" / "sample_map.json"


@pytest.fixture
def client(monkeypatch) -> Iterator[TestClient]:
    monkeypatch.setattr(settings, "map_path", str(SAMPLE_MAP))
    with TestClient(app) as c:
        yield c


def test_health_and_root(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").json()["docs"] == "/docs"


def test_nodes_lists_loaded_map(client: TestClient) -> None:
    resp = client.get("/nodes")
    assert resp.status_code == 200
    names = [n["name"] for n in resp.json()["nodes"]]
    assert names == ["Depot", "Riverside", "Toll Bridge", "Old Town", "Harbor", "Hilltop"]


def test_route_returns_path_and_logs(client: TestClient, monkeypatch) -> None:
    events: list[tuple[str, dict[str, Any]]] = []

    def _capture_log_event(event: str, **fields: Any) -> None:
        events.append((event, fields))

    monkeypatch.setattr(main_module, "log_event", _capture_log_event)
    resp = client.post(
        "/route",
        json={"start_id": 1, "end_id": 5, "weights": {"time": 1.0, "distance": 0.0, "cost": 0.0}},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["found"] is True
    assert [stop["name"] for stop in body["path"]] == ["Depot", "Toll Bridge", "Harbor"]
    assert body["score"] > 0
    assert body["no_path_reason"] == ""
    assert events[-1][0] == "route_request"
    assert events[-1][1]["hop_count"] == 2


def test_route_accepts_short_weight_names(client: TestClient) -> None:
    resp = client.post(
        "/route",
        json={"start_id": 1, "end_id": 5, "weights": {"w_time": 0.0, "w_dist": 1.0, "w_cost": 0.0}},
    )
    assert resp.status_code == 200
    assert [stop["node_id"] for stop in resp.json()["path"]] == [1, 4, 5]


def test_unreachable_target_is_a_normal_response(client: TestClient) -> None:
    resp = client.post(
        "/route",
        json={"start_id": 1, "end_id": 6, "weights": {"time": 0.7, "distance": 0.1, "cost": 0.2}},
    )
    assert resp.status_code == 200
    assert resp.json() == {"found": False, "path": [], "score": None, "no_path_reason": "no_path"}


def test_same_start_and_end(client: TestClient) -> None:
    resp = client.post("/route", json={"start_id": 3, "end_id": 3})
    assert resp.status_code == 200
    assert resp.json()["path"] == [{"node_id": 3, "name": "Toll Bridge"}]
    assert resp.json()["score"] == 0.0


def test_unknown_node_maps_to_404(client: TestClient) -> None:
    resp = client.post("/route", json={"start_id": 1, "end_id": 40})
    assert resp.status_code == 404
    assert resp.json()["detail"]["reason_code"] == "unknown_node"


@pytest.mark.parametrize(
    "weights",
    [
        {"time": 0.5, "distance": 0.3, "cost": 0.1},
        {"time": 0.5, "distance": 0.3, "cost": 0.3},
        {"time": 1.5, "distance": -0.5, "cost": 0.0},
    ],
)
def test_invalid_weights_rejected_before_search(client: TestClient, monkeypatch, weights: dict[str, float]) -> None:
    def _unexpected_search(*_: Any, **__: Any) -> None:
        raise AssertionError("search should not run with invalid weights")

    monkeypatch.setattr(main_module, "find_optimal_path", _unexpected_search)
    resp = client.post("/route", json={"start_id": 1, "end_id": 5, "weights": weights})
    assert resp.status_code == 422


def test_expired_search_deadline_maps_to_504(client: TestClient, monkeypatch) -> None:
    captured: dict[str, Any] = {}

    def _timed_out_search(*_: Any, **kwargs: Any) -> None:
        captured.update(kwargs)
        raise SearchTimeoutError(explored_states=3)

    monkeypatch.setattr(settings, "route_search_timeout_s", 0.5)
    monkeypatch.setattr(main_module, "find_optimal_path", _timed_out_search)
    resp = client.post("/route", json={"start_id": 1, "end_id": 5})
    assert resp.status_code == 504
    assert resp.json()["detail"]["reason_code"] == "search_deadline_exceeded"
    assert captured["deadline_monotonic_s"] is not None


def test_unscorable_map_maps_to_500(client: TestClient, monkeypatch) -> None:
    monkeypatch.setattr(settings, "fuel_price_per_km", 1e308)
    resp = client.post("/route", json={"start_id": 1, "end_id": 5})
    assert resp.status_code == 500
    assert resp.json()["detail"]["reason_code"] == "invalid_edge"


def test_route_without_graph_is_503(monkeypatch) -> None:
    monkeypatch.setattr(settings, "map_path", "")
    with TestClient(app) as c:
        resp = c.post("/route", json={"start_id": 1, "end_id": 2})
    assert resp.status_code == 503
