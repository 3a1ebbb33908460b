from __future__ import annotations

import pytest

from pathfinder.graph import Edge, Node, RoadGraph
from pathfinder.route_errors import InvalidEdgeError, NodeNotFoundError


def _graph() -> RoadGraph:
    graph = RoadGraph()
    graph.add_node(1, "A")
    graph.add_node(2, "B")
    graph.add_node(3, "C")
    graph.add_edge(1, 2, 10.0, 50.0, 1.0, 0.0)
    graph.add_edge(2, 3, 5.0, 50.0, 1.2, 2.5)
    return graph


def test_add_edge_creates_mirrored_entries() -> None:
    graph = _graph()

    assert graph.edges_from(1) == (Edge(to=2, distance_km=10.0, speed_limit_kph=50.0, traffic_multiplier=1.0, toll=0.0),)
    back = graph.edges_from(3)
    assert len(back) == 1
    assert back[0].to == 2
    assert back[0].traffic_multiplier == 1.2
    assert back[0].toll == 2.5
    assert graph.edge_count() == 4


def test_adjacency_keeps_insertion_order() -> None:
    graph = _graph()
    assert [edge.to for edge in graph.edges_from(2)] == [1, 3]


def test_add_node_is_idempotent_last_write_wins() -> None:
    graph = _graph()
    graph.add_node(2, "B-renamed")

    assert graph.node(2) == Node(node_id=2, name="B-renamed")
    assert graph.node_count() == 3
    # Existing edges are untouched by the rename.
    assert [edge.to for edge in graph.edges_from(2)] == [1, 3]


def test_node_lookup_fails_for_unknown_id() -> None:
    graph = _graph()
    with pytest.raises(NodeNotFoundError) as excinfo:
        graph.node(99)
    assert excinfo.value.reason_code == "node_not_found"
    assert excinfo.value.details == {"node_id": 99}


def test_edges_from_unknown_or_isolated_node_is_empty() -> None:
    graph = _graph()
    graph.add_node(4, "D")
    assert graph.edges_from(4) == ()
    assert graph.edges_from(404) == ()


def test_add_edge_rejects_dangling_endpoint() -> None:
    graph = _graph()
    with pytest.raises(NodeNotFoundError):
        graph.add_edge(1, 7, 3.0, 50.0, 1.0, 0.0)
    assert graph.edge_count() == 4


@pytest.mark.parametrize(
    "distance, speed, traffic, toll",
    [
        (0.0, 50.0, 1.0, 0.0),
        (5.0, 0.0, 1.0, 0.0),
        (5.0, 50.0, 0.9, 0.0),
        (5.0, 50.0, 1.0, -1.0),
        (float("nan"), 50.0, 1.0, 0.0),
        (5.0, float("inf"), 1.0, 0.0),
        (1e308, 1e-300, 1.0, 0.0),
        (5.0, 50.0, 1e308, 0.0),
    ],
)
def test_add_edge_rejects_invalid_attributes(distance: float, speed: float, traffic: float, toll: float) -> None:
    graph = _graph()
    with pytest.raises(InvalidEdgeError) as excinfo:
        graph.add_edge(1, 3, distance, speed, traffic, toll)
    assert excinfo.value.reason_code == "invalid_edge"
    assert graph.edges_from(1)[-1].to == 2


def test_nodes_view_is_read_only_and_iter_edges_covers_all() -> None:
    graph = _graph()
    with pytest.raises(TypeError):
        graph.nodes[9] = Node(node_id=9, name="X")  # type: ignore[index]

    pairs = sorted((src, edge.to) for src, edge in graph.iter_edges())
    assert pairs == [(1, 2), (2, 1), (2, 3), (3, 2)]
