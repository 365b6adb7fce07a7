"""
Test Fixtures

Explicit graph builders for deterministic tests.
All fixtures are explicit - no random generation.
"""

from typing import Iterable, Optional, Tuple

from mindgraph.contracts.base import EdgeType, NodeType, Position
from mindgraph.contracts.graph import Edge, EdgeData, Graph, Node
from mindgraph.contracts.payloads import TopicData, empty_payload
from mindgraph.core.ids import IdFactory
from mindgraph.core.store import GraphStore


def make_node(
    node_id: str,
    x: float = 0.0,
    y: float = 0.0,
    label: Optional[str] = None,
    collapsed: bool = False,
    selected: bool = False,
    node_type: NodeType = NodeType.GENERIC,
) -> Node:
    return Node(
        node_id=node_id,
        position=Position(x, y),
        node_type=node_type,
        data=empty_payload(node_type, label=label if label is not None else node_id, collapsed=collapsed),
        selected=selected,
    )


def make_edge(
    source: str,
    target: str,
    edge_id: Optional[str] = None,
    edge_type: EdgeType = EdgeType.PLAIN,
    label: Optional[str] = None,
    selected: bool = False,
) -> Edge:
    return Edge(
        edge_id=edge_id or f"e_{source}_{target}",
        source=source,
        target=target,
        edge_type=edge_type,
        data=EdgeData(label=label),
        selected=selected,
    )


def make_graph(
    node_ids: Iterable[str],
    links: Iterable[Tuple[str, str]] = (),
    collapsed: Iterable[str] = (),
) -> Graph:
    """Nodes at the origin, one plain edge per (source, target) pair."""
    folded = set(collapsed)
    nodes = tuple(make_node(n, collapsed=n in folded) for n in node_ids)
    edges = tuple(make_edge(s, t, edge_id=f"e{i}_{s}_{t}") for i, (s, t) in enumerate(links))
    return Graph(nodes=nodes, edges=edges)


def ten_node_graph(collapsed: Iterable[str] = ()) -> Graph:
    """
    R -> A, B, C
    A -> A1, A2
    B -> B1, B2
    C -> C1
    """
    return make_graph(
        ["R", "A", "B", "C", "A1", "A2", "B1", "B2", "C1", "X"],
        [
            ("R", "A"), ("R", "B"), ("R", "C"),
            ("A", "A1"), ("A", "A2"),
            ("B", "B1"), ("B", "B2"),
            ("C", "C1"),
        ],
        collapsed=collapsed,
    )


def deterministic_store(seed: int = 0) -> GraphStore:
    return GraphStore(ids=IdFactory.deterministic(seed))


def topic(label: str, **values) -> TopicData:
    return TopicData(label=label, **values)


class FakeClock:
    """Monotonic clock under test control."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now
