"""
Graph Contracts
===============

Immutable node, edge and graph records.

INVARIANTS:
- Node ids are unique within a Graph and never change once created
- A node's payload variant always matches its type
- Edges MAY dangle (reference a missing node); consumers skip them
- Graph order is meaningful: layouts break ties by edge order
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Iterator, Optional, Tuple

from .base import EdgeType, NodeType, Position
from .payloads import NodeData, TopicData, payload_class


@dataclass(frozen=True)
class Node:
    """A single mind-map vertex."""
    node_id: str
    position: Position = field(default_factory=Position.origin)
    node_type: NodeType = NodeType.GENERIC
    data: NodeData = field(default_factory=TopicData)
    selected: bool = False

    def __post_init__(self):
        if not self.node_id or not isinstance(self.node_id, str):
            raise ValueError("Node id must be a non-empty string")
        expected = payload_class(self.node_type)
        if type(self.data) is not expected:
            raise ValueError(
                f"Node {self.node_id}: {self.node_type.value} nodes carry "
                f"{expected.__name__}, got {type(self.data).__name__}"
            )

    @property
    def label(self) -> str:
        return self.data.label

    @property
    def collapsed(self) -> bool:
        return self.data.collapsed

    def moved_to(self, position: Position) -> Node:
        return replace(self, position=position)


@dataclass(frozen=True)
class EdgeData:
    label: Optional[str] = None


@dataclass(frozen=True)
class Edge:
    """A directed connection source -> target."""
    edge_id: str
    source: str
    target: str
    edge_type: EdgeType = EdgeType.PLAIN
    data: EdgeData = field(default_factory=EdgeData)
    selected: bool = False

    def __post_init__(self):
        if not self.edge_id or not isinstance(self.edge_id, str):
            raise ValueError("Edge id must be a non-empty string")

    def touches(self, node_ids: FrozenSet[str]) -> bool:
        return self.source in node_ids or self.target in node_ids


@dataclass(frozen=True)
class SelectionState:
    """
    Explicit selection, passed alongside the graph.

    Replaces selection flags as the source of truth; flags on Node/Edge
    records are materialised from this when a Graph is produced.
    """
    node_ids: FrozenSet[str] = frozenset()
    edge_ids: FrozenSet[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.node_ids and not self.edge_ids

    def only_node(self, node_id: str) -> SelectionState:
        return SelectionState(node_ids=frozenset({node_id}))

    @staticmethod
    def from_flags(nodes: Iterable[Node], edges: Iterable[Edge]) -> SelectionState:
        return SelectionState(
            node_ids=frozenset(n.node_id for n in nodes if n.selected),
            edge_ids=frozenset(e.edge_id for e in edges if e.selected),
        )


@dataclass(frozen=True)
class Graph:
    """
    Ordered (nodes, edges) pair.

    Produced by the store, consumed by layout, visibility, history and
    persistence. Never mutated; every change yields a new Graph.
    """
    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()

    def __post_init__(self):
        # Accept any iterable, store tuples
        object.__setattr__(self, 'nodes', tuple(self.nodes))
        object.__setattr__(self, 'edges', tuple(self.edges))
        seen = set()
        for node in self.nodes:
            if node.node_id in seen:
                raise ValueError(f"Duplicate node id: {node.node_id}")
            seen.add(node.node_id)

    @staticmethod
    def empty() -> Graph:
        return Graph()

    @property
    def node_ids(self) -> FrozenSet[str]:
        return frozenset(n.node_id for n in self.nodes)

    def node_index(self) -> Dict[str, Node]:
        return {n.node_id: n for n in self.nodes}

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def has_node(self, node_id: str) -> bool:
        return self.get_node(node_id) is not None

    def live_edges(self) -> Iterator[Edge]:
        """Edges whose endpoints both exist, in edge order."""
        ids = self.node_ids
        return (e for e in self.edges if e.source in ids and e.target in ids)

    def dangling_edges(self) -> Tuple[Edge, ...]:
        ids = self.node_ids
        return tuple(e for e in self.edges if e.source not in ids or e.target not in ids)

    def with_nodes(self, nodes: Iterable[Node]) -> Graph:
        return Graph(nodes=tuple(nodes), edges=self.edges)

    @property
    def selection(self) -> SelectionState:
        return SelectionState.from_flags(self.nodes, self.edges)


@dataclass(frozen=True)
class Snapshot:
    """
    One history entry.

    `graph` is an independent deep copy; later edits to the live graph
    never reach it.
    """
    sequence: int
    graph: Graph

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self.graph.nodes

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self.graph.edges
