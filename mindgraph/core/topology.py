"""
Topology Engine
===============

Structural analysis of a board's graph using graph topology.

SCOPE:
======
This engine computes STRUCTURE for the inspector, never layout.

ALLOWED:
- Graph construction from live nodes and edges
- Weakly connected components (separate mind maps on one board)
- Cycle detection
- Structural metrics (density, roots)

OUT OF SCOPE:
- Positions (the layout package owns geometry)
- Visibility (the visibility package owns filtering)
"""

from __future__ import annotations
from typing import List, Optional, Set, Tuple
from dataclasses import dataclass
import networkx as nx

from ..contracts.graph import Graph


@dataclass(frozen=True)
class GraphMetrics:
    """Immutable structural metrics for a board."""
    node_count: int
    edge_count: int
    density: float
    has_cycle: bool
    component_count: int
    root_ids: Tuple[str, ...] = ()  # nodes with no incoming edge, in node order
    dangling_edge_count: int = 0


class TopologyEngine:
    """
    Engine for structural analysis of mind-map graphs.

    Wraps NetworkX; dangling edges are left out of the graph and only
    counted.
    """

    def __init__(self):
        self._graph = nx.DiGraph()
        self._node_order: List[str] = []
        self._dangling = 0

    def build_graph(self, graph: Graph) -> None:
        """
        Build the directed graph from a board.

        Replaces internal graph state.
        """
        self._graph = nx.DiGraph()
        self._node_order = [n.node_id for n in graph.nodes]

        for node in graph.nodes:
            self._graph.add_node(node.node_id, node_type=node.node_type.value)

        live = 0
        for edge in graph.live_edges():
            # Parallel edges collapse: topology is binary, connected or not
            self._graph.add_edge(edge.source, edge.target, edge_id=edge.edge_id)
            live += 1
        self._dangling = len(graph.edges) - live

    def get_components(self) -> List[Set[str]]:
        """
        Weakly connected components as sets of node ids.

        Ordered by the first node of each component in board order.
        """
        if not self._graph:
            return []
        position = {node_id: i for i, node_id in enumerate(self._node_order)}
        components = [set(c) for c in nx.weakly_connected_components(self._graph)]
        components.sort(key=lambda c: min(position[n] for n in c))
        return components

    def find_cycle(self) -> Optional[List[str]]:
        """One directed cycle as a node-id list, or None if acyclic."""
        if not self._graph:
            return None
        try:
            edges = nx.find_cycle(self._graph, orientation="original")
        except nx.NetworkXNoCycle:
            return None
        return [source for source, _target, *_ in edges]

    def root_ids(self) -> Tuple[str, ...]:
        return tuple(
            node_id for node_id in self._node_order
            if self._graph.in_degree(node_id) == 0
        )

    def compute_metrics(self) -> GraphMetrics:
        if not self._graph:
            return GraphMetrics(0, 0, 0.0, False, 0, (), self._dangling)

        return GraphMetrics(
            node_count=self._graph.number_of_nodes(),
            edge_count=self._graph.number_of_edges(),
            density=nx.density(self._graph),
            has_cycle=not nx.is_directed_acyclic_graph(self._graph),
            component_count=nx.number_weakly_connected_components(self._graph),
            root_ids=self.root_ids(),
            dangling_edge_count=self._dangling,
        )

    def clear(self):
        self._graph.clear()
        self._node_order = []
        self._dangling = 0


def analyze(graph: Graph) -> GraphMetrics:
    engine = TopologyEngine()
    engine.build_graph(graph)
    return engine.compute_metrics()
