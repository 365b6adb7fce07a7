"""
Hierarchical Layout
===================

Layered placement: breadth-first depth picks the column, order within
the layer picks the row. Each layer is centred vertically on y = 0.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Sequence, Tuple

from ..contracts.base import Position
from ..contracts.graph import Edge, Graph, Node
from ..core.traversal import bfs_depths, bfs_order, children_map

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_SPACING = 280.0
DEFAULT_ROW_SPACING = 140.0


def hierarchical_layout(
    root_id: str,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    column_spacing: float = DEFAULT_COLUMN_SPACING,
    row_spacing: float = DEFAULT_ROW_SPACING,
) -> Tuple[Node, ...]:
    """
    Position nodes reachable from `root_id` in depth columns.

    x = depth * column_spacing
    y = -(n - 1) * row_spacing / 2 + i * row_spacing  (i-th of n in the layer)

    Unreachable nodes keep their position; an absent root is a no-op.
    """
    graph = Graph(nodes=nodes, edges=edges)
    if not graph.has_node(root_id):
        logger.debug("Hierarchical layout skipped: root %s not in graph", root_id)
        return graph.nodes

    layers = layer_assignment(root_id, children_map(graph))
    positions: Dict[str, Position] = {}
    for depth, ids in enumerate(layers):
        total_height = (len(ids) - 1) * row_spacing
        for i, node_id in enumerate(ids):
            positions[node_id] = Position(
                x=depth * column_spacing,
                y=-total_height / 2 + i * row_spacing,
            )

    return tuple(
        node.moved_to(positions[node.node_id]) if node.node_id in positions else node
        for node in graph.nodes
    )


def layer_assignment(root_id: str, children: Dict[str, List[str]]) -> List[List[str]]:
    """
    Node ids grouped by BFS depth, each layer in visit order.

    Layers are contiguous: depth d+1 exists only if depth d does.
    """
    depth = bfs_depths(root_id, children)
    layers: List[List[str]] = []
    for node_id in bfs_order(root_id, children):
        d = depth[node_id]
        if d == len(layers):
            layers.append([])
        layers[d].append(node_id)
    return layers
