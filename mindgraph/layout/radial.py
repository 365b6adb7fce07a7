"""
Radial Layout
=============

Children fan out on a circle around their parent; each level's radius
grows by a constant factor so deeper rings clear shallower ones.

PLACEMENT RULES:
- The root sits at the origin
- A node with k live children gives child i the angle i * 2pi / max(k, 1)
- A node reached twice keeps its first (depth-first, edge-order) position;
  its slot in the later parent's ring stays empty
- Nodes unreachable from the root keep their position
"""

from __future__ import annotations
import logging
import math
from typing import Dict, Sequence, Tuple

from ..contracts.base import Position
from ..contracts.graph import Edge, Graph, Node
from ..core.traversal import children_map

logger = logging.getLogger(__name__)

DEFAULT_BASE_RADIUS = 280.0
DEFAULT_GROWTH = 1.2


def radial_layout(
    root_id: str,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    base_radius: float = DEFAULT_BASE_RADIUS,
    growth: float = DEFAULT_GROWTH,
) -> Tuple[Node, ...]:
    """
    Place every node reachable from `root_id`.

    Returns the nodes in input order; only positions change. An absent
    root returns the input unchanged.
    """
    graph = Graph(nodes=nodes, edges=edges)
    if not graph.has_node(root_id):
        logger.debug("Radial layout skipped: root %s not in graph", root_id)
        return graph.nodes

    placed = _place(root_id, children_map(graph), base_radius, growth)
    return tuple(
        node.moved_to(placed[node.node_id]) if node.node_id in placed else node
        for node in graph.nodes
    )


def _place(
    root_id: str,
    children: Dict[str, list],
    base_radius: float,
    growth: float,
) -> Dict[str, Position]:
    placed = {root_id: Position.origin()}

    # Iterative depth-first walk.
    # frame = (parent id, ring radius, child iterator, angle step)
    def frame(node_id: str, radius: float):
        kids = children.get(node_id, [])
        step = (math.pi * 2) / max(len(kids), 1)
        return (node_id, radius, iter(enumerate(kids)), step)

    stack = [frame(root_id, base_radius)]
    while stack:
        parent_id, radius, pending, step = stack[-1]
        entry = next(pending, None)
        if entry is None:
            stack.pop()
            continue
        i, kid = entry
        if kid in placed:
            continue
        center = placed[parent_id]
        angle = i * step
        placed[kid] = Position(
            x=center.x + math.cos(angle) * radius,
            y=center.y + math.sin(angle) * radius,
        )
        stack.append(frame(kid, radius * growth))
    return placed
