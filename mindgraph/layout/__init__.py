"""
Layout Engine

RESPONSIBILITY: Deterministic node placement
ALLOWED INPUTS: Root id plus the ordered nodes and edges of a graph
OUTPUTS: The same nodes, in the same order, with new positions

WHAT THIS LAYER MUST NOT DO:
============================
- Touch any node field other than position
- Mutate the store (callers write positions back)
- Raise on an absent root (no-op instead)

GUARANTEES:
===========
1. Identical input yields bit-identical positions
2. Children are placed in edge order
3. Cycles terminate; every node is placed at most once
4. Dangling edges are ignored
"""

from __future__ import annotations
from typing import Optional

from ..config import LayoutConfig
from ..contracts.base import LayoutKind
from ..contracts.graph import Graph
from .hierarchical import hierarchical_layout, layer_assignment
from .radial import radial_layout
from .roots import default_root, hierarchical_root


def apply_layout(
    kind: LayoutKind,
    graph: Graph,
    root_id: Optional[str] = None,
    config: Optional[LayoutConfig] = None,
) -> Graph:
    """
    Lay out `graph` with the chosen algorithm.

    Without an explicit root, the default root is used. An empty graph or
    absent root returns the graph unchanged.
    """
    config = config or LayoutConfig()
    if root_id is None:
        root_id = default_root(graph)
    if root_id is None:
        return graph

    if kind is LayoutKind.RADIAL:
        nodes = radial_layout(
            root_id, graph.nodes, graph.edges,
            base_radius=config.radial_base_radius,
            growth=config.radial_growth,
        )
    else:
        nodes = hierarchical_layout(
            root_id, graph.nodes, graph.edges,
            column_spacing=config.column_spacing,
            row_spacing=config.row_spacing,
        )
    return graph.with_nodes(nodes)


__all__ = [
    'apply_layout',
    'radial_layout', 'hierarchical_layout', 'layer_assignment',
    'default_root', 'hierarchical_root',
]
