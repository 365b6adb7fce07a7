"""Layout root selection."""

from __future__ import annotations
from typing import Optional

from ..contracts.graph import Graph
from ..core.traversal import incoming_ids


def default_root(graph: Graph) -> Optional[str]:
    """
    First node (in node order) with no incoming live edge.

    Falls back to the first node when every node has a parent (a fully
    cyclic board); None for an empty graph.
    """
    if not graph.nodes:
        return None
    targets = incoming_ids(graph)
    for node in graph.nodes:
        if node.node_id not in targets:
            return node.node_id
    return graph.nodes[0].node_id


def hierarchical_root(graph: Graph, focus_root_id: Optional[str] = None) -> Optional[str]:
    """The focus root when it exists in the graph, else the default root."""
    if focus_root_id is not None and graph.has_node(focus_root_id):
        return focus_root_id
    return default_root(graph)
