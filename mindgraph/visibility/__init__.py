"""
Visibility Resolver

RESPONSIBILITY: Decide which nodes and edges are rendered
ALLOWED INPUTS: A Graph, the collapsed node ids, an optional focus root
OUTPUTS: VisibleView (immutable)

RULES:
======
1. A collapsed node hides every node reachable from it, but not itself
2. With a focus root, only the focus root's subtree can be visible;
   nodes hidden by rule 1 stay hidden inside it
3. An edge is visible exactly when both endpoints are visible

Recomputed from scratch on every call; nothing is cached between calls.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Tuple
import logging

from ..contracts.graph import Edge, Graph, Node
from ..core.traversal import children_map, subtree_ids

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibleView:
    """Rendered subset of a graph, in graph order."""
    node_ids: FrozenSet[str]
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]
    hidden_ids: FrozenSet[str] = frozenset()
    focus_root_id: Optional[str] = None
    # collapsed node id -> number of descendants it hides
    hidden_counts: Dict[str, int] = field(default_factory=dict, hash=False)

    def is_visible(self, node_id: str) -> bool:
        return node_id in self.node_ids


def collapsed_ids_of(graph: Graph) -> FrozenSet[str]:
    """Ids of nodes whose payload carries collapsed=True."""
    return frozenset(n.node_id for n in graph.nodes if n.collapsed)


def resolve_visibility(
    graph: Graph,
    collapsed_ids: Optional[Iterable[str]] = None,
    focus_root_id: Optional[str] = None,
) -> VisibleView:
    """
    Compute the visible view.

    `collapsed_ids` defaults to the nodes' own collapsed flags. A focus
    root missing from the graph is ignored.
    """
    collapsed = collapsed_ids_of(graph) if collapsed_ids is None else frozenset(collapsed_ids)
    children = children_map(graph)

    hidden = set()
    hidden_counts: Dict[str, int] = {}
    for node in graph.nodes:
        if node.node_id not in collapsed:
            continue
        below = subtree_ids(graph, node.node_id, children) - {node.node_id}
        hidden_counts[node.node_id] = len(below)
        hidden.update(below)

    focus = None
    if focus_root_id is not None:
        if graph.has_node(focus_root_id):
            focus = subtree_ids(graph, focus_root_id, children)
        else:
            logger.debug("Focus root %s not in graph; showing whole board", focus_root_id)
            focus_root_id = None

    visible_nodes = tuple(
        n for n in graph.nodes
        if n.node_id not in hidden and (focus is None or n.node_id in focus)
    )
    visible_ids = frozenset(n.node_id for n in visible_nodes)
    visible_edges = tuple(
        e for e in graph.edges
        if e.source in visible_ids and e.target in visible_ids
    )
    return VisibleView(
        node_ids=visible_ids,
        nodes=visible_nodes,
        edges=visible_edges,
        hidden_ids=graph.node_ids - visible_ids,
        focus_root_id=focus_root_id,
        hidden_counts=hidden_counts,
    )


__all__ = ['VisibleView', 'resolve_visibility', 'collapsed_ids_of']
