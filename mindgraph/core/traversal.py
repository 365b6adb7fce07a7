"""
Graph Traversal
===============

Shared read-only walks over a Graph.

INVARIANTS:
- Children are listed in edge order (layout tie-break)
- Dangling edges never contribute a child
- Every walk keeps a visited set; cycles terminate
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from ..contracts.graph import Graph


DEFAULT_LIST_TITLE = "New List"
DEFAULT_TASK_TITLE = "New Task"


def children_map(graph: Graph) -> Dict[str, List[str]]:
    """source -> [target, ...] over live edges, in edge order."""
    children: Dict[str, List[str]] = {}
    for edge in graph.live_edges():
        children.setdefault(edge.source, []).append(edge.target)
    return children


def incoming_ids(graph: Graph) -> FrozenSet[str]:
    """Ids of nodes that are the target of at least one live edge."""
    return frozenset(edge.target for edge in graph.live_edges())


def bfs_order(
    root_id: str,
    children: Dict[str, List[str]],
) -> List[str]:
    """Breadth-first visit order from root, root first, each id once."""
    order: List[str] = []
    visited = {root_id}
    queue = deque([root_id])
    while queue:
        current = queue.popleft()
        order.append(current)
        for child in children.get(current, ()):
            if child not in visited:
                visited.add(child)
                queue.append(child)
    return order


def bfs_depths(root_id: str, children: Dict[str, List[str]]) -> Dict[str, int]:
    """Breadth-first depth of every node reachable from root."""
    depth = {root_id: 0}
    queue = deque([root_id])
    while queue:
        current = queue.popleft()
        for child in children.get(current, ()):
            if child not in depth:
                depth[child] = depth[current] + 1
                queue.append(child)
    return depth


def subtree_ids(
    graph: Graph,
    root_id: str,
    children: Optional[Dict[str, List[str]]] = None,
) -> FrozenSet[str]:
    """
    Root plus every node reachable over outgoing edges.

    An absent root has no subtree.
    """
    if not graph.has_node(root_id):
        return frozenset()
    if children is None:
        children = children_map(graph)
    return frozenset(bfs_order(root_id, children))


@dataclass(frozen=True)
class BranchExport:
    """A subtree flattened into a list title and one title per descendant."""
    root_id: str
    list_title: str
    titles: Tuple[str, ...]


def branch_export(graph: Graph, root_id: str) -> Optional[BranchExport]:
    """
    Convert a node's subtree into list/task titles.

    Descendants appear in BFS order; the root itself names the list.
    """
    root = graph.get_node(root_id)
    if root is None:
        return None
    index = graph.node_index()
    descendants = bfs_order(root_id, children_map(graph))[1:]
    titles = tuple(index[node_id].label or DEFAULT_TASK_TITLE for node_id in descendants)
    return BranchExport(
        root_id=root_id,
        list_title=root.label or DEFAULT_LIST_TITLE,
        titles=titles,
    )
