"""
Renderable View Contracts

Responsibility:
Deterministic transformation of a VisibleView into flat records the
rendering collaborator can draw without touching engine types.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import hashlib
import json

from ..contracts.graph import SelectionState
from ..visibility import VisibleView


@dataclass(frozen=True)
class GraphNodeView:
    """Renderable node."""
    node_id: str
    x: float
    y: float
    label: str
    node_type: str
    color: Optional[str]
    shape: Optional[str]
    is_focus_root: bool
    is_collapsed: bool
    hidden_descendants: int
    selected: bool


@dataclass(frozen=True)
class GraphEdgeView:
    """Renderable edge."""
    edge_id: str
    source_id: str
    target_id: str
    style: str  # plain, smoothstep, labeled
    label: Optional[str]
    selected: bool


@dataclass(frozen=True)
class NetworkGraphView:
    """
    Visible board, in graph order.

    `view_id` is a content hash: equal views share an id.
    """
    view_id: str
    nodes: Tuple[GraphNodeView, ...]
    edges: Tuple[GraphEdgeView, ...]
    focus_root_id: Optional[str] = None

    def node(self, node_id: str) -> Optional[GraphNodeView]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None


def build_view(visible: VisibleView, selection: Optional[SelectionState] = None) -> NetworkGraphView:
    """
    Map resolver output to view records.

    Selection defaults to the flags carried by the visible records.
    """
    if selection is None:
        selection = SelectionState.from_flags(visible.nodes, visible.edges)

    nodes = tuple(
        GraphNodeView(
            node_id=n.node_id,
            x=n.position.x,
            y=n.position.y,
            label=n.label,
            node_type=n.node_type.value,
            color=n.data.color,
            shape=n.data.shape,
            is_focus_root=n.node_id == visible.focus_root_id,
            is_collapsed=n.collapsed,
            hidden_descendants=visible.hidden_counts.get(n.node_id, 0),
            selected=n.node_id in selection.node_ids,
        )
        for n in visible.nodes
    )
    edges = tuple(
        GraphEdgeView(
            edge_id=e.edge_id,
            source_id=e.source,
            target_id=e.target,
            style=e.edge_type.value,
            label=e.data.label,
            selected=e.edge_id in selection.edge_ids,
        )
        for e in visible.edges
    )
    return NetworkGraphView(
        view_id=_view_id(nodes, edges, visible.focus_root_id),
        nodes=nodes,
        edges=edges,
        focus_root_id=visible.focus_root_id,
    )


def _view_id(nodes, edges, focus_root_id) -> str:
    content = json.dumps(
        {
            "nodes": [[n.node_id, n.x, n.y, n.label, n.is_collapsed, n.selected] for n in nodes],
            "edges": [[e.edge_id, e.source_id, e.target_id, e.label, e.selected] for e in edges],
            "focus": focus_root_id,
        },
        sort_keys=True,
    )
    return f"view_{hashlib.sha256(content.encode()).hexdigest()[:16]}"


__all__ = ['GraphNodeView', 'GraphEdgeView', 'NetworkGraphView', 'build_view']
