"""
Graph Store
===========

Canonical owner of the board's nodes, edges and selection.

RESPONSIBILITY: mutation primitives over the graph
OUTPUTS: immutable Graph values (with selection flags materialised)

GUARANTEES:
===========
1. Node and edge ids are unique; generated ids never collide
2. Deleting nodes cascades to every edge touching them, atomically
3. Selection never references a removed node or edge
4. Every successful mutation bumps `revision`; no-ops do not

Mutations addressed at a missing id are no-ops that return None.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from ..config import NodeDefaults
from ..contracts.base import Axis, EdgeType, NodeType, Position
from ..contracts.graph import Edge, EdgeData, Graph, Node, SelectionState
from ..contracts.payloads import NodeData, empty_payload
from .ids import IdFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteResult:
    """What a delete removed. Empty tuples mean nothing changed."""
    node_ids: Tuple[str, ...] = ()
    edge_ids: Tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.node_ids or self.edge_ids)


class GraphStore:
    """
    Mutable graph container.

    Nodes and edges are held as immutable records; a mutation replaces
    the affected record. `graph` hands out an immutable view.
    """

    def __init__(
        self,
        ids: Optional[IdFactory] = None,
        defaults: Optional[NodeDefaults] = None,
    ):
        self._ids = ids or IdFactory()
        self._defaults = defaults or NodeDefaults()
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []
        self._selection = SelectionState()
        self._revision = 0

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def selection(self) -> SelectionState:
        return self._selection

    @property
    def graph(self) -> Graph:
        """Immutable view with selection flags taken from `selection`."""
        node_sel = self._selection.node_ids
        edge_sel = self._selection.edge_ids
        nodes = tuple(
            replace(n, selected=True) if n.node_id in node_sel else n
            for n in self._nodes
        )
        edges = tuple(
            replace(e, selected=True) if e.edge_id in edge_sel else e
            for e in self._edges
        )
        return Graph(nodes=nodes, edges=edges)

    def get_node(self, node_id: str) -> Optional[Node]:
        index = self._node_position(node_id)
        return None if index is None else self._nodes[index]

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        for edge in self._edges:
            if edge.edge_id == edge_id:
                return edge
        return None

    def selected_node(self) -> Optional[Node]:
        """First selected node in graph order (inspector target)."""
        for node in self._nodes:
            if node.node_id in self._selection.node_ids:
                return node
        return None

    def find_by_label(self, title: str) -> Optional[Node]:
        wanted = title.strip()
        for node in self._nodes:
            if node.label.strip() == wanted:
                return node
        return None

    def search(self, query: str) -> Tuple[Node, ...]:
        """Nodes whose label or note text contains `query`, case-insensitive."""
        needle = query.strip().lower()
        if not needle:
            return ()
        hits = []
        for node in self._nodes:
            text = getattr(node.data, "text", "")
            if needle in node.label.lower() or needle in text.lower():
                hits.append(node)
        return tuple(hits)

    def incoming_edge(self, node_id: str) -> Optional[Edge]:
        for edge in self._edges:
            if edge.target == node_id:
                return edge
        return None

    # =========================================================================
    # CREATION
    # =========================================================================

    def add_node(
        self,
        position: Optional[Position] = None,
        node_type: NodeType = NodeType.GENERIC,
        data: Optional[NodeData] = None,
        label: Optional[str] = None,
    ) -> Node:
        """
        Create a node with a fresh id and make it the only selection.
        """
        if data is None:
            data = empty_payload(node_type, label=label if label is not None else self._defaults.label)
        elif label is not None:
            data = data.with_changes(label=label)
        node = Node(
            node_id=self._ids.node_id(taken=self._node_ids()),
            position=position or Position.origin(),
            node_type=node_type,
            data=data,
        )
        self._nodes.append(node)
        self._selection = SelectionState().only_node(node.node_id)
        self._touch()
        return node

    def add_edge(
        self,
        source: str,
        target: str,
        edge_type: EdgeType = EdgeType.PLAIN,
        label: Optional[str] = None,
        edge_id: Optional[str] = None,
    ) -> Edge:
        """
        Append an edge. Endpoints are not validated; ids must be unique.
        """
        taken = self._edge_ids()
        if edge_id is None:
            edge_id = self._ids.edge_id(taken=taken)
        elif edge_id in taken:
            raise ValueError(f"Edge id already exists: {edge_id}")
        edge = Edge(
            edge_id=edge_id,
            source=source,
            target=target,
            edge_type=edge_type,
            data=EdgeData(label=label),
        )
        self._edges.append(edge)
        self._touch()
        return edge

    def connect(self, source: str, target: str, edge_type: EdgeType = EdgeType.PLAIN) -> Edge:
        return self.add_edge(source, target, edge_type)

    def add_child(self, parent_id: str, label: Optional[str] = None) -> Optional[Node]:
        """New node below-right of the parent, linked parent -> child."""
        parent = self.get_node(parent_id)
        if parent is None:
            return None
        dx, dy = self._defaults.child_offset
        child = self.add_node(position=parent.position.offset(dx, dy), label=label)
        self.add_edge(parent.node_id, child.node_id, EdgeType.SMOOTHSTEP)
        return child

    def add_sibling(self, node_id: str, label: Optional[str] = None) -> Optional[Node]:
        """
        New node beside `node_id`, linked from the same parent when the
        node has one (first incoming edge wins).
        """
        node = self.get_node(node_id)
        if node is None:
            return None
        incoming = self.incoming_edge(node_id)
        dx, dy = self._defaults.sibling_offset
        sibling = self.add_node(position=node.position.offset(dx, dy), label=label)
        if incoming is not None:
            self.add_edge(incoming.source, sibling.node_id, EdgeType.SMOOTHSTEP)
        return sibling

    def attach_node(
        self,
        parent_id: str,
        node_type: NodeType,
        data: Optional[NodeData] = None,
    ) -> Optional[Node]:
        """Typed node (note, checklist, ...) hung off an existing node."""
        parent = self.get_node(parent_id)
        if parent is None:
            return None
        dx, dy = self._defaults.attach_offset
        node = self.add_node(
            position=parent.position.offset(dx, dy),
            node_type=node_type,
            data=data,
        )
        self.add_edge(parent.node_id, node.node_id, EdgeType.SMOOTHSTEP)
        return node

    def duplicate_node(self, node_id: str) -> Optional[Node]:
        """Unselected copy of a node, offset diagonally; edges are not copied."""
        source = self.get_node(node_id)
        if source is None:
            return None
        dx, dy = self._defaults.duplicate_offset
        copy = replace(
            source,
            node_id=self._ids.copy_id(source.node_id, taken=self._node_ids()),
            position=source.position.offset(dx, dy),
            selected=False,
        )
        self._nodes.append(copy)
        self._touch()
        return copy

    # =========================================================================
    # UPDATES
    # =========================================================================

    def update_node_data(self, node_id: str, **changes: Any) -> Optional[Node]:
        index = self._node_position(node_id)
        if index is None:
            return None
        node = self._nodes[index]
        updated = replace(node, data=node.data.with_changes(**changes))
        if updated == node:
            return node
        self._nodes[index] = updated
        self._touch()
        return updated

    def move_node(self, node_id: str, position: Position) -> Optional[Node]:
        index = self._node_position(node_id)
        if index is None:
            return None
        node = self._nodes[index]
        if node.position == position:
            return node
        self._nodes[index] = node.moved_to(position)
        self._touch()
        return self._nodes[index]

    def set_collapsed(self, node_id: str, collapsed: bool) -> Optional[Node]:
        return self.update_node_data(node_id, collapsed=collapsed)

    def toggle_collapsed(self, node_id: str) -> Optional[Node]:
        node = self.get_node(node_id)
        if node is None:
            return None
        return self.set_collapsed(node_id, not node.collapsed)

    def set_edge_label(self, edge_id: str, label: Optional[str]) -> Optional[Edge]:
        for i, edge in enumerate(self._edges):
            if edge.edge_id == edge_id:
                if edge.data.label == label:
                    return edge
                self._edges[i] = replace(edge, data=EdgeData(label=label))
                self._touch()
                return self._edges[i]
        return None

    def apply_positions(self, laid_out: Iterable[Node]) -> int:
        """
        Copy positions from layout output onto stored nodes.

        Only positions are taken; ids absent from the store are ignored.
        Returns the number of nodes that moved.
        """
        positions: Dict[str, Position] = {n.node_id: n.position for n in laid_out}
        moved = 0
        for i, node in enumerate(self._nodes):
            target = positions.get(node.node_id)
            if target is not None and target != node.position:
                self._nodes[i] = node.moved_to(target)
                moved += 1
        if moved:
            self._touch()
        return moved

    # =========================================================================
    # SELECTION
    # =========================================================================

    def select(self, node_ids: Iterable[str] = (), edge_ids: Iterable[str] = ()) -> SelectionState:
        """Replace the selection; unknown ids are dropped."""
        existing_nodes = self._node_ids()
        existing_edges = self._edge_ids()
        selection = SelectionState(
            node_ids=frozenset(i for i in node_ids if i in existing_nodes),
            edge_ids=frozenset(i for i in edge_ids if i in existing_edges),
        )
        if selection != self._selection:
            self._selection = selection
            self._touch()
        return self._selection

    def clear_selection(self) -> SelectionState:
        return self.select()

    def align_selected(self, axis: Axis) -> int:
        """Snap selected nodes to the smallest x (or y). Needs two or more."""
        selected = [n for n in self._nodes if n.node_id in self._selection.node_ids]
        if len(selected) < 2:
            return 0
        if axis is Axis.X:
            x = min(n.position.x for n in selected)
            moved = [n.moved_to(Position(x, n.position.y)) for n in selected]
        else:
            y = min(n.position.y for n in selected)
            moved = [n.moved_to(Position(n.position.x, y)) for n in selected]
        return self.apply_positions(moved)

    def distribute_selected_horizontally(self) -> int:
        """Even x spacing between the leftmost and rightmost selected nodes."""
        selected = sorted(
            (n for n in self._nodes if n.node_id in self._selection.node_ids),
            key=lambda n: n.position.x,
        )
        if len(selected) < 3:
            return 0
        min_x = selected[0].position.x
        step = (selected[-1].position.x - min_x) / (len(selected) - 1)
        moved = [
            n.moved_to(Position(min_x + step * i, n.position.y))
            for i, n in enumerate(selected)
        ]
        return self.apply_positions(moved)

    # =========================================================================
    # REMOVAL
    # =========================================================================

    def delete_selected(self) -> DeleteResult:
        """
        Remove selected nodes, selected edges, and every edge touching a
        removed node, in one step.
        """
        doomed_nodes = frozenset(self._selection.node_ids)
        doomed_edges = self._selection.edge_ids
        if not doomed_nodes and not doomed_edges:
            return DeleteResult()
        return self._remove(doomed_nodes, doomed_edges)

    def remove_node(self, node_id: str) -> DeleteResult:
        if self._node_position(node_id) is None:
            return DeleteResult()
        return self._remove(frozenset({node_id}), frozenset())

    def remove_edge(self, edge_id: str) -> DeleteResult:
        if self.get_edge(edge_id) is None:
            return DeleteResult()
        return self._remove(frozenset(), frozenset({edge_id}))

    def _remove(self, node_ids, edge_ids) -> DeleteResult:
        kept_nodes = [n for n in self._nodes if n.node_id not in node_ids]
        kept_edges = []
        removed_edges = []
        for edge in self._edges:
            if edge.edge_id in edge_ids or edge.touches(node_ids):
                removed_edges.append(edge.edge_id)
            else:
                kept_edges.append(edge)
        removed_nodes = tuple(n.node_id for n in self._nodes if n.node_id in node_ids)

        # Both lists swap together so no reader sees dangling edges
        self._nodes, self._edges = kept_nodes, kept_edges
        self._selection = SelectionState(
            node_ids=self._selection.node_ids - node_ids,
            edge_ids=self._selection.edge_ids - frozenset(removed_edges),
        )
        self._touch()
        return DeleteResult(node_ids=removed_nodes, edge_ids=tuple(removed_edges))

    # =========================================================================
    # BULK
    # =========================================================================

    def replace_all(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        """
        Swap in a whole graph (import, template replace, undo/redo).

        Selection is read from the incoming records' flags.
        """
        graph = Graph(nodes=tuple(nodes), edges=tuple(edges))
        self._nodes = [replace(n, selected=False) if n.selected else n for n in graph.nodes]
        self._edges = [replace(e, selected=False) if e.selected else e for e in graph.edges]
        self._selection = graph.selection
        self._touch()
        logger.debug("Store replaced: %d nodes, %d edges", len(self._nodes), len(self._edges))

    def replace_graph(self, graph: Graph) -> None:
        self.replace_all(graph.nodes, graph.edges)

    def extend(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        """Append a prepared subgraph (template output); ids must be free."""
        clash = self._node_ids() & {n.node_id for n in nodes}
        if clash:
            raise ValueError(f"Node ids already exist: {sorted(clash)}")
        edge_clash = self._edge_ids() & {e.edge_id for e in edges}
        if edge_clash:
            raise ValueError(f"Edge ids already exist: {sorted(edge_clash)}")
        self._nodes.extend(replace(n, selected=False) for n in nodes)
        self._edges.extend(replace(e, selected=False) for e in edges)
        self._touch()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _touch(self) -> None:
        self._revision += 1

    def _node_ids(self) -> set:
        return {n.node_id for n in self._nodes}

    def _edge_ids(self) -> set:
        return {e.edge_id for e in self._edges}

    def _node_position(self, node_id: str) -> Optional[int]:
        for i, node in enumerate(self._nodes):
            if node.node_id == node_id:
                return i
        return None
