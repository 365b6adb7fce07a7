"""
Board Session
=============

Orchestrates one board: store, history, visibility, layout, templates
and autosave.

DESIGN PRINCIPLES:
==================
1. Every graph mutation commits through one path: schedule persistence,
   then record history (unless the mutation replays history)
2. Components communicate only through contract types
3. Time enters only through `now` arguments or the injected clock;
   deferred work runs from tick()
4. Failures are recovered locally; nothing here is fatal to the session
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging
import time

from .config import EngineConfig
from .contracts.base import (
    Axis, EdgeType, LayoutKind, MutationOrigin, NodeType, Position, Result,
)
from .contracts.graph import Edge, Graph, Node, SelectionState, Snapshot
from .contracts.payloads import NodeData, TopicData
from .core.ids import IdFactory
from .core.store import DeleteResult, GraphStore
from .core.topology import GraphMetrics, analyze
from .core.traversal import BranchExport, branch_export
from .history import HistoryManager
from .layout import apply_layout, default_root, hierarchical_root
from .storage import AutosaveScheduler, GraphStorageBackend, create_backend, decode_graph
from .templates import SavedTemplateLibrary, TemplateInstantiator
from .view import NetworkGraphView, build_view
from .visibility import VisibleView, resolve_visibility

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickReport:
    """What one tick() did."""
    layouts_run: int = 0
    writes: int = 0


class BoardSession:
    """
    Single-writer session over one board.

    LIFECYCLE:
    ==========
    1. Construct, then load() (or use BoardSession.open)
    2. Apply edits; each one commits and becomes an undo step
    3. Call tick(now) from the host loop to run deferred layouts and
       debounced writes; flush() before shutdown
    """

    def __init__(
        self,
        board_id: str = "default",
        config: Optional[EngineConfig] = None,
        backend: Optional[GraphStorageBackend] = None,
        ids: Optional[IdFactory] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._board_id = board_id
        self._config = config or EngineConfig()
        self._ids = ids or IdFactory()
        self._backend = backend or create_backend(self._config.storage)
        self._clock = clock

        self._store = GraphStore(self._ids, self._config.nodes)
        self._history = HistoryManager(self._config.history.max_snapshots)
        self._autosave = AutosaveScheduler(
            self._backend, self._config.storage.debounce_seconds, clock,
        )
        self._instantiator = TemplateInstantiator(self._ids, self._config.templates)
        self._saved_templates = SavedTemplateLibrary(self._backend, self._ids)

        self._focus_root_id: Optional[str] = None
        # template root id -> due time of its deferred hierarchical layout
        self._deferred_layouts: Dict[str, float] = {}

    @classmethod
    def open(cls, board_id: str = "default", **kwargs: Any) -> BoardSession:
        session = cls(board_id, **kwargs)
        session.load()
        return session

    # =========================================================================
    # LOADING
    # =========================================================================

    def load(self) -> Graph:
        """
        Load the board from storage and reset history to it.

        No stored document: a single "Central Idea" topic at the origin.
        Unreadable or malformed document: an empty board.
        """
        read = self._backend.read_board(self._board_id)
        if read.is_failure:
            logger.warning("Discarding unreadable board %s: %s", self._board_id, read.error.message)
            graph = Graph.empty()
        elif read.value is None:
            graph = self._initial_graph()
        else:
            decoded = decode_graph(read.value)
            if decoded.is_failure:
                logger.warning(
                    "Discarding malformed board %s: %s", self._board_id, decoded.error.message,
                )
                graph = Graph.empty()
            else:
                graph = decoded.value

        self._store.replace_graph(graph)
        self._focus_root_id = None
        self._deferred_layouts.clear()
        self._history.clear()
        self._history.record(self._store.graph, MutationOrigin.USER_EDIT)
        logger.info("Loaded board %s: %d nodes, %d edges", self._board_id, len(graph.nodes), len(graph.edges))
        return self._store.graph

    def _initial_graph(self) -> Graph:
        node = Node(
            node_id=self._ids.node_id(),
            position=Position.origin(),
            node_type=NodeType.GENERIC,
            data=TopicData(label=self._config.nodes.initial_label),
        )
        return Graph(nodes=(node,))

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def board_id(self) -> str:
        return self._board_id

    @property
    def graph(self) -> Graph:
        return self._store.graph

    @property
    def selection(self) -> SelectionState:
        return self._store.selection

    @property
    def focus_root_id(self) -> Optional[str]:
        return self._focus_root_id

    @property
    def history(self) -> HistoryManager:
        return self._history

    @property
    def store(self) -> GraphStore:
        return self._store

    @property
    def saved_templates(self) -> SavedTemplateLibrary:
        return self._saved_templates

    def selected_node(self) -> Optional[Node]:
        return self._store.selected_node()

    def visible(self) -> VisibleView:
        return resolve_visibility(self._store.graph, focus_root_id=self._focus_root_id)

    def view(self) -> NetworkGraphView:
        return build_view(self.visible(), self._store.selection)

    def metrics(self) -> GraphMetrics:
        return analyze(self._store.graph)

    def branch_export(self, node_id: Optional[str] = None) -> Optional[BranchExport]:
        """Subtree of `node_id` (default: selected node) as list/task titles."""
        node_id = node_id or self._selected_id()
        if node_id is None:
            return None
        return branch_export(self._store.graph, node_id)

    def search(self, query: str) -> List[Node]:
        return list(self._store.search(query))

    # =========================================================================
    # EDITING
    # =========================================================================

    def add_node(
        self,
        position: Optional[Position] = None,
        node_type: NodeType = NodeType.GENERIC,
        data: Optional[NodeData] = None,
        label: Optional[str] = None,
    ) -> Node:
        return self._mutate(self._store.add_node, position, node_type, data, label)

    def add_child(self, parent_id: Optional[str] = None, label: Optional[str] = None) -> Optional[Node]:
        parent_id = parent_id or self._selected_id()
        if parent_id is None:
            return None
        return self._mutate(self._store.add_child, parent_id, label)

    def add_sibling(self, node_id: Optional[str] = None, label: Optional[str] = None) -> Optional[Node]:
        node_id = node_id or self._selected_id()
        if node_id is None:
            return None
        return self._mutate(self._store.add_sibling, node_id, label)

    def attach_node(
        self,
        node_type: NodeType,
        parent_id: Optional[str] = None,
        data: Optional[NodeData] = None,
    ) -> Optional[Node]:
        parent_id = parent_id or self._selected_id()
        if parent_id is None:
            return None
        return self._mutate(self._store.attach_node, parent_id, node_type, data)

    def duplicate(self, node_id: Optional[str] = None) -> Optional[Node]:
        node_id = node_id or self._selected_id()
        if node_id is None:
            return None
        return self._mutate(self._store.duplicate_node, node_id)

    def connect(self, source: str, target: str, edge_type: EdgeType = EdgeType.PLAIN) -> Edge:
        return self._mutate(self._store.connect, source, target, edge_type)

    def rename(self, node_id: str, label: str) -> Optional[Node]:
        return self._mutate(self._store.update_node_data, node_id, label=label)

    def update_node(self, node_id: str, **changes: Any) -> Optional[Node]:
        return self._mutate(self._store.update_node_data, node_id, **changes)

    def move_node(self, node_id: str, position: Position) -> Optional[Node]:
        return self._mutate(self._store.move_node, node_id, position)

    def toggle_collapse(self, node_id: Optional[str] = None) -> Optional[Node]:
        node_id = node_id or self._selected_id()
        if node_id is None:
            return None
        return self._mutate(self._store.toggle_collapsed, node_id)

    def set_edge_label(self, edge_id: str, label: Optional[str]) -> Optional[Edge]:
        return self._mutate(self._store.set_edge_label, edge_id, label)

    def delete_selection(self) -> DeleteResult:
        return self._mutate(self._store.delete_selected)

    def remove_node(self, node_id: str) -> DeleteResult:
        return self._mutate(self._store.remove_node, node_id)

    def align_selected(self, axis: Axis) -> int:
        return self._mutate(self._store.align_selected, axis)

    def distribute_selected(self) -> int:
        return self._mutate(self._store.distribute_selected_horizontally)

    # =========================================================================
    # SELECTION AND FOCUS (not history steps)
    # =========================================================================

    def select(self, node_ids: Iterable[str] = (), edge_ids: Iterable[str] = ()) -> SelectionState:
        return self._store.select(node_ids, edge_ids)

    def clear_selection(self) -> SelectionState:
        return self._store.clear_selection()

    def set_focus_root(self, node_id: Optional[str] = None) -> bool:
        """Hoist the view to `node_id` (default: selected node)."""
        node_id = node_id or self._selected_id()
        if node_id is None or self._store.get_node(node_id) is None:
            return False
        self._focus_root_id = node_id
        return True

    def clear_focus(self) -> None:
        self._focus_root_id = None

    # =========================================================================
    # LAYOUT
    # =========================================================================

    def apply_layout(self, kind: LayoutKind, now: Optional[float] = None) -> int:
        """
        Lay out the board and write positions back.

        Radial roots at the default root; hierarchical prefers the focus
        root. Returns how many nodes moved.
        """
        graph = self._store.graph
        if kind is LayoutKind.RADIAL:
            root_id = default_root(graph)
        else:
            root_id = hierarchical_root(graph, self._focus_root_id)
        if root_id is None:
            return 0
        return self._layout_from(kind, root_id, now)

    def _layout_from(self, kind: LayoutKind, root_id: str, now: Optional[float] = None) -> int:
        laid_out = apply_layout(kind, self._store.graph, root_id, self._config.layout)
        return self._mutate(self._store.apply_positions, laid_out.nodes, now=now)

    # =========================================================================
    # TEMPLATES
    # =========================================================================

    def apply_template(self, key: str, now: Optional[float] = None) -> Result:
        """
        Append a built-in template and select its root.

        A hierarchical layout from the template root runs on the first
        tick after `layout_delay`. Unknown keys return the failure Result
        and leave the board untouched.
        """
        graph = self._store.graph
        result = self._instantiator.instantiate(
            key,
            taken_node_ids=graph.node_ids,
            taken_edge_ids=[e.edge_id for e in graph.edges],
        )
        if result.is_failure:
            return result

        template = result.value
        self._store.extend(template.nodes, template.edges)
        self._store.select([template.root_id])
        now = self._clock() if now is None else now
        self._commit(now=now)
        self._deferred_layouts[template.root_id] = now + self._config.templates.layout_delay
        return result

    def save_as_template(self, name: str) -> Result:
        return self._saved_templates.save(name, self._store.graph)

    def apply_saved_template(self, template_id: str) -> Result:
        """Replace the whole board with a saved template. Result[Graph]."""
        result = self._saved_templates.load_graph(template_id)
        if result.is_failure:
            return result
        self._store.replace_graph(result.value)
        self._commit()
        return Result.success(self._store.graph)

    # =========================================================================
    # HISTORY
    # =========================================================================

    def undo(self) -> Optional[Snapshot]:
        return self._replay(self._history.undo())

    def redo(self) -> Optional[Snapshot]:
        return self._replay(self._history.redo())

    def _replay(self, snapshot: Optional[Snapshot]) -> Optional[Snapshot]:
        if snapshot is None:
            return None
        self._store.replace_graph(snapshot.graph)
        self._commit(MutationOrigin.HISTORY_REPLAY)
        return snapshot

    # =========================================================================
    # DEFERRED WORK
    # =========================================================================

    def tick(self, now: Optional[float] = None) -> TickReport:
        """Run due template layouts, then due autosaves."""
        now = self._clock() if now is None else now
        due = [root for root, at in self._deferred_layouts.items() if at <= now]
        for root_id in due:
            del self._deferred_layouts[root_id]
            self._layout_from(LayoutKind.HIERARCHICAL, root_id, now)
        writes = self._autosave.tick(now)
        return TickReport(layouts_run=len(due), writes=len(writes))

    def flush(self) -> int:
        """Write any pending autosave now. Returns the number of writes."""
        return len(self._autosave.flush())

    @property
    def pending_layouts(self) -> int:
        return len(self._deferred_layouts)

    # =========================================================================
    # COMMIT PATH
    # =========================================================================

    def _mutate(self, operation: Callable[..., Any], *args: Any, now: Optional[float] = None, **kwargs: Any) -> Any:
        before = self._store.revision
        outcome = operation(*args, **kwargs)
        if self._store.revision != before:
            self._commit(now=now)
        return outcome

    def _commit(self, origin: MutationOrigin = MutationOrigin.USER_EDIT, now: Optional[float] = None) -> None:
        graph = self._store.graph
        self._autosave.schedule(self._board_id, graph, now)
        self._history.record(graph, origin)
        if self._focus_root_id is not None and not graph.has_node(self._focus_root_id):
            logger.debug("Focus root %s removed; clearing focus", self._focus_root_id)
            self._focus_root_id = None

    def _selected_id(self) -> Optional[str]:
        node = self._store.selected_node()
        return None if node is None else node.node_id
