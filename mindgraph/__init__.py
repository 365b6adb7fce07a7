"""
Mind-Map Graph Engine

This package implements the graph engine behind a mind-map canvas as a
set of layers with hard boundaries. Layers communicate only through the
immutable contract types, never through shared mutable state.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Immutable Node, Edge, Graph, SelectionState, Snapshot, payloads
   - Errors as data: Error, ErrorCode, Result

2. CORE (core/)
   - Responsibility: Canonical graph state and mutation primitives
   - Outputs: immutable Graph values, subtree walks, topology metrics
   - MUST NOT: lay out, filter for rendering, record history

3. LAYOUT (layout/)
   - Responsibility: Radial and hierarchical placement
   - Pure functions: (root, nodes, edges) -> nodes with new positions

4. VISIBILITY (visibility/)
   - Responsibility: Collapsed branches and focus (hoist) filtering
   - Recomputed from scratch on every call

5. HISTORY (history/)
   - Responsibility: Snapshot undo/redo with redo-branch truncation
   - Replay mutations are tagged, never recorded

6. TEMPLATES (templates/)
   - Responsibility: Template expansion and saved templates

7. STORAGE (storage/)
   - Responsibility: Graph document codec, backends, debounced autosave

8. SESSION (session.py, intents.py, view/)
   - Responsibility: Orchestration, input dispatch, renderable views

CONSTRAINTS ENFORCED:
=====================
- Deterministic: identical inputs produce identical layouts and views
- Cycle-safe: every traversal keeps a visited set
- Fail-soft: malformed input, dangling edges, missing roots and history
  bounds are recovered locally
"""

from .config import EngineConfig
from .contracts import (
    Node, Edge, Graph, SelectionState, Snapshot, Position,
    NodeType, EdgeType, MutationOrigin, LayoutKind, Axis,
    Error, ErrorCode, Result,
)
from .core import GraphStore, IdFactory, TopologyEngine, branch_export
from .history import HistoryManager
from .intents import InputEvent, IntentDispatcher, IntentKind, intent_for_key
from .layout import apply_layout, hierarchical_layout, radial_layout
from .session import BoardSession
from .templates import TemplateInstantiator
from .visibility import resolve_visibility

__version__ = "0.1.0"

__all__ = [
    'EngineConfig',
    'Node', 'Edge', 'Graph', 'SelectionState', 'Snapshot', 'Position',
    'NodeType', 'EdgeType', 'MutationOrigin', 'LayoutKind', 'Axis',
    'Error', 'ErrorCode', 'Result',
    'GraphStore', 'IdFactory', 'TopologyEngine', 'branch_export',
    'HistoryManager',
    'InputEvent', 'IntentDispatcher', 'IntentKind', 'intent_for_key',
    'apply_layout', 'hierarchical_layout', 'radial_layout',
    'BoardSession',
    'TemplateInstantiator',
    'resolve_visibility',
]
