"""
Core Graph Layer

RESPONSIBILITY: Canonical graph state, id generation, traversal, topology
ALLOWED INPUTS: Contract types (Node, Edge, Graph, Position)
OUTPUTS: Immutable Graph values, BranchExport, GraphMetrics

WHAT THIS LAYER MUST NOT DO:
============================
- Compute layouts (layout package)
- Decide what is rendered (visibility package)
- Record history or persist anything
- Interpret node payloads beyond label, text and collapsed

BOUNDARY ENFORCEMENT:
=====================
- The store is the only mutable object; it hands out immutable Graphs
- Traversals are free functions over a Graph, visited-set guarded
"""

from .ids import IdClock, IdFactory, ClockExhausted
from .store import GraphStore, DeleteResult
from .traversal import (
    children_map, incoming_ids, bfs_order, bfs_depths, subtree_ids,
    BranchExport, branch_export,
)
from .topology import TopologyEngine, GraphMetrics, analyze

__all__ = [
    'IdClock', 'IdFactory', 'ClockExhausted',
    'GraphStore', 'DeleteResult',
    'children_map', 'incoming_ids', 'bfs_order', 'bfs_depths', 'subtree_ids',
    'BranchExport', 'branch_export',
    'TopologyEngine', 'GraphMetrics', 'analyze',
]
