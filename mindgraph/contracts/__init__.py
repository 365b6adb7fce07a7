"""
Contracts Layer

Immutable types shared by every layer of the engine.
Layers import from here; they never import each other's internals
to obtain data types.
"""

from .base import (
    ErrorCode, Error, Result, Position,
    NodeType, EdgeType, MutationOrigin, LayoutKind, Axis,
)
from .payloads import (
    NodeData, TopicData, NoteData, ChecklistData, KanbanData,
    TimelineData, MatrixData,
    ChecklistItem, KanbanItem, KanbanColumn, TimelineEvent,
    MatrixCell, DecisionMatrix,
    PAYLOAD_TYPES, payload_class, payload_from_dict, empty_payload,
)
from .graph import Node, Edge, EdgeData, Graph, SelectionState, Snapshot

__all__ = [
    'ErrorCode', 'Error', 'Result', 'Position',
    'NodeType', 'EdgeType', 'MutationOrigin', 'LayoutKind', 'Axis',
    'NodeData', 'TopicData', 'NoteData', 'ChecklistData', 'KanbanData',
    'TimelineData', 'MatrixData',
    'ChecklistItem', 'KanbanItem', 'KanbanColumn', 'TimelineEvent',
    'MatrixCell', 'DecisionMatrix',
    'PAYLOAD_TYPES', 'payload_class', 'payload_from_dict', 'empty_payload',
    'Node', 'Edge', 'EdgeData', 'Graph', 'SelectionState', 'Snapshot',
]
