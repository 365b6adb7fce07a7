"""
Node Payload Contracts
======================

Typed payloads for every node kind.

Each NodeType owns exactly one payload variant. All variants share the
fields the engine itself reads (label, collapsed) and the presentation
hints every canvas node carries (color, shape, font size). Keys a
variant does not model are kept in `extras` so a document survives a
decode/encode cycle unchanged.

WIRE NAMES:
===========
Payloads serialize with the canvas' camelCase keys
(fontSize, matrixData, ...). Only this module knows them.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type

from .base import NodeType


def _split(raw: Mapping[str, Any], known: Tuple[str, ...]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Partition a raw mapping into modelled keys and everything else."""
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected an object, got {type(raw).__name__}")
    modelled = {k: raw[k] for k in known if k in raw}
    extras = {k: v for k, v in raw.items() if k not in known}
    return modelled, extras


def _optional_str(value: Any, key: str) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"'{key}' must be a string")


def _list(value: Any, key: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list")
    return value


# =============================================================================
# SUB-ENTITIES
# =============================================================================

@dataclass(frozen=True)
class ChecklistItem:
    item_id: str
    text: str = ""
    done: bool = False
    extras: Dict[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        return {**self.extras, "id": self.item_id, "text": self.text, "done": self.done}

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> ChecklistItem:
        known, extras = _split(raw, ("id", "text", "done"))
        return ChecklistItem(
            item_id=str(known.get("id", "")),
            text=_optional_str(known.get("text", ""), "text") or "",
            done=bool(known.get("done", False)),
            extras=extras,
        )


@dataclass(frozen=True)
class KanbanItem:
    item_id: str
    title: str = ""
    priority: Optional[str] = None  # low, medium, high
    assignee: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        out = {**self.extras, "id": self.item_id, "title": self.title}
        if self.priority is not None:
            out["priority"] = self.priority
        if self.assignee is not None:
            out["assignee"] = self.assignee
        return out

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> KanbanItem:
        known, extras = _split(raw, ("id", "title", "priority", "assignee"))
        return KanbanItem(
            item_id=str(known.get("id", "")),
            title=_optional_str(known.get("title", ""), "title") or "",
            priority=_optional_str(known.get("priority"), "priority"),
            assignee=_optional_str(known.get("assignee"), "assignee"),
            extras=extras,
        )


@dataclass(frozen=True)
class KanbanColumn:
    column_id: str
    title: str = ""
    items: Tuple[KanbanItem, ...] = ()
    extras: Dict[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.extras,
            "id": self.column_id,
            "title": self.title,
            "items": [item.to_dict() for item in self.items],
        }

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> KanbanColumn:
        known, extras = _split(raw, ("id", "title", "items"))
        return KanbanColumn(
            column_id=str(known.get("id", "")),
            title=_optional_str(known.get("title", ""), "title") or "",
            items=tuple(KanbanItem.from_dict(i) for i in _list(known.get("items", []), "items")),
            extras=extras,
        )


@dataclass(frozen=True)
class TimelineEvent:
    event_id: str
    title: str = ""
    date: str = ""
    kind: str = "task"  # milestone, task, deadline
    description: Optional[str] = None
    status: Optional[str] = None  # pending, in-progress, completed
    assignee: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        out = {
            **self.extras,
            "id": self.event_id,
            "title": self.title,
            "date": self.date,
            "type": self.kind,
        }
        for key in ("description", "status", "assignee"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> TimelineEvent:
        known, extras = _split(
            raw, ("id", "title", "date", "type", "description", "status", "assignee")
        )
        return TimelineEvent(
            event_id=str(known.get("id", "")),
            title=_optional_str(known.get("title", ""), "title") or "",
            date=_optional_str(known.get("date", ""), "date") or "",
            kind=_optional_str(known.get("type", "task"), "type") or "task",
            description=_optional_str(known.get("description"), "description"),
            status=_optional_str(known.get("status"), "status"),
            assignee=_optional_str(known.get("assignee"), "assignee"),
            extras=extras,
        )


@dataclass(frozen=True)
class MatrixCell:
    cell_id: str
    content: str = ""
    priority: Optional[str] = None
    category: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        out = {**self.extras, "id": self.cell_id, "content": self.content}
        if self.priority is not None:
            out["priority"] = self.priority
        if self.category is not None:
            out["category"] = self.category
        return out

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> MatrixCell:
        known, extras = _split(raw, ("id", "content", "priority", "category"))
        return MatrixCell(
            cell_id=str(known.get("id", "")),
            content=_optional_str(known.get("content", ""), "content") or "",
            priority=_optional_str(known.get("priority"), "priority"),
            category=_optional_str(known.get("category"), "category"),
            extras=extras,
        )


@dataclass(frozen=True)
class DecisionMatrix:
    title: str = "Decision Matrix"
    rows: Tuple[str, ...] = ()
    columns: Tuple[str, ...] = ()
    cells: Tuple[Tuple[MatrixCell, ...], ...] = ()
    extras: Dict[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.extras,
            "title": self.title,
            "rows": list(self.rows),
            "columns": list(self.columns),
            "cells": [[cell.to_dict() for cell in row] for row in self.cells],
        }

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> DecisionMatrix:
        known, extras = _split(raw, ("title", "rows", "columns", "cells"))
        return DecisionMatrix(
            title=_optional_str(known.get("title", "Decision Matrix"), "title") or "",
            rows=tuple(str(r) for r in _list(known.get("rows", []), "rows")),
            columns=tuple(str(c) for c in _list(known.get("columns", []), "columns")),
            cells=tuple(
                tuple(MatrixCell.from_dict(c) for c in _list(row, "cells"))
                for row in _list(known.get("cells", []), "cells")
            ),
            extras=extras,
        )


# =============================================================================
# PAYLOAD VARIANTS
# =============================================================================

_COMMON_KEYS = ("label", "collapsed", "color", "shape", "fontSize")


@dataclass(frozen=True)
class NodeData:
    """
    Fields shared by every payload variant.

    The engine reads only `label` (search, branch export) and
    `collapsed` (visibility). Everything else is carried for the
    rendering collaborator.
    """
    label: str = ""
    collapsed: bool = False
    color: Optional[str] = None
    shape: Optional[str] = None
    font_size: Optional[float] = None
    extras: Dict[str, Any] = field(default_factory=dict, hash=False)

    node_type: ClassVar[NodeType] = NodeType.GENERIC
    _variant_keys: ClassVar[Tuple[str, ...]] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extras)
        out["label"] = self.label
        if self.collapsed:
            out["collapsed"] = True
        if self.color is not None:
            out["color"] = self.color
        if self.shape is not None:
            out["shape"] = self.shape
        if self.font_size is not None:
            out["fontSize"] = self.font_size
        out.update(self._variant_dict())
        return out

    def _variant_dict(self) -> Dict[str, Any]:
        return {}

    @classmethod
    def _variant_from(cls, known: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> NodeData:
        known, extras = _split(raw, _COMMON_KEYS + cls._variant_keys)
        font_size = known.get("fontSize")
        if font_size is not None and not isinstance(font_size, (int, float)):
            raise ValueError("'fontSize' must be a number")
        return cls(
            label=_optional_str(known.get("label", ""), "label") or "",
            collapsed=bool(known.get("collapsed", False)),
            color=_optional_str(known.get("color"), "color"),
            shape=_optional_str(known.get("shape"), "shape"),
            font_size=font_size,
            extras=extras,
            **cls._variant_from(known),
        )

    def with_changes(self, **changes: Any) -> NodeData:
        return replace(self, **changes)


@dataclass(frozen=True)
class TopicData(NodeData):
    """Plain mind-map topic."""
    node_type: ClassVar[NodeType] = NodeType.GENERIC


@dataclass(frozen=True)
class NoteData(NodeData):
    text: str = ""

    node_type: ClassVar[NodeType] = NodeType.NOTE
    _variant_keys: ClassVar[Tuple[str, ...]] = ("text",)

    def _variant_dict(self) -> Dict[str, Any]:
        return {"text": self.text}

    @classmethod
    def _variant_from(cls, known: Dict[str, Any]) -> Dict[str, Any]:
        return {"text": _optional_str(known.get("text", ""), "text") or ""}


@dataclass(frozen=True)
class ChecklistData(NodeData):
    items: Tuple[ChecklistItem, ...] = ()

    node_type: ClassVar[NodeType] = NodeType.CHECKLIST
    _variant_keys: ClassVar[Tuple[str, ...]] = ("items",)

    def _variant_dict(self) -> Dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items]}

    @classmethod
    def _variant_from(cls, known: Dict[str, Any]) -> Dict[str, Any]:
        raw_items = _list(known.get("items", []), "items")
        return {"items": tuple(ChecklistItem.from_dict(i) for i in raw_items)}


@dataclass(frozen=True)
class KanbanData(NodeData):
    columns: Tuple[KanbanColumn, ...] = ()

    node_type: ClassVar[NodeType] = NodeType.KANBAN
    _variant_keys: ClassVar[Tuple[str, ...]] = ("columns",)

    def _variant_dict(self) -> Dict[str, Any]:
        return {"columns": [column.to_dict() for column in self.columns]}

    @classmethod
    def _variant_from(cls, known: Dict[str, Any]) -> Dict[str, Any]:
        raw_columns = _list(known.get("columns", []), "columns")
        return {"columns": tuple(KanbanColumn.from_dict(c) for c in raw_columns)}


@dataclass(frozen=True)
class TimelineData(NodeData):
    events: Tuple[TimelineEvent, ...] = ()

    node_type: ClassVar[NodeType] = NodeType.TIMELINE
    _variant_keys: ClassVar[Tuple[str, ...]] = ("events",)

    def _variant_dict(self) -> Dict[str, Any]:
        return {"events": [event.to_dict() for event in self.events]}

    @classmethod
    def _variant_from(cls, known: Dict[str, Any]) -> Dict[str, Any]:
        raw_events = _list(known.get("events", []), "events")
        return {"events": tuple(TimelineEvent.from_dict(e) for e in raw_events)}


@dataclass(frozen=True)
class MatrixData(NodeData):
    matrix: DecisionMatrix = field(default_factory=DecisionMatrix)

    node_type: ClassVar[NodeType] = NodeType.MATRIX
    _variant_keys: ClassVar[Tuple[str, ...]] = ("matrixData",)

    def _variant_dict(self) -> Dict[str, Any]:
        return {"matrixData": self.matrix.to_dict()}

    @classmethod
    def _variant_from(cls, known: Dict[str, Any]) -> Dict[str, Any]:
        if "matrixData" not in known:
            return {}
        return {"matrix": DecisionMatrix.from_dict(known["matrixData"])}


PAYLOAD_TYPES: Dict[NodeType, Type[NodeData]] = {
    NodeType.GENERIC: TopicData,
    NodeType.NOTE: NoteData,
    NodeType.CHECKLIST: ChecklistData,
    NodeType.KANBAN: KanbanData,
    NodeType.TIMELINE: TimelineData,
    NodeType.MATRIX: MatrixData,
}


def payload_class(node_type: NodeType) -> Type[NodeData]:
    return PAYLOAD_TYPES[node_type]


def payload_from_dict(node_type: NodeType, raw: Optional[Mapping[str, Any]]) -> NodeData:
    """Decode a wire payload into the variant owned by `node_type`."""
    return payload_class(node_type).from_dict(raw or {})


def empty_payload(node_type: NodeType, **values: Any) -> NodeData:
    """Build a payload of the right variant from attribute values."""
    cls = payload_class(node_type)
    names = {f.name for f in fields(cls)}
    unknown = set(values) - names
    if unknown:
        raise ValueError(
            f"{cls.__name__} has no field(s) {sorted(unknown)}"
        )
    return cls(**values)
