"""
Input Intents
=============

User input as an explicit event stream.

Key handling and toolbar actions produce InputEvents; one
IntentDispatcher routes every event to the session. Nothing else reads
raw input.

KEY BINDINGS:
=============
- Delete / Backspace       delete selection
- Ctrl+Z                   undo
- Ctrl+Shift+Z / Ctrl+Y    redo
- Tab                      add child to the selected node
- Enter                    add sibling to the selected node
Keys are ignored while the user is typing into a text field.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional
import logging

from .contracts.base import Axis, EdgeType, LayoutKind, NodeType, Position
from .contracts.payloads import empty_payload

logger = logging.getLogger(__name__)


class IntentKind(Enum):
    ADD_NODE = "add_node"
    ADD_CHILD = "add_child"
    ADD_SIBLING = "add_sibling"
    ATTACH_NODE = "attach_node"
    DUPLICATE = "duplicate"
    DELETE_SELECTION = "delete_selection"
    CONNECT = "connect"
    RENAME = "rename"
    MOVE_NODE = "move_node"
    TOGGLE_COLLAPSE = "toggle_collapse"
    SELECT = "select"
    CLEAR_SELECTION = "clear_selection"
    ALIGN = "align"
    DISTRIBUTE = "distribute"
    SET_FOCUS_ROOT = "set_focus_root"
    CLEAR_FOCUS = "clear_focus"
    APPLY_LAYOUT = "apply_layout"
    APPLY_TEMPLATE = "apply_template"
    UNDO = "undo"
    REDO = "redo"


@dataclass(frozen=True)
class InputEvent:
    """
    One user intent.

    `node_id` is the subject node, `target_id` the second node of a
    connect. Anything else rides in `payload`.
    """
    kind: IntentKind
    node_id: Optional[str] = None
    target_id: Optional[str] = None
    payload: Mapping[str, Any] = field(default_factory=dict, hash=False)


def intent_for_key(
    key: str,
    ctrl: bool = False,
    shift: bool = False,
    typing: bool = False,
) -> Optional[InputEvent]:
    """Map a key press to an intent; None when the key is unbound."""
    if typing:
        return None
    if key in ("Delete", "Backspace"):
        return InputEvent(IntentKind.DELETE_SELECTION)
    if ctrl and key.lower() == "z":
        return InputEvent(IntentKind.REDO if shift else IntentKind.UNDO)
    if ctrl and key.lower() == "y":
        return InputEvent(IntentKind.REDO)
    if ctrl:
        return None
    if key == "Tab":
        return InputEvent(IntentKind.ADD_CHILD)
    if key == "Enter":
        return InputEvent(IntentKind.ADD_SIBLING)
    return None


def _require(event: InputEvent, name: str) -> Any:
    if name in ("node_id", "target_id"):
        value = getattr(event, name)
    else:
        value = event.payload.get(name)
    if value is None:
        raise ValueError(f"{event.kind.value} event needs '{name}'")
    return value


def _position(event: InputEvent) -> Optional[Position]:
    raw = event.payload.get("position")
    if raw is None:
        return None
    if isinstance(raw, Position):
        return raw
    x, y = raw
    return Position(float(x), float(y))


class IntentDispatcher:
    """
    Routes InputEvents to a BoardSession.

    dispatch() returns whatever the session operation returns. A
    malformed event (missing a required field) raises ValueError.
    """

    def __init__(self, session):
        self._session = session
        self._handlers: Dict[IntentKind, Callable[[InputEvent], Any]] = {
            IntentKind.ADD_NODE: self._add_node,
            IntentKind.ADD_CHILD: lambda e: session.add_child(e.node_id, e.payload.get("label")),
            IntentKind.ADD_SIBLING: lambda e: session.add_sibling(e.node_id, e.payload.get("label")),
            IntentKind.ATTACH_NODE: self._attach_node,
            IntentKind.DUPLICATE: lambda e: session.duplicate(e.node_id),
            IntentKind.DELETE_SELECTION: lambda e: session.delete_selection(),
            IntentKind.CONNECT: self._connect,
            IntentKind.RENAME: lambda e: session.rename(_require(e, "node_id"), _require(e, "label")),
            IntentKind.MOVE_NODE: self._move_node,
            IntentKind.TOGGLE_COLLAPSE: lambda e: session.toggle_collapse(e.node_id),
            IntentKind.SELECT: self._select,
            IntentKind.CLEAR_SELECTION: lambda e: session.clear_selection(),
            IntentKind.ALIGN: lambda e: session.align_selected(Axis(e.payload.get("axis", "x"))),
            IntentKind.DISTRIBUTE: lambda e: session.distribute_selected(),
            IntentKind.SET_FOCUS_ROOT: lambda e: session.set_focus_root(e.node_id),
            IntentKind.CLEAR_FOCUS: lambda e: session.clear_focus(),
            IntentKind.APPLY_LAYOUT: self._apply_layout,
            IntentKind.APPLY_TEMPLATE: lambda e: session.apply_template(_require(e, "template")),
            IntentKind.UNDO: lambda e: session.undo(),
            IntentKind.REDO: lambda e: session.redo(),
        }

    def dispatch(self, event: InputEvent) -> Any:
        logger.debug("Dispatching %s", event.kind.value)
        return self._handlers[event.kind](event)

    def dispatch_all(self, events: Iterable[InputEvent]) -> List[Any]:
        return [self.dispatch(event) for event in events]

    def _add_node(self, event: InputEvent) -> Any:
        node_type = NodeType(event.payload.get("type", NodeType.GENERIC.value))
        return self._session.add_node(
            position=_position(event),
            node_type=node_type,
            label=event.payload.get("label"),
        )

    def _attach_node(self, event: InputEvent) -> Any:
        node_type = NodeType(_require(event, "type"))
        values = event.payload.get("data")
        data = empty_payload(node_type, **values) if values else None
        return self._session.attach_node(node_type, event.node_id, data)

    def _connect(self, event: InputEvent) -> Any:
        edge_type = EdgeType(event.payload.get("edge_type", EdgeType.PLAIN.value))
        return self._session.connect(
            _require(event, "node_id"), _require(event, "target_id"), edge_type,
        )

    def _move_node(self, event: InputEvent) -> Any:
        position = _position(event)
        if position is None:
            raise ValueError("move_node event needs 'position'")
        return self._session.move_node(_require(event, "node_id"), position)

    def _select(self, event: InputEvent) -> Any:
        node_ids = list(event.payload.get("node_ids", ()))
        if event.node_id is not None:
            node_ids.append(event.node_id)
        return self._session.select(node_ids, event.payload.get("edge_ids", ()))

    def _apply_layout(self, event: InputEvent) -> Any:
        kind = LayoutKind(event.payload.get("layout", LayoutKind.HIERARCHICAL.value))
        return self._session.apply_layout(kind)
