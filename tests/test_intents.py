"""
Intent Dispatch Tests

Key bindings and routing of InputEvents into a board session.
"""

import pytest

from mindgraph.contracts.base import EdgeType, LayoutKind, NodeType, Position
from mindgraph.core.ids import IdFactory
from mindgraph.intents import InputEvent, IntentDispatcher, IntentKind, intent_for_key
from mindgraph.session import BoardSession
from mindgraph.storage import InMemoryGraphStorage, encode_graph

from .fixtures import FakeClock, make_graph, ten_node_graph


def dispatcher_for(graph=None):
    backend = InMemoryGraphStorage()
    if graph is not None:
        backend.write_board("board", encode_graph(graph))
    session = BoardSession.open(
        "board", backend=backend, ids=IdFactory.deterministic(), clock=FakeClock(),
    )
    return IntentDispatcher(session), session


class TestKeyBindings:

    @pytest.mark.parametrize("key,ctrl,shift,expected", [
        ("Delete", False, False, IntentKind.DELETE_SELECTION),
        ("Backspace", False, False, IntentKind.DELETE_SELECTION),
        ("z", True, False, IntentKind.UNDO),
        ("Z", True, True, IntentKind.REDO),
        ("y", True, False, IntentKind.REDO),
        ("Tab", False, False, IntentKind.ADD_CHILD),
        ("Enter", False, False, IntentKind.ADD_SIBLING),
    ])
    def test_bound_keys(self, key, ctrl, shift, expected):
        assert intent_for_key(key, ctrl=ctrl, shift=shift).kind is expected

    def test_unbound_keys(self):
        assert intent_for_key("q") is None
        assert intent_for_key("Tab", ctrl=True) is None

    def test_typing_suppresses_everything(self):
        assert intent_for_key("Backspace", typing=True) is None
        assert intent_for_key("z", ctrl=True, typing=True) is None


class TestDispatch:

    def test_every_kind_has_a_handler(self):
        dispatcher, _ = dispatcher_for()
        assert set(dispatcher._handlers) == set(IntentKind)

    def test_tab_then_enter_builds_siblings(self):
        dispatcher, session = dispatcher_for()
        root = session.graph.nodes[0].node_id
        session.select([root])

        child = dispatcher.dispatch(intent_for_key("Tab"))
        sibling = dispatcher.dispatch(intent_for_key("Enter"))

        assert session.store.incoming_edge(child.node_id).source == root
        assert session.store.incoming_edge(sibling.node_id).source == root
        assert session.selection.node_ids == frozenset({sibling.node_id})

    def test_delete_then_undo_keys(self):
        dispatcher, session = dispatcher_for(ten_node_graph())
        dispatcher.dispatch(InputEvent(IntentKind.SELECT, node_id="B"))
        dispatcher.dispatch(intent_for_key("Delete"))
        assert not session.graph.has_node("B")

        dispatcher.dispatch(intent_for_key("z", ctrl=True))
        assert session.graph.has_node("B")
        dispatcher.dispatch(intent_for_key("y", ctrl=True))
        assert not session.graph.has_node("B")

    def test_add_node_payload(self):
        dispatcher, session = dispatcher_for(make_graph([]))
        node = dispatcher.dispatch(InputEvent(
            IntentKind.ADD_NODE,
            payload={"type": "note", "label": "Memo", "position": (10, 20)},
        ))
        assert node.node_type is NodeType.NOTE
        assert node.label == "Memo"
        assert node.position == Position(10, 20)

    def test_attach_node_with_data(self):
        dispatcher, session = dispatcher_for(make_graph(["a"]))
        node = dispatcher.dispatch(InputEvent(
            IntentKind.ATTACH_NODE, node_id="a",
            payload={"type": "note", "data": {"label": "n", "text": "hello"}},
        ))
        assert node.data.text == "hello"
        assert session.store.incoming_edge(node.node_id).source == "a"

    def test_connect(self):
        dispatcher, session = dispatcher_for(make_graph(["a", "b"]))
        edge = dispatcher.dispatch(InputEvent(
            IntentKind.CONNECT, node_id="a", target_id="b", payload={"edge_type": "labeled"},
        ))
        assert edge.edge_type is EdgeType.LABELED
        assert len(session.graph.edges) == 1

    def test_rename_and_move(self):
        dispatcher, session = dispatcher_for(make_graph(["a"]))
        dispatcher.dispatch_all([
            InputEvent(IntentKind.RENAME, node_id="a", payload={"label": "Alpha"}),
            InputEvent(IntentKind.MOVE_NODE, node_id="a", payload={"position": Position(3, 4)}),
        ])
        node = session.graph.get_node("a")
        assert node.label == "Alpha"
        assert node.position == Position(3, 4)

    def test_focus_and_layout(self):
        dispatcher, session = dispatcher_for(ten_node_graph())
        dispatcher.dispatch(InputEvent(IntentKind.SET_FOCUS_ROOT, node_id="C"))
        dispatcher.dispatch(InputEvent(IntentKind.APPLY_LAYOUT, payload={"layout": LayoutKind.HIERARCHICAL.value}))
        assert session.graph.get_node("C1").position == Position(280, 0)

        dispatcher.dispatch(InputEvent(IntentKind.CLEAR_FOCUS))
        assert session.focus_root_id is None

    def test_apply_template(self):
        dispatcher, session = dispatcher_for()
        result = dispatcher.dispatch(InputEvent(IntentKind.APPLY_TEMPLATE, payload={"template": "timeline"}))
        assert result.is_success
        assert session.pending_layouts == 1

    def test_align_and_distribute(self):
        dispatcher, session = dispatcher_for(make_graph(["a", "b", "c"]))
        session.move_node("b", Position(100, 30))
        session.move_node("c", Position(400, 60))
        dispatcher.dispatch(InputEvent(IntentKind.SELECT, payload={"node_ids": ["a", "b", "c"]}))
        dispatcher.dispatch(InputEvent(IntentKind.ALIGN, payload={"axis": "y"}))
        dispatcher.dispatch(InputEvent(IntentKind.DISTRIBUTE))

        assert [n.position for n in session.graph.nodes] == [
            Position(0, 0), Position(200, 0), Position(400, 0),
        ]

    def test_missing_fields_raise(self):
        dispatcher, _ = dispatcher_for(make_graph(["a"]))
        with pytest.raises(ValueError):
            dispatcher.dispatch(InputEvent(IntentKind.RENAME, node_id="a"))
        with pytest.raises(ValueError):
            dispatcher.dispatch(InputEvent(IntentKind.MOVE_NODE, node_id="a"))
        with pytest.raises(ValueError):
            dispatcher.dispatch(InputEvent(IntentKind.CONNECT, node_id="a"))

    def test_toggle_collapse_uses_selection(self):
        dispatcher, session = dispatcher_for(ten_node_graph())
        session.select(["A"])
        dispatcher.dispatch(InputEvent(IntentKind.TOGGLE_COLLAPSE))
        assert session.graph.get_node("A").collapsed is True
