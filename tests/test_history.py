"""
History Manager Tests

Undo/redo cursor bounds, redo-branch truncation and snapshot isolation.
"""

import pytest

from mindgraph.contracts.base import MutationOrigin
from mindgraph.contracts.graph import Graph, Node
from mindgraph.history import HistoryManager

from .fixtures import make_graph, topic


def graph_of(*ids):
    return make_graph(list(ids))


class TestRecording:

    def test_empty_manager(self):
        history = HistoryManager()
        assert history.cursor == -1
        assert history.current is None
        assert not history.can_undo
        assert not history.can_redo
        assert history.undo() is None
        assert history.redo() is None

    def test_record_moves_cursor(self):
        history = HistoryManager()
        history.record(graph_of("a"))
        history.record(graph_of("a", "b"))
        assert history.cursor == 1
        assert history.current.graph == graph_of("a", "b")

    def test_replay_not_recorded(self):
        history = HistoryManager()
        history.record(graph_of("a"))
        assert history.record(graph_of("b"), MutationOrigin.HISTORY_REPLAY) is None
        assert len(history) == 1

    def test_sequence_numbers_increase(self):
        history = HistoryManager()
        first = history.record(graph_of("a"))
        second = history.record(graph_of("b"))
        assert second.sequence > first.sequence

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            HistoryManager(max_snapshots=0)


class TestNavigation:

    def test_undo_past_oldest_is_noop(self):
        """N records then N+5 undos never take the cursor below 0."""
        history = HistoryManager()
        for i in range(4):
            history.record(graph_of(f"n{i}"))
        for _ in range(9):
            history.undo()
            assert history.cursor >= 0
        assert history.cursor == 0
        assert history.current.graph == graph_of("n0")

    def test_redo_past_newest_is_noop(self):
        history = HistoryManager()
        for i in range(3):
            history.record(graph_of(f"n{i}"))
        history.undo()
        history.undo()
        for _ in range(8):
            history.redo()
        assert history.cursor == 2
        assert not history.can_redo

    def test_undo_returns_previous_snapshot(self):
        history = HistoryManager()
        history.record(graph_of("a"))
        history.record(graph_of("b"))
        assert history.undo().graph == graph_of("a")
        assert history.redo().graph == graph_of("b")

    def test_record_after_undo_truncates_redo(self):
        """Undoing k steps then recording drops exactly those k snapshots."""
        history = HistoryManager()
        for i in range(5):
            history.record(graph_of(f"n{i}"))
        history.undo()
        history.undo()
        history.record(graph_of("branch"))

        assert len(history) == 4
        assert not history.can_redo
        assert history.redo() is None
        assert [s.graph for s in history.snapshots][-1] == graph_of("branch")

    def test_clear(self):
        history = HistoryManager()
        history.record(graph_of("a"))
        history.clear()
        assert len(history) == 0
        assert history.cursor == -1


class TestIsolation:

    def test_snapshot_is_deep_copy(self):
        """Mutating extras on the source graph never reaches the snapshot."""
        node = Node(node_id="a", data=topic("a", extras={"tags": ["x"]}))
        graph = Graph(nodes=(node,))
        history = HistoryManager()
        snapshot = history.record(graph)

        node.data.extras["tags"].append("y")
        assert snapshot.nodes[0].data.extras == {"tags": ["x"]}

    def test_navigation_hands_out_copies(self):
        """Mutating what undo/redo return never reaches the stored snapshot."""
        history = HistoryManager()
        history.record(Graph(nodes=(Node(node_id="a", data=topic("a", extras={"tags": ["x"]})),)))
        history.record(graph_of("b"))

        restored = history.undo()
        restored.nodes[0].data.extras["tags"].append("y")
        assert history.current.nodes[0].data.extras == {"tags": ["x"]}
        assert restored.sequence == history.current.sequence

        history.redo()
        assert history.undo().nodes[0].data.extras == {"tags": ["x"]}


class TestEviction:

    def test_oldest_evicted(self):
        history = HistoryManager(max_snapshots=3)
        for i in range(5):
            history.record(graph_of(f"n{i}"))
        assert len(history) == 3
        assert history.cursor == 2
        assert history.snapshots[0].graph == graph_of("n2")

    def test_undo_bounded_by_eviction(self):
        history = HistoryManager(max_snapshots=2)
        for i in range(4):
            history.record(graph_of(f"n{i}"))
        history.undo()
        history.undo()
        assert history.current.graph == graph_of("n2")
