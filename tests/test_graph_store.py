"""
Graph Store Tests
=================

Mutation primitives over the canonical graph.

GUARANTEES VERIFIED:
====================
1. New nodes get fresh ids and become the only selection
2. Deleting the selection cascades to every touching edge, atomically
3. Selection never outlives the nodes and edges it names
4. Missing ids are no-ops; no-ops do not bump the revision
"""

import pytest

from mindgraph.contracts.base import Axis, EdgeType, NodeType, Position
from mindgraph.contracts.payloads import NoteData

from .fixtures import deterministic_store, make_edge, make_node


class TestAddNode:

    def test_new_node_is_sole_selection(self):
        """Adding a node deselects everything else."""
        store = deterministic_store()
        first = store.add_node()
        second = store.add_node()

        assert store.selection.node_ids == frozenset({second.node_id})
        flags = {n.node_id: n.selected for n in store.graph.nodes}
        assert flags == {first.node_id: False, second.node_id: True}

    def test_defaults(self):
        store = deterministic_store()
        node = store.add_node()

        assert node.node_type is NodeType.GENERIC
        assert node.label == "New Node"
        assert node.position == Position(0, 0)

    def test_ids_are_unique(self):
        store = deterministic_store()
        ids = {store.add_node().node_id for _ in range(50)}
        assert len(ids) == 50

    def test_typed_node_gets_matching_payload(self):
        store = deterministic_store()
        node = store.add_node(node_type=NodeType.NOTE, label="Memo")
        assert isinstance(node.data, NoteData)
        assert node.label == "Memo"

    def test_stored_records_never_carry_flags(self):
        """Selection lives in SelectionState; stored records stay unselected."""
        store = deterministic_store()
        node = store.add_node()
        assert store.get_node(node.node_id).selected is False
        assert store.graph.get_node(node.node_id).selected is True


class TestAddEdge:

    def test_endpoints_not_validated(self):
        """Dangling edges are the caller's responsibility."""
        store = deterministic_store()
        edge = store.add_edge("ghost", "phantom")
        assert store.get_edge(edge.edge_id) is not None

    def test_duplicate_explicit_id_rejected(self):
        store = deterministic_store()
        store.add_edge("a", "b", edge_id="e1")
        with pytest.raises(ValueError):
            store.add_edge("b", "c", edge_id="e1")

    def test_generated_edge_ids_unique(self):
        store = deterministic_store()
        ids = {store.add_edge("a", "b").edge_id for _ in range(30)}
        assert len(ids) == 30


class TestDeleteSelected:

    def _store_with_chain(self):
        store = deterministic_store()
        store.replace_all(
            [make_node("a"), make_node("b"), make_node("c")],
            [make_edge("a", "b"), make_edge("b", "c"), make_edge("a", "c")],
        )
        return store

    def test_cascades_edges(self):
        """Every edge touching a removed node goes with it."""
        store = self._store_with_chain()
        store.select(["b"])
        result = store.delete_selected()

        assert result.node_ids == ("b",)
        assert set(result.edge_ids) == {"e_a_b", "e_b_c"}
        graph = store.graph
        assert graph.node_ids == frozenset({"a", "c"})
        assert [e.edge_id for e in graph.edges] == ["e_a_c"]
        assert graph.dangling_edges() == ()

    def test_selected_edge_removed(self):
        store = self._store_with_chain()
        store.select(edge_ids=["e_a_c"])
        store.delete_selected()
        assert store.get_edge("e_a_c") is None
        assert len(store.graph.nodes) == 3

    def test_selection_pruned(self):
        store = self._store_with_chain()
        store.select(["b"], ["e_b_c"])
        store.delete_selected()
        assert store.selection.is_empty

    def test_empty_selection_is_noop(self):
        store = self._store_with_chain()
        store.clear_selection()
        revision = store.revision
        result = store.delete_selected()
        assert not result.changed
        assert store.revision == revision


class TestEditingActions:

    def test_add_child_offset_and_edge(self):
        store = deterministic_store()
        parent = store.add_node(position=Position(10, 20))
        child = store.add_child(parent.node_id)

        assert child.position == Position(210, 140)
        edge = store.incoming_edge(child.node_id)
        assert edge.source == parent.node_id
        assert edge.edge_type is EdgeType.SMOOTHSTEP
        assert store.selection.node_ids == frozenset({child.node_id})

    def test_add_sibling_shares_parent(self):
        store = deterministic_store()
        parent = store.add_node()
        child = store.add_child(parent.node_id)
        sibling = store.add_sibling(child.node_id)

        assert sibling.position == child.position.offset(220, 0)
        assert store.incoming_edge(sibling.node_id).source == parent.node_id

    def test_add_sibling_of_root_has_no_edge(self):
        store = deterministic_store()
        root = store.add_node()
        sibling = store.add_sibling(root.node_id)
        assert store.incoming_edge(sibling.node_id) is None

    def test_attach_node(self):
        store = deterministic_store()
        parent = store.add_node()
        note = store.attach_node(parent.node_id, NodeType.NOTE, NoteData(label="n", text="body"))

        assert note.node_type is NodeType.NOTE
        assert note.position == Position(220, 40)
        assert store.incoming_edge(note.node_id).source == parent.node_id

    def test_duplicate_node(self):
        """Copies are offset, unselected and unconnected."""
        store = deterministic_store()
        source = store.add_node(label="Idea")
        copy = store.duplicate_node(source.node_id)

        assert copy.node_id.startswith(f"{source.node_id}-copy-")
        assert copy.position == Position(40, 40)
        assert copy.label == "Idea"
        assert store.selection.node_ids == frozenset({source.node_id})
        assert store.incoming_edge(copy.node_id) is None

    def test_missing_ids_are_noops(self):
        store = deterministic_store()
        revision = store.revision
        assert store.add_child("missing") is None
        assert store.add_sibling("missing") is None
        assert store.duplicate_node("missing") is None
        assert store.move_node("missing", Position(1, 1)) is None
        assert store.toggle_collapsed("missing") is None
        assert store.set_edge_label("missing", "x") is None
        assert not store.remove_node("missing").changed
        assert store.revision == revision

    def test_unchanged_update_keeps_revision(self):
        store = deterministic_store()
        node = store.add_node(label="Same")
        revision = store.revision
        store.update_node_data(node.node_id, label="Same")
        assert store.revision == revision

    def test_toggle_collapsed(self):
        store = deterministic_store()
        node = store.add_node()
        assert store.toggle_collapsed(node.node_id).collapsed is True
        assert store.toggle_collapsed(node.node_id).collapsed is False

    def test_remove_node_cascades(self):
        store = deterministic_store()
        store.replace_all([make_node("a"), make_node("b")], [make_edge("a", "b")])
        result = store.remove_node("a")
        assert result.edge_ids == ("e_a_b",)
        assert store.graph.edges == ()


class TestSelectionTools:

    def _spread(self):
        store = deterministic_store()
        store.replace_all(
            [make_node("a", 0, 50), make_node("b", 300, 10), make_node("c", 100, 90)],
            [],
        )
        return store

    def test_select_drops_unknown_ids(self):
        store = self._spread()
        selection = store.select(["a", "nope"], ["nope"])
        assert selection.node_ids == frozenset({"a"})
        assert selection.edge_ids == frozenset()

    def test_align_x(self):
        store = self._spread()
        store.select(["a", "b"])
        store.align_selected(Axis.X)
        assert store.get_node("b").position == Position(0, 10)

    def test_align_y(self):
        store = self._spread()
        store.select(["a", "b", "c"])
        store.align_selected(Axis.Y)
        assert {n.position.y for n in store.graph.nodes} == {10}

    def test_align_needs_two(self):
        store = self._spread()
        store.select(["a"])
        assert store.align_selected(Axis.X) == 0

    def test_distribute_horizontally(self):
        store = self._spread()
        store.select(["a", "b", "c"])
        store.distribute_selected_horizontally()
        assert store.get_node("a").position.x == 0
        assert store.get_node("c").position.x == 150
        assert store.get_node("b").position.x == 300

    def test_selected_node_follows_graph_order(self):
        store = self._spread()
        store.select(["c", "a"])
        assert store.selected_node().node_id == "a"


class TestLookup:

    def test_find_by_label_trims(self):
        store = deterministic_store()
        store.replace_all([make_node("a", label="  Plan  ")], [])
        assert store.find_by_label("Plan").node_id == "a"
        assert store.find_by_label("Other") is None

    def test_search_labels_and_note_text(self):
        store = deterministic_store()
        store.replace_all(
            [
                make_node("a", label="Budget"),
                make_node("b", label="Memo", node_type=NodeType.NOTE),
                make_node("c", label="Other"),
            ],
            [],
        )
        store.update_node_data("b", text="review the BUDGET")
        assert [n.node_id for n in store.search("budget")] == ["a", "b"]
        assert store.search("   ") == ()


class TestBulk:

    def test_replace_all_reads_selection_flags(self):
        store = deterministic_store()
        store.replace_all(
            [make_node("a", selected=True), make_node("b")],
            [make_edge("a", "b", selected=True)],
        )
        assert store.selection.node_ids == frozenset({"a"})
        assert store.selection.edge_ids == frozenset({"e_a_b"})
        assert store.graph.get_node("a").selected is True

    def test_extend_rejects_clashes(self):
        store = deterministic_store()
        store.replace_all([make_node("a")], [])
        with pytest.raises(ValueError):
            store.extend([make_node("a")], [])

    def test_apply_positions_counts_moves(self):
        store = deterministic_store()
        store.replace_all([make_node("a"), make_node("b")], [])
        moved = store.apply_positions([make_node("a", 5, 5), make_node("b"), make_node("zzz", 1, 1)])
        assert moved == 1
        assert store.get_node("a").position == Position(5, 5)
