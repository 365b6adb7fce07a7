"""
Layout Engine Tests
===================

Radial and hierarchical placement.

GUARANTEES VERIFIED:
====================
1. Only positions change; everything else on a node is untouched
2. Children are placed in edge order
3. Unreachable nodes keep their position; an absent root is a no-op
4. Cycles and dangling edges are tolerated
"""

import math

import pytest

from mindgraph.config import LayoutConfig
from mindgraph.contracts.base import LayoutKind, Position
from mindgraph.contracts.graph import Graph
from mindgraph.layout import (
    apply_layout, default_root, hierarchical_layout, hierarchical_root,
    layer_assignment, radial_layout,
)
from mindgraph.core.traversal import children_map

from .fixtures import make_edge, make_graph, make_node


def positions(nodes):
    return {n.node_id: (n.position.x, n.position.y) for n in nodes}


class TestHierarchicalLayout:

    def test_root_with_two_children(self):
        """R at origin, A and B one column right, centred on y = 0."""
        graph = make_graph(["R", "A", "B"], [("R", "A"), ("R", "B")])
        laid = positions(hierarchical_layout("R", graph.nodes, graph.edges))

        assert laid == {"R": (0, 0), "A": (280, -70), "B": (280, 70)}

    def test_three_in_a_layer(self):
        graph = make_graph(["R", "A", "B", "C"], [("R", "A"), ("R", "B"), ("R", "C")])
        laid = positions(hierarchical_layout("R", graph.nodes, graph.edges))
        assert [laid[k][1] for k in ("A", "B", "C")] == [-140, 0, 140]

    def test_depth_is_shortest_distance(self):
        """A diamond puts the join node at depth 2, not 3."""
        graph = make_graph(
            ["R", "A", "B", "C"],
            [("R", "A"), ("R", "B"), ("A", "C"), ("B", "C")],
        )
        laid = positions(hierarchical_layout("R", graph.nodes, graph.edges))
        assert laid["C"] == (560, 0)

    def test_custom_spacing(self):
        graph = make_graph(["R", "A", "B"], [("R", "A"), ("R", "B")])
        laid = positions(hierarchical_layout(
            "R", graph.nodes, graph.edges, column_spacing=100, row_spacing=50,
        ))
        assert laid["A"] == (100, -25)

    def test_unreachable_nodes_keep_position(self):
        graph = Graph(
            nodes=(make_node("R"), make_node("A"), make_node("Z", 77, -3)),
            edges=(make_edge("R", "A"),),
        )
        laid = positions(hierarchical_layout("R", graph.nodes, graph.edges))
        assert laid["Z"] == (77, -3)

    def test_absent_root_is_noop(self):
        graph = make_graph(["R", "A"], [("R", "A")])
        assert hierarchical_layout("missing", graph.nodes, graph.edges) == graph.nodes

    def test_only_positions_change(self):
        graph = Graph(
            nodes=(make_node("R", selected=True), make_node("A", label="Alpha", collapsed=True)),
            edges=(make_edge("R", "A"),),
        )
        laid = hierarchical_layout("R", graph.nodes, graph.edges)
        for before, after in zip(graph.nodes, laid):
            assert after.node_id == before.node_id
            assert after.data == before.data
            assert after.selected == before.selected
            assert after.node_type == before.node_type

    def test_cycle_terminates(self):
        graph = make_graph(["A", "B", "C"], [("A", "B"), ("B", "C"), ("C", "A")])
        laid = positions(hierarchical_layout("A", graph.nodes, graph.edges))
        assert laid == {"A": (0, 0), "B": (280, 0), "C": (560, 0)}

    def test_layer_assignment_order(self):
        graph = make_graph(["R", "B", "A"], [("R", "B"), ("R", "A"), ("B", "C")])
        assert layer_assignment("R", children_map(graph)) == [["R"], ["B", "A"]]


class TestRadialLayout:

    def test_root_at_origin(self):
        laid = radial_layout("R", (make_node("R", 40, 40),), ())
        assert laid[0].position == Position(0, 0)

    def test_single_child_at_angle_zero(self):
        graph = make_graph(["R", "A"], [("R", "A")])
        laid = positions(radial_layout("R", graph.nodes, graph.edges))
        assert laid["A"] == pytest.approx((280, 0))

    def test_children_split_circle_in_edge_order(self):
        graph = make_graph(["R", "B", "A"], [("R", "A"), ("R", "B")])
        laid = positions(radial_layout("R", graph.nodes, graph.edges))
        assert laid["A"] == pytest.approx((280, 0))
        assert laid["B"] == pytest.approx((-280, 0), abs=1e-9)

    def test_rings_centre_on_parent_and_grow(self):
        """Depth-2 ring radius is 280 * 1.2 around the depth-1 parent."""
        graph = make_graph(
            ["R", "A", "B", "A1", "B1"],
            [("R", "A"), ("R", "B"), ("A", "A1"), ("B", "B1")],
        )
        laid = positions(radial_layout("R", graph.nodes, graph.edges))
        assert laid["A1"] == pytest.approx((280 + 336, 0))
        assert laid["B1"] == pytest.approx((-280 + 336, 0), abs=1e-9)

    def test_four_children_quarter_turns(self):
        graph = make_graph(
            ["R", "a", "b", "c", "d"],
            [("R", "a"), ("R", "b"), ("R", "c"), ("R", "d")],
        )
        laid = positions(radial_layout("R", graph.nodes, graph.edges, base_radius=100))
        assert laid["b"] == pytest.approx((100 * math.cos(math.pi / 2), 100), abs=1e-9)
        assert laid["d"] == pytest.approx((0, -100), abs=1e-9)

    def test_dangling_edge_takes_no_slot(self):
        graph = Graph(
            nodes=(make_node("R"), make_node("A")),
            edges=(make_edge("R", "ghost"), make_edge("R", "A")),
        )
        laid = positions(radial_layout("R", graph.nodes, graph.edges))
        assert laid["A"] == pytest.approx((280, 0))

    def test_cycle_places_each_node_once(self):
        graph = make_graph(["A", "B", "C"], [("A", "B"), ("B", "C"), ("C", "A")])
        laid = positions(radial_layout("A", graph.nodes, graph.edges))
        assert laid["A"] == (0, 0)
        assert laid["B"] == pytest.approx((280, 0))
        assert laid["C"] == pytest.approx((280 + 336, 0))

    def test_unreachable_and_absent_root(self):
        graph = Graph(
            nodes=(make_node("R"), make_node("Z", 5, 6)),
            edges=(),
        )
        assert positions(radial_layout("R", graph.nodes, graph.edges))["Z"] == (5, 6)
        assert radial_layout("missing", graph.nodes, graph.edges) == graph.nodes

    def test_deep_chain(self):
        """Long chains do not exhaust the interpreter stack."""
        ids = [f"n{i}" for i in range(3000)]
        graph = make_graph(ids, list(zip(ids, ids[1:])))
        laid = radial_layout("n0", graph.nodes, graph.edges, growth=1.0)
        assert laid[-1].position.x == pytest.approx(280 * 2999)


class TestRoots:

    def test_first_node_without_parent(self):
        graph = make_graph(["A", "B", "C"], [("B", "A")])
        assert default_root(graph) == "B"

    def test_fully_cyclic_falls_back_to_first(self):
        graph = make_graph(["A", "B"], [("A", "B"), ("B", "A")])
        assert default_root(graph) == "A"

    def test_empty_graph(self):
        assert default_root(Graph.empty()) is None

    def test_dangling_edge_does_not_make_a_parent(self):
        graph = Graph(nodes=(make_node("A"),), edges=(make_edge("ghost", "A"),))
        assert default_root(graph) == "A"

    def test_hierarchical_root_prefers_focus(self):
        graph = make_graph(["R", "A"], [("R", "A")])
        assert hierarchical_root(graph, "A") == "A"
        assert hierarchical_root(graph, "missing") == "R"
        assert hierarchical_root(graph) == "R"


class TestApplyLayout:

    def test_uses_default_root(self):
        graph = make_graph(["A", "R"], [("R", "A")])
        laid = apply_layout(LayoutKind.HIERARCHICAL, graph)
        assert positions(laid.nodes) == {"A": (280, 0), "R": (0, 0)}
        assert laid.edges == graph.edges

    def test_config_spacing(self):
        graph = make_graph(["R", "A"], [("R", "A")])
        laid = apply_layout(LayoutKind.RADIAL, graph, "R", LayoutConfig(radial_base_radius=10))
        assert positions(laid.nodes)["A"] == pytest.approx((10, 0))

    def test_empty_graph_unchanged(self):
        assert apply_layout(LayoutKind.RADIAL, Graph.empty()) == Graph.empty()
