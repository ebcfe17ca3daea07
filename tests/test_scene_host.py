"""
Tests for graph placement, tap handling and gestures.
"""
import math

import numpy as np
import pytest

from argraph.data_model import GraphType
from argraph.scene import NodeKind
from argraph.scene_host import SceneHost, data_summary


@pytest.fixture
def two_graph_host(scatter_config):
    host = SceneHost([scatter_config(), scatter_config(graph_type=GraphType.SCATTER_PLOT_NO_GRID)])
    host.place()
    return host


class TestPlacement:
    """Side-by-side layout of several graphs."""

    def test_roots_are_scaled_and_spaced(self, two_graph_host):
        host = two_graph_host
        assert len(host.graph_roots) == 2
        first, second = (host.arena.node(r) for r in host.graph_roots)
        assert first.scale == second.scale == 0.1
        assert first.position == (0.0, 0.02, 0.0)
        assert second.position == pytest.approx((0.15, 0.02, 0.0))
        assert host.has_placed

    def test_origin_offsets_every_graph(self, scatter_config):
        host = SceneHost([scatter_config()])
        host.place(origin=(1.0, -0.5, 2.0))
        assert host.arena.node(host.graph_roots[0]).position == pytest.approx((1.0, -0.48, 2.0))

    def test_merged_node_map(self, two_graph_host):
        host = two_graph_host
        assert len(host.node_map) == 4
        assert all(host.arena.node(h).kind is NodeKind.POINT for h in host.node_map)

    def test_unsupported_type_keeps_its_slot_empty(self, scatter_config):
        host = SceneHost([scatter_config(graph_type=GraphType.HISTOGRAM_PLOT), scatter_config()])
        roots = host.place()
        assert len(roots) == 1
        assert host.arena.node(roots[0]).position == pytest.approx((0.15, 0.02, 0.0))

    def test_nothing_renderable(self, scatter_config):
        host = SceneHost([scatter_config(graph_type=GraphType.SURFACE_PLOT)])
        assert host.place() == []
        assert host.node_map == {}

    def test_world_position_of_a_point(self, scatter_config):
        """Point (1, 1, 0.5) in the second slot lands at 0.1 * p + offset."""
        host = SceneHost([scatter_config(), scatter_config()])
        host.place()
        root = host.graph_roots[1]
        handle = [h for h in host.node_map if host.graph_root_for(h) == root][1]
        assert host.arena.world_position(handle) == pytest.approx(np.array([0.25, 0.12, 0.05]))


class TestTaps:
    """Node map lookups."""

    def test_summary(self):
        assert data_summary({"category": "x", "v1": 1, "v2": 2}) == "category: x\nv1: 1\nv2: 2"

    def test_tap_point(self, two_graph_host):
        handle = next(iter(two_graph_host.node_map))
        assert two_graph_host.tap(handle) == "category: x\nv1: 1\nv2: 2"

    def test_tap_decoration_is_ignored(self, two_graph_host):
        host = two_graph_host
        decoration = next(n.handle for n in host.arena if n.kind is NodeKind.TEXT)
        assert host.tap(decoration) is None

    def test_graph_root_for_nested_node(self, two_graph_host):
        host = two_graph_host
        root = host.graph_roots[0]
        grid_line = next(n.handle for n in host.arena.walk(root)
                         if n.kind is NodeKind.LINE and n.name == "")
        assert host.graph_root_for(grid_line) == root
        assert host.graph_root_for(root) == root

    def test_double_tap_selects_graph(self, two_graph_host):
        host = two_graph_host
        handle = list(host.node_map)[-1]
        root = host.double_tap(handle)
        assert root == host.graph_roots[1]
        assert host.gestures.selected == root


class TestGestures:
    """Rotate, scale and move the selected graph."""

    def test_nothing_selected_is_a_no_op(self, two_graph_host):
        host = two_graph_host
        before = [(n.scale, n.rotation_y, n.position) for n in host.arena]
        host.gestures.rotate(100)
        host.gestures.scale(3)
        host.gestures.step("x", 1)
        assert [(n.scale, n.rotation_y, n.position) for n in host.arena] == before

    def test_rotate_accumulates(self, two_graph_host):
        host = two_graph_host
        root = host.graph_roots[0]
        host.gestures.select(root)
        host.gestures.rotate(100)
        host.gestures.rotate(50)
        assert host.arena.node(root).rotation_y == pytest.approx(0.3)

    def test_scale_multiplies(self, two_graph_host):
        host = two_graph_host
        root = host.graph_roots[0]
        host.gestures.select(root)
        host.gestures.scale(2)
        host.gestures.scale(1.5)
        assert host.arena.node(root).scale == pytest.approx(0.3)

    def test_reselecting_keeps_transform(self, two_graph_host):
        host = two_graph_host
        first, second = host.graph_roots
        host.gestures.select(first)
        host.gestures.scale(2)
        host.gestures.select(second)
        host.gestures.select(first)
        host.gestures.scale(2)
        assert host.arena.node(first).scale == pytest.approx(0.4)
        assert host.arena.node(second).scale == 0.1

    def test_move_steps(self, two_graph_host):
        host = two_graph_host
        root = host.graph_roots[0]
        host.gestures.select(root)
        host.gestures.step("x", 1)
        host.gestures.step("z", -1)
        host.gestures.move(dy=0.5)
        assert host.arena.node(root).position == pytest.approx((0.01, 0.52, -0.01))

    def test_rotation_moves_children(self, scatter_config):
        host = SceneHost([scatter_config(), scatter_config()])
        host.place()
        root = host.graph_roots[1]
        handle = [h for h in host.node_map if host.graph_root_for(h) == root][1]
        host.gestures.select(root)
        host.gestures.rotate(math.pi / 2 / host.gestures.rotation_sensitivity)
        assert host.arena.world_position(handle) == pytest.approx(np.array([0.2, 0.12, -0.1]))
