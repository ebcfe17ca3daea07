"""
Tests for the axis and grid decorators.
"""
from decimal import Decimal

import pytest

from argraph.axes import add_axes, add_grid_planes, format_tick, tick_values
from argraph.constants import AXIS_COLORS
from argraph.data_model import AxisProjection
from argraph.scene import NodeKind, SceneArena


def _projections(n=3):
    ranges = [(Decimal(0), Decimal(10)), (Decimal("-2.5"), Decimal("7.5")), (Decimal(1), Decimal(1))]
    return [AxisProjection(key=k, raw_min=lo, raw_max=hi)
            for k, (lo, hi) in zip(("a", "b", "c"), ranges[:n])]


@pytest.fixture
def arena_root():
    arena = SceneArena()
    return arena, arena.add_group(name="graph")


class TestTicks:

    def test_eleven_evenly_spaced_values(self):
        values = tick_values(Decimal(0), Decimal(10))
        assert values == [Decimal(i) for i in range(11)]

    def test_endpoints_are_exact(self):
        values = tick_values(Decimal("-2.5"), Decimal("7.3"))
        assert values[0] == Decimal("-2.5")
        assert values[-1] == Decimal("7.3")

    def test_format(self):
        assert format_tick(Decimal("2.25")) == "2.2"
        assert format_tick(Decimal(-3)) == "-3.0"

    def test_count_must_allow_two_ends(self):
        with pytest.raises(ValueError):
            tick_values(Decimal(0), Decimal(1), count=1)


class TestAddAxes:
    """Axis lines, tick marks and labels."""

    def test_group_per_axis(self, arena_root):
        arena, root = arena_root
        groups = add_axes(arena, root, _projections())
        assert list(groups) == ["x", "y", "z"]
        assert arena.node(root).children == list(groups.values())

    def test_axis_group_contents(self, arena_root):
        """One line, one name label, 11 tick marks and 11 tick labels."""
        arena, root = arena_root
        groups = add_axes(arena, root, _projections())
        for axis, group in groups.items():
            children = arena.children(group)
            assert len(children) == 24
            kinds = [c.kind for c in children]
            assert kinds.count(NodeKind.LINE) == 1
            assert kinds.count(NodeKind.POINT) == 11
            assert kinds.count(NodeKind.TEXT) == 12
            assert {c.color for c in children} == {AXIS_COLORS[axis]}

    def test_tick_labels_span_original_range(self, arena_root):
        arena, root = arena_root
        groups = add_axes(arena, root, _projections())
        labels = [c.text for c in arena.children(groups["y"]) if c.name == "tick-label-y"]
        assert labels[0] == "-2.5"
        assert labels[5] == "2.5"
        assert labels[10] == "7.5"

    def test_flat_range_labels(self, arena_root):
        arena, root = arena_root
        groups = add_axes(arena, root, _projections())
        labels = {c.text for c in arena.children(groups["z"]) if c.name == "tick-label-z"}
        assert labels == {"1.0"}

    def test_axis_names_default_to_keys(self, arena_root):
        arena, root = arena_root
        groups = add_axes(arena, root, _projections(), labels=None)
        names = [c.text for g in groups.values() for c in arena.children(g)
                 if c.name.startswith("axis-label")]
        assert names == ["a", "b", "c"]

    def test_two_projections_draw_no_z_axis(self, arena_root):
        arena, root = arena_root
        groups = add_axes(arena, root, _projections(2))
        assert list(groups) == ["x", "y"]

    def test_axis_lines_run_along_unit_edges(self, arena_root):
        arena, root = arena_root
        groups = add_axes(arena, root, _projections())
        ends = [c.end for g in groups.values() for c in arena.children(g) if c.kind is NodeKind.LINE]
        assert ends == [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)]


class TestGridPlanes:
    """Wireframe bounding planes."""

    def test_all_planes(self, arena_root):
        arena, root = arena_root
        groups = add_grid_planes(arena, root)
        assert sorted(groups) == ["xy", "xz", "yz"]
        for group in groups.values():
            assert len(arena.children(group)) == 22

    def test_lines_stay_on_the_plane(self, arena_root):
        arena, root = arena_root
        groups = add_grid_planes(arena, root, planes=["xy"])
        for line in arena.children(groups["xy"]):
            assert line.position[2] == 0.0 and line.end[2] == 0.0

    def test_coarser_spacing(self, arena_root):
        arena, root = arena_root
        groups = add_grid_planes(arena, root, spacing=0.25, planes=["yz"])
        assert len(arena.children(groups["yz"])) == 10

    def test_unknown_plane_adds_nothing(self, arena_root):
        arena, root = arena_root
        before = len(arena)
        with pytest.raises(ValueError):
            add_grid_planes(arena, root, planes=["xy", "xw"])
        assert len(arena) == before

    @pytest.mark.parametrize("spacing", [0, -0.1])
    def test_spacing_must_be_positive(self, arena_root, spacing):
        arena, root = arena_root
        with pytest.raises(ValueError):
            add_grid_planes(arena, root, spacing=spacing)
