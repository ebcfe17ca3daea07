"""
Tests for the scatter-plot scene builder.
"""
from decimal import Decimal

import pytest

from argraph.scatter_builder import (
    axis_projection, build_scatter_plot, resolve_category, usable_axis_keys,
)
from argraph.scene import NodeKind, SceneArena
from argraph.theme import MarkerShape, get_theme


EXAMPLE = [
    {"category": "x", "v1": 1, "v2": 2},
    {"category": "y", "v1": 3, "v2": 4},
]


def _positions(build):
    return [build.arena.node(h).position for h in build.node_map]


class TestUsableAxisKeys:
    """Axis key selection."""

    def test_keeps_selection_order(self):
        records = [{"category": "c", "a": 1, "b": 2, "c": 3}]
        assert usable_axis_keys(records, ["c", "a", "b"]) == ["c", "a", "b"]

    def test_excludes_and_dedupes(self):
        records = [{"category": "c", "a": 1, "b": 2}]
        assert usable_axis_keys(records, ["a", "a", "category", "b"], exclude=["category"]) == ["a", "b"]

    def test_sniffs_first_record_only(self):
        records = [
            {"category": "c", "a": 1, "b": 2},
            {"category": "c", "a": 1, "b": 2, "z": 9},
        ]
        assert usable_axis_keys(records, ["a", "b", "z"]) == ["a", "b"]
        assert usable_axis_keys(records, ["a", "b", "z"], sniff_all_records=True) == ["a", "b", "z"]

    def test_no_records(self):
        assert usable_axis_keys([], ["a", "b"]) == []

    def test_projection_range(self):
        records = [{"a": "2.5"}, {"a": -1}, {"a": "n/a"}, {}]
        projection = axis_projection(records, "a")
        assert projection.raw_min == Decimal(-1)
        assert projection.raw_max == Decimal("2.5")
        assert axis_projection(records, "missing") is None


class TestBuildScatterPlot:
    """Point placement and the node map."""

    def test_example_points(self):
        build = build_scatter_plot(EXAMPLE, ["v1", "v2"], "category", get_theme("default"))
        assert len(build.node_map) == 2
        assert _positions(build) == [(0.0, 0.0, 0.5), (1.0, 1.0, 0.5)]
        assert [p.key for p in build.projections] == ["v1", "v2"]

    def test_node_map_holds_the_original_records(self):
        build = build_scatter_plot(EXAMPLE, ["v1", "v2"], "category", get_theme("default"))
        assert list(build.node_map.values()) == EXAMPLE
        assert all(a is b for a, b in zip(build.node_map.values(), EXAMPLE))

    def test_point_nodes_are_root_children_in_record_order(self):
        build = build_scatter_plot(EXAMPLE, ["v1", "v2"], "category", get_theme("default"))
        assert build.root_node.children == list(build.node_map)
        for handle in build.node_map:
            node = build.arena.node(handle)
            assert node.kind is NodeKind.POINT
            assert node.parent == build.root

    def test_records_without_x_or_y_are_skipped(self):
        records = EXAMPLE + [{"category": "z", "v1": "oops", "v2": 5}, {"category": "w", "v1": 2}]
        build = build_scatter_plot(records, ["v1", "v2"], "category", get_theme("default"))
        assert len(build.node_map) == 2

    @pytest.mark.parametrize("z_values, expected", [((5, 10), 0.0), ((-10, -5), 1.0)])
    def test_missing_z_is_clamped_into_the_cube(self, z_values, expected):
        records = [
            {"category": "a", "x": 0, "y": 0, "z": z_values[0]},
            {"category": "b", "x": 1, "y": 1, "z": z_values[1]},
            {"category": "c", "x": 1, "y": 0},
        ]
        build = build_scatter_plot(records, ["x", "y", "z"], "category", get_theme("default"))
        assert _positions(build)[2][2] == expected

    def test_positions_in_unit_cube(self):
        records = [{"category": "c", "x": i * 7.3 - 40, "y": i ** 2, "z": -i} for i in range(10)]
        build = build_scatter_plot(records, ["x", "y", "z"], "category", get_theme("default"))
        for position in _positions(build):
            assert all(0.0 <= v <= 1.0 for v in position)

    def test_flatten_z(self):
        records = [{"category": "c", "x": i, "y": -i, "z": i * 2} for i in range(3)]
        build = build_scatter_plot(records, ["x", "y", "z"], "category", get_theme("default"),
                                   flatten_z=True)
        assert {p[2] for p in _positions(build)} == {0.0}
        assert len(build.projections) == 2

    def test_flat_axis_is_centered(self):
        records = [{"category": "c", "x": 4, "y": i} for i in range(3)]
        build = build_scatter_plot(records, ["x", "y"], "category", get_theme("default"))
        assert {p[0] for p in _positions(build)} == {0.5}

    def test_too_few_axis_keys(self):
        with pytest.warns(UserWarning, match="Not enough axis features"):
            build = build_scatter_plot(EXAMPLE, ["v1"], "category", get_theme("default"))
        assert build.is_empty
        assert build.node_map == {}

    def test_axis_without_numbers(self):
        records = [{"category": "c", "a": 1, "b": "n/a"}, {"category": "c", "a": 2, "b": None}]
        with pytest.warns(UserWarning, match="min/max"):
            build = build_scatter_plot(records, ["a", "b"], "category", get_theme("default"))
        assert build.is_empty

    def test_shared_arena_keeps_handles_unique(self):
        arena = SceneArena()
        first = build_scatter_plot(EXAMPLE, ["v1", "v2"], "category", get_theme("default"), arena)
        second = build_scatter_plot(EXAMPLE, ["v1", "v2"], "category", get_theme("default"), arena)
        assert not set(first.node_map) & set(second.node_map)
        assert first.root != second.root

    def test_theme_styles_points(self):
        records = [
            {"category": "low", "x": 0, "y": 0},
            {"category": "high", "x": 1, "y": 1},
        ]
        build = build_scatter_plot(records, ["x", "y"], "category", get_theme("material"))
        shapes = [build.arena.node(h).shape for h in build.node_map]
        assert shapes == [MarkerShape.BOX, MarkerShape.PYRAMID]


class TestResolveCategory:

    def test_default_when_missing(self):
        assert resolve_category({"category": ""}, "category") == "default"
        assert resolve_category({"category": 5}, "category") == "default"
        assert resolve_category({"category": "x"}, None) == "default"

    def test_named_key(self):
        assert resolve_category({"condition": "M+"}, "condition") == "M+"
