"""
Tests for the renderer registry and ``build_graph``.
"""
import random

import pytest

from conftest import make_document

from argraph import renderers
from argraph.data_model import Dataset, GraphingConfiguration, GraphType
from argraph.example_data import generate_synthetic_records
from argraph.renderers import build_graph, register_renderer, renderer_for, supported_graph_types
from argraph.scene import NodeKind, SceneArena, empty_build


def _names(build):
    return [build.arena.node(h).name for h in build.root_node.children]


class TestRegistry:

    def test_scatter_variants_are_supported(self):
        assert supported_graph_types() == [
            GraphType.SCATTER_PLOT, GraphType.SCATTER_PLOT_NO_GRID, GraphType.SCATTER_PLOT_2D,
        ]

    @pytest.mark.parametrize("graph_type", [
        None, GraphType.SURFACE_PLOT, GraphType.HISTOGRAM_PLOT, GraphType.CLUSTER_PLOT,
    ])
    def test_unsupported_types_have_no_renderer(self, graph_type):
        assert renderer_for(graph_type) is None

    def test_new_renderer_is_picked_up(self, monkeypatch, scatter_config):
        monkeypatch.setattr(renderers, "_RENDERERS", dict(renderers._RENDERERS))

        @register_renderer(GraphType.CLUSTER_PLOT)
        def cluster(records, config, arena=None):
            build = empty_build(arena)
            build.arena.add_group(build.root, name="cluster")
            return build

        build = build_graph(scatter_config(graph_type=GraphType.CLUSTER_PLOT))
        assert _names(build) == ["cluster"]
        assert GraphType.CLUSTER_PLOT in supported_graph_types()


class TestBuildGraph:
    """Scatter variants end to end, from a dataset file."""

    def test_scatter_with_grid(self, scatter_config):
        build = build_graph(scatter_config())
        assert len(build.node_map) == 2
        assert len(build.root_node.children) == 7
        assert _names(build)[2:] == ["axis-x", "axis-y", "grid-xy", "grid-yz", "grid-xz"]

    def test_scatter_without_grid(self, scatter_config):
        build = build_graph(scatter_config(graph_type=GraphType.SCATTER_PLOT_NO_GRID))
        assert len(build.root_node.children) == 4
        assert not any(name.startswith("grid") for name in _names(build))

    def test_scatter_2d(self, scatter_config):
        document = make_document(data=[
            {"category": "a", "x": 0, "y": 5, "z": 1},
            {"category": "b", "x": 2, "y": 9, "z": 7},
        ])
        build = build_graph(scatter_config(graph_type=GraphType.SCATTER_PLOT_2D,
                                           features=("category", "x", "y", "z"),
                                           document=document))
        positions = [build.arena.node(h).position for h in build.node_map]
        assert {p[2] for p in positions} == {0.0}
        assert [n for n in _names(build) if n.startswith("grid")] == ["grid-xy"]
        assert "axis-z" not in _names(build)

    def test_three_axes(self, scatter_config):
        document = make_document(data=[
            {"category": "a", "x": 0, "y": 5, "z": 1},
            {"category": "b", "x": 2, "y": 9, "z": 7},
        ])
        build = build_graph(scatter_config(features=("category", "x", "y", "z"), document=document))
        assert "axis-z" in _names(build)
        positions = [build.arena.node(h).position for h in build.node_map]
        assert positions == [(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)]

    def test_surface_plot_is_empty(self, scatter_config):
        with pytest.warns(UserWarning, match="No renderer"):
            build = build_graph(scatter_config(graph_type=GraphType.SURFACE_PLOT))
        assert build.is_empty
        assert build.node_map == {}

    def test_one_numeric_feature_is_empty(self, scatter_config):
        with pytest.warns(UserWarning, match="at least 2 numeric features"):
            build = build_graph(scatter_config(features=("category", "v1")))
        assert build.is_empty

    def test_missing_file_is_empty(self, tmp_path):
        dataset = Dataset(name="gone", description="", file_path=str(tmp_path / "gone.json"))
        config = GraphingConfiguration(dataset=dataset, graph_type=GraphType.SCATTER_PLOT,
                                       selected_features=("category", "v1", "v2"))
        build = build_graph(config)
        assert build.is_empty

    def test_preloaded_records_and_shared_arena(self, scatter_config):
        arena = SceneArena()
        config = scatter_config()
        first = build_graph(config, arena)
        second = build_graph(config, arena, records=[
            {"category": "q", "v1": 10, "v2": 20},
            {"category": "r", "v1": 30, "v2": 40},
            {"category": "s", "v1": 50, "v2": 60},
        ])
        assert len(second.node_map) == 3
        assert not set(first.node_map) & set(second.node_map)
        assert all(arena.node(h).kind is NodeKind.POINT for h in second.node_map)

    def test_synthetic_records_use_condition_as_category(self, scatter_config):
        records = generate_synthetic_records(14, random.Random(3))
        config = scatter_config(features=("lymphoid", "myeloid", "-log10P", "condition"),
                                theme_id="neon")
        build = build_graph(config, records=records)
        assert len(build.node_map) == 14
        assert "axis-z" in _names(build)
        colors = {build.arena.node(h).color for h in build.node_map}
        assert len(colors) > 1
