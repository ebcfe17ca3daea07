"""
Renderer registry for the AR Graph Plotter.

Maps each ``GraphType`` to the function that builds it.  Scatter
variants differ only in how z is placed and which grid planes are
drawn; surface, histogram and cluster plots are declared in
``GraphType`` but have no renderer, so ``renderer_for`` returns
``None`` and ``build_graph`` yields an empty build for them.

A new graph type needs one ``@register_renderer`` function here and
nothing else.
"""

import logging
import warnings
from typing import Callable, Dict, List, Optional, Sequence

from .axes import add_axes, add_grid_planes
from .configuration import axis_features, resolve_category_key, validate_configuration
from .data_model import GraphingConfiguration, GraphType, Record
from .dataset_store import load_raw_records
from .json_validation import InvalidStructureError
from .scatter_builder import build_scatter_plot, usable_axis_keys
from .scene import GraphBuild, SceneArena, empty_build
from .theme import get_theme

logger = logging.getLogger(__name__)

Renderer = Callable[[Sequence[Record], GraphingConfiguration, Optional[SceneArena]], GraphBuild]

_RENDERERS: Dict[GraphType, Renderer] = {}


def register_renderer(graph_type: GraphType) -> Callable[[Renderer], Renderer]:
    """Decorator registering a builder for *graph_type*."""
    def decorator(fn: Renderer) -> Renderer:
        _RENDERERS[graph_type] = fn
        return fn
    return decorator


def renderer_for(graph_type: Optional[GraphType]) -> Optional[Renderer]:
    """The builder for *graph_type*, or ``None`` if it cannot be rendered."""
    if graph_type is None:
        return None
    return _RENDERERS.get(graph_type)


def supported_graph_types() -> List[GraphType]:
    return [t for t in GraphType if t in _RENDERERS]


# ── Scatter variants ─────────────────────────────────────────────────

def _scatter(
    records: Sequence[Record],
    config: GraphingConfiguration,
    arena: Optional[SceneArena],
    *,
    flatten_z: bool,
    planes: Sequence[str],
) -> GraphBuild:
    category_key = resolve_category_key(records, config.selected_features)
    axis_keys = usable_axis_keys(
        records,
        axis_features(records, config.selected_features),
        exclude=[category_key] if category_key else (),
    )
    build = build_scatter_plot(
        records, axis_keys, category_key, get_theme(config.theme_id),
        arena, flatten_z=flatten_z,
    )
    if build.is_empty:
        return build

    add_axes(build.arena, build.root, build.projections)
    if planes:
        add_grid_planes(build.arena, build.root, planes=planes)
    return build


@register_renderer(GraphType.SCATTER_PLOT)
def scatter_plot(records, config, arena=None):
    return _scatter(records, config, arena, flatten_z=False, planes=('xy', 'yz', 'xz'))


@register_renderer(GraphType.SCATTER_PLOT_NO_GRID)
def scatter_plot_no_grid(records, config, arena=None):
    return _scatter(records, config, arena, flatten_z=False, planes=())


@register_renderer(GraphType.SCATTER_PLOT_2D)
def scatter_plot_2d(records, config, arena=None):
    return _scatter(records, config, arena, flatten_z=True, planes=('xy',))


# ── Entry point ──────────────────────────────────────────────────────

def build_graph(
    config: GraphingConfiguration,
    arena: Optional[SceneArena] = None,
    records: Optional[Sequence[Record]] = None,
) -> GraphBuild:
    """Build the scene for *config*.

    Parameters
    ----------
    config : GraphingConfiguration
        Dataset, graph type, selected features and theme.
    arena : SceneArena, optional
        Shared arena for multi-dataset scenes.
    records : sequence of dict, optional
        Pre-loaded records; read from ``config.dataset.file_path`` when
        omitted.

    Returns
    -------
    GraphBuild
        Empty (root without children, empty node map) when there is
        nothing to render: unsupported graph type, unreadable file or a
        configuration that fails validation.
    """
    renderer = renderer_for(config.graph_type)
    if renderer is None:
        warnings.warn(f"No renderer for graph type {config.graph_type}; nothing to render.",
                      stacklevel=2)
        return empty_build(arena)

    if records is None:
        try:
            records = load_raw_records(config.dataset.file_path)
        except (OSError, InvalidStructureError) as exc:
            logger.error("Could not load records for %r: %s", config.dataset.name, exc)
            return empty_build(arena)

    message = validate_configuration(config, records)
    if message is not None:
        warnings.warn(message, stacklevel=2)
        return empty_build(arena)

    build = renderer(records, config, arena)
    logger.debug("Built %s for %r: %d point(s)",
                 config.graph_type.value, config.dataset.name, len(build.node_map))
    return build
