"""
Scatter-plot scene builder for the AR Graph Plotter.

Takes raw records, picks the usable axis keys, computes each axis's
original min / max, normalises every point into the unit cube and adds
one themed point node per record under a fresh root group.  Each point
handle is mapped back to the record it came from.

Precondition failures (fewer than two usable axis keys, an axis with no
numeric values) produce an empty build and a warning, never an
exception: the caller shows "nothing to render" and leaves the scene
unplaced.
"""

import warnings
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from .constants import DEFAULT_CATEGORY, POINT_SIZE
from .data_model import AxisProjection, Record
from .decimal_utils import decimal_normalize, extract_decimal
from .scene import GraphBuild, SceneArena, empty_build
from .theme import CategoryTheme


def usable_axis_keys(
    records: Sequence[Record],
    selected_features: Iterable[str],
    *,
    exclude: Iterable[str] = (),
    sniff_all_records: bool = False,
) -> List[str]:
    """Selected features whose values are numeric, in selection order.

    Only the first record is inspected unless *sniff_all_records* is
    set, in which case a key qualifies if any record holds a numeric
    value for it.
    """
    if not records:
        return []
    excluded = set(exclude)
    sample = records if sniff_all_records else records[:1]
    keys: List[str] = []
    for key in selected_features:
        if key in excluded or key in keys:
            continue
        if any(extract_decimal(record, key) is not None for record in sample):
            keys.append(key)
    return keys


def axis_projection(records: Sequence[Record], key: str) -> Optional[AxisProjection]:
    """Original range of *key* over every record with a numeric value.

    Returns ``None`` when no record has one.
    """
    values = [v for v in (extract_decimal(r, key) for r in records) if v is not None]
    if not values:
        return None
    return AxisProjection(key=key, raw_min=min(values), raw_max=max(values))


def resolve_category(record: Record, category_key: Optional[str]) -> str:
    """The record's category string, or ``"default"``."""
    if category_key is None:
        return DEFAULT_CATEGORY
    value = record.get(category_key)
    if isinstance(value, str) and value:
        return value
    return DEFAULT_CATEGORY


def build_scatter_plot(
    records: Sequence[Record],
    axis_keys: Sequence[str],
    category_key: Optional[str],
    theme: CategoryTheme,
    arena: Optional[SceneArena] = None,
    *,
    flatten_z: bool = False,
    point_size: float = POINT_SIZE,
) -> GraphBuild:
    """Build point nodes for *records* under a new root group.

    Parameters
    ----------
    records : sequence of dict
        Raw records in file order.
    axis_keys : sequence of str
        Two or three usable axis keys (x, y, optional z).
    category_key : str or None
        Field whose string value selects the point style.
    theme : CategoryTheme
        Category to shape / colour mapping.
    arena : SceneArena, optional
        Arena to build into; a shared arena keeps handles unique across
        several graphs.
    flatten_z : bool
        Pin every point to ``z = 0`` (2D variant).

    Returns
    -------
    GraphBuild
        Root group, ``{handle: record}`` map and the axis projections.
        Records lacking a numeric x or y are skipped; a missing z counts
        as ``0``.
    """
    build = empty_build(arena)

    if len(axis_keys) < 2:
        warnings.warn(
            f"Not enough axis features selected ({len(axis_keys)} usable, need 2).",
            stacklevel=2,
        )
        return build

    x_key, y_key = axis_keys[0], axis_keys[1]
    z_key = axis_keys[2] if len(axis_keys) >= 3 and not flatten_z else None

    projections = [axis_projection(records, key) for key in (x_key, y_key)]
    if z_key is not None:
        projections.append(axis_projection(records, z_key))
    if any(p is None for p in projections):
        missing = [k for k, p in zip((x_key, y_key, z_key), projections) if p is None]
        warnings.warn(
            f"Failed to compute min/max for axis key(s) {missing}: no numeric values.",
            stacklevel=2,
        )
        return build

    x_proj, y_proj = projections[0], projections[1]
    z_proj = projections[2] if z_key is not None else None
    zero = Decimal(0)

    for record in records:
        x_raw = extract_decimal(record, x_key)
        y_raw = extract_decimal(record, y_key)
        if x_raw is None or y_raw is None:
            continue

        x = decimal_normalize(x_raw, x_proj.raw_min, x_proj.raw_max)
        y = decimal_normalize(y_raw, y_proj.raw_min, y_proj.raw_max)
        if flatten_z:
            z = 0.0
        elif z_proj is None:
            # no z key: a flat range, which normalises to the cube's middle
            z = decimal_normalize(zero, zero, zero)
        else:
            z_raw = extract_decimal(record, z_key)
            if z_raw is None:
                # 0 may lie outside the z range; keep the point inside the cube
                z = min(max(decimal_normalize(zero, z_proj.raw_min, z_proj.raw_max), 0.0), 1.0)
            else:
                z = decimal_normalize(z_raw, z_proj.raw_min, z_proj.raw_max)

        shape, color = theme.style(resolve_category(record, category_key))
        handle = build.arena.add_point(build.root, (x, y, z), shape, color, point_size)
        build.node_map[handle] = record

    build.projections = projections
    return build
