"""
Axis and grid decorators for the AR Graph Plotter.

Both decorators work in the unit cube the scatter builder places points
in, so they never look at data magnitudes except to label ticks: tick
label values are interpolated over each axis's *original* range.

Axis colour convention: x red, y green, z blue.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Sequence

import numpy as np

from .constants import (
    AXIS_COLORS, AXIS_LENGTH, AXIS_LINE_RADIUS, AXIS_LABEL_OFFSET,
    AXIS_LABEL_SCALE, TICK_COUNT, TICK_MARK_OFFSET, TICK_MARK_SIZE,
    TICK_LABEL_OFFSET, TICK_LABEL_SCALE, GRID_SPACING, GRID_COLOR,
    GRID_LINE_WIDTH, GRID_PLANES_ALL,
)
from .data_model import AxisProjection
from .scene import SceneArena, Vec3
from .theme import MarkerShape

AXIS_NAMES = ('x', 'y', 'z')


def _along(axis: str, distance: float, offset: float = 0.0) -> Vec3:
    """Point *distance* along *axis*, nudged by *offset* off the axis."""
    if axis == 'x':
        return (distance, offset, 0.0)
    if axis == 'y':
        return (0.0, distance, offset)
    if axis == 'z':
        return (offset, 0.0, distance)
    raise ValueError(f"Unknown axis {axis!r}")


def _label_position(axis: str, length: float) -> Vec3:
    if axis == 'x':
        return (length + AXIS_LABEL_OFFSET, 0.02, 0.0)
    if axis == 'y':
        return (0.02, length + AXIS_LABEL_OFFSET, 0.0)
    return (0.0, 0.02, length + AXIS_LABEL_OFFSET)


def tick_values(raw_min: Decimal, raw_max: Decimal, count: int = TICK_COUNT) -> List[Decimal]:
    """*count* evenly spaced values from *raw_min* to *raw_max* inclusive."""
    if count < 2:
        raise ValueError(f"tick count must be at least 2, got {count}")
    span = raw_max - raw_min
    last = Decimal(count - 1)
    return [raw_min + span * (Decimal(i) / last) for i in range(count)]


def format_tick(value: Decimal) -> str:
    """Tick label text: one digit after the decimal point."""
    return f"{float(value):.1f}"


def add_axes(
    arena: SceneArena,
    root: int,
    projections: Sequence[AxisProjection],
    labels: Optional[Sequence[str]] = None,
    *,
    length: float = AXIS_LENGTH,
    tick_count: int = TICK_COUNT,
) -> Dict[str, int]:
    """Add axis lines, tick marks, tick labels and axis names under *root*.

    Parameters
    ----------
    arena : SceneArena
        Arena holding *root*.
    root : int
        Graph root handle.
    projections : sequence of AxisProjection
        Two or three projections, in x, y, z order.  With two, no z axis
        is drawn.
    labels : sequence of str, optional
        Axis names; defaults to each projection's key.
    length : float
        Axis length in scene units (the unit cube edge).
    tick_count : int
        Number of tick marks and labels per axis.

    Returns
    -------
    dict
        ``{axis_name: group_handle}`` for each axis drawn.
    """
    if labels is None:
        labels = [p.key for p in projections]
    spacing = length / (tick_count - 1)
    groups: Dict[str, int] = {}

    for axis, projection, label in zip(AXIS_NAMES, projections, labels):
        color = AXIS_COLORS[axis]
        group = arena.add_group(root, name=f"axis-{axis}")
        groups[axis] = group

        arena.add_line(group, (0.0, 0.0, 0.0), _along(axis, length), color,
                       AXIS_LINE_RADIUS * 2, name=f"axis-line-{axis}")
        arena.add_text(group, _label_position(axis, length), label, color,
                       AXIS_LABEL_SCALE, name=f"axis-label-{axis}")

        for i in range(tick_count):
            arena.add_point(group, _along(axis, i * spacing, TICK_MARK_OFFSET),
                            MarkerShape.BOX, color, TICK_MARK_SIZE)

        for i, value in enumerate(tick_values(projection.raw_min, projection.raw_max, tick_count)):
            arena.add_text(group, _along(axis, i * spacing, TICK_LABEL_OFFSET),
                           format_tick(value), color, TICK_LABEL_SCALE,
                           name=f"tick-label-{axis}")

    return groups


def _grid_steps(extent: float, spacing: float) -> np.ndarray:
    if spacing <= 0:
        raise ValueError(f"grid spacing must be positive, got {spacing}")
    n = int(np.floor(extent / spacing + 1e-9))
    return np.linspace(0.0, n * spacing, n + 1)


def add_grid_planes(
    arena: SceneArena,
    root: int,
    spacing: float = GRID_SPACING,
    color: str = GRID_COLOR,
    planes: Sequence[str] = GRID_PLANES_ALL,
    extent: Vec3 = (AXIS_LENGTH, AXIS_LENGTH, AXIS_LENGTH),
) -> Dict[str, int]:
    """Add a wireframe grid on each requested bounding plane.

    Parameters
    ----------
    planes : sequence of str
        Any of ``"xy"``, ``"yz"``, ``"xz"``.
    extent : (float, float, float)
        Cube extent along x, y and z.

    Returns
    -------
    dict
        ``{plane_name: group_handle}``.
    """
    ex, ey, ez = extent
    xs, ys, zs = (_grid_steps(e, spacing) for e in extent)
    groups: Dict[str, int] = {}

    unknown = [p for p in planes if p not in GRID_PLANES_ALL]
    if unknown:
        raise ValueError(f"Unknown grid plane(s) {unknown}; expected any of {GRID_PLANES_ALL}")

    for plane in planes:
        group = arena.add_group(root, name=f"grid-{plane}")
        groups[plane] = group
        if plane == 'xy':
            segments = [((x, 0.0, 0.0), (x, ey, 0.0)) for x in xs]
            segments += [((0.0, y, 0.0), (ex, y, 0.0)) for y in ys]
        elif plane == 'yz':
            segments = [((0.0, y, 0.0), (0.0, y, ez)) for y in ys]
            segments += [((0.0, 0.0, z), (0.0, ey, z)) for z in zs]
        else:
            segments = [((x, 0.0, 0.0), (x, 0.0, ez)) for x in xs]
            segments += [((0.0, 0.0, z), (ex, 0.0, z)) for z in zs]

        for start, end in segments:
            arena.add_line(group,
                           tuple(float(v) for v in start),
                           tuple(float(v) for v in end),
                           color, GRID_LINE_WIDTH)

    return groups
