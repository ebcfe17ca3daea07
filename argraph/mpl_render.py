"""
Matplotlib drawing backend for the AR Graph Plotter.

Draws a scene arena onto a 3D axes: point nodes become scatter markers
(one collection per marker shape), line nodes a ``Line3DCollection`` and
text nodes ``ax.text`` labels.  Every node is placed at its world
position, so the root transforms set by the scene host (scale, y
rotation, offset) are honoured.

Scene space is y-up; matplotlib's 3D axes are z-up, so scene ``(x, y, z)``
is drawn at matplotlib ``(x, z, y)``.

Point collections are created with ``picker=True``; ``PickIndex`` maps a
pick event's ``(artist, index)`` back to the node handle.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from matplotlib.figure import Figure
from mpl_toolkits.mplot3d.art3d import Line3DCollection

from .constants import DARK_COLORS
from .scene import NodeKind, SceneArena
from .theme import MarkerShape

MARKERS = {
    MarkerShape.SPHERE: 'o',
    MarkerShape.PYRAMID: '^',
    MarkerShape.CYLINDER: 'H',
    MarkerShape.BOX: 's',
    MarkerShape.TORUS: '8',
    MarkerShape.CONE: 'v',
    MarkerShape.CAPSULE: 'D',
    MarkerShape.PLANE: '_',
}

# scene-unit sizes to points
MARKER_SIZE_SCALE = 250.0
LINE_WIDTH_SCALE = 150.0
MIN_LINE_WIDTH = 0.3
TEXT_SIZE_SCALE = 300.0


def to_mpl(point) -> Tuple[float, float, float]:
    """Scene (y-up) coordinates to matplotlib (z-up) coordinates."""
    x, y, z = (float(v) for v in point)
    return x, z, y


class PickIndex:
    """Maps pickable artists back to scene node handles."""

    def __init__(self):
        self._handles: Dict[int, List[int]] = {}

    def register(self, artist, handles: Sequence[int]) -> None:
        self._handles[id(artist)] = list(handles)

    def handle_for(self, artist, index: int) -> Optional[int]:
        handles = self._handles.get(id(artist))
        if handles is None or not 0 <= index < len(handles):
            return None
        return handles[index]

    def __len__(self) -> int:
        return sum(len(h) for h in self._handles.values())


def fit_bounds(arena: SceneArena, roots: Sequence[int], pad_fraction: float = 0.05) -> Optional[np.ndarray]:
    """Padded ``[[lo x, y, z], [hi x, y, z]]`` box (matplotlib axes) around *roots*.

    Returns ``None`` when the subtrees hold no drawable nodes.
    """
    world = []
    for root in roots:
        for node in arena.walk(root):
            if node.kind is NodeKind.LINE:
                world.append(to_mpl(arena.to_world(node.handle, node.position)))
                world.append(to_mpl(arena.to_world(node.handle, node.end)))
            elif node.kind is not NodeKind.GROUP:
                world.append(to_mpl(arena.world_position(node.handle)))
    if not world:
        return None
    world = np.array(world)
    lo, hi = world.min(axis=0), world.max(axis=0)
    pad = pad_fraction * max(float((hi - lo).max()), 1e-6)
    return np.array([lo - pad, hi + pad])


def render_scene(
    fig: Figure,
    arena: SceneArena,
    roots: Sequence[int],
    *,
    title: str = "",
    bounds: Optional[np.ndarray] = None,
) -> PickIndex:
    """Draw the subtrees under *roots* on *fig* (cleared first).

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on.
    arena : SceneArena
        Arena holding the nodes.
    roots : sequence of int
        Graph root handles to draw.
    title : str
        Optional axes title.
    bounds : ndarray, optional
        Fixed view box from ``fit_bounds``; fitted to the scene when
        omitted.  Keep it fixed between redraws so scaling a graph is
        visible.

    Returns
    -------
    PickIndex
        Lookup for pick events on the point collections.
    """
    fig.clf()
    ax = fig.add_subplot(111, projection='3d')
    ax.set_axis_off()
    picks = PickIndex()

    if bounds is None:
        bounds = fit_bounds(arena, roots)
    if bounds is None:
        ax.text2D(0.5, 0.5, 'Nothing to render', transform=ax.transAxes,
                  ha='center', va='center', color=DARK_COLORS['fg_dim'])
        return picks

    points: Dict[MarkerShape, Dict[str, list]] = {}
    segments, seg_colors, seg_widths = [], [], []

    for root in roots:
        for node in arena.walk(root):
            if node.kind is NodeKind.POINT:
                group = points.setdefault(node.shape, {'xyz': [], 'c': [], 's': [], 'h': []})
                group['xyz'].append(to_mpl(arena.world_position(node.handle)))
                group['c'].append(node.color)
                group['s'].append((node.size * MARKER_SIZE_SCALE) ** 2)
                group['h'].append(node.handle)
            elif node.kind is NodeKind.LINE:
                segments.append([to_mpl(arena.to_world(node.handle, node.position)),
                                 to_mpl(arena.to_world(node.handle, node.end))])
                seg_colors.append(node.color)
                seg_widths.append(max(MIN_LINE_WIDTH, node.size * LINE_WIDTH_SCALE))
            elif node.kind is NodeKind.TEXT:
                x, y, z = to_mpl(arena.world_position(node.handle))
                ax.text(x, y, z, node.text, color=node.color,
                        fontsize=node.size * TEXT_SIZE_SCALE,
                        ha='center', va='center')

    if segments:
        ax.add_collection3d(Line3DCollection(segments, colors=seg_colors,
                                             linewidths=seg_widths))

    for shape, group in points.items():
        xs, ys, zs = zip(*group['xyz'])
        artist = ax.scatter(xs, ys, zs, c=group['c'], s=group['s'],
                            marker=MARKERS[shape], depthshade=False,
                            edgecolors='none', picker=True)
        picks.register(artist, group['h'])

    lo, hi = bounds
    ax.set_xlim(lo[0], hi[0])
    ax.set_ylim(lo[1], hi[1])
    ax.set_zlim(lo[2], hi[2])
    # equal scaling on all three axes
    ax.set_box_aspect(tuple(np.maximum(hi - lo, 1e-6)))

    if title:
        ax.set_title(title, fontsize=10, fontweight='bold')
    return picks
