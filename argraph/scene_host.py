"""
Scene host for the AR Graph Plotter.

Owns one shared ``SceneArena`` for a set of graphing configurations,
places every renderable graph side by side, and turns user input into
scene changes:

- a single tap on a point resolves the node map to its source record;
- a double tap selects the graph the tapped node belongs to;
- pan rotates, pinch scales and the move buttons nudge the selected
  graph.

The host only deals in node handles.  Turning a screen position into a
handle is the drawing backend's job (see ``mpl_render.PickIndex``).
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .constants import (
    GRAPH_INITIAL_SCALE, GRAPH_LIFT_Y, GRAPH_SPACING_X, MOVE_STEP,
    ROTATION_SENSITIVITY,
)
from .data_model import GraphingConfiguration, Record
from .renderers import build_graph, renderer_for
from .scene import SceneArena, Vec3, merge_node_maps

logger = logging.getLogger(__name__)


def data_summary(record: Record) -> str:
    """``"key: value"`` lines, one per field, in record order."""
    return "\n".join(f"{key}: {value}" for key, value in record.items())


@dataclass
class _Transform:
    scale: float
    rotation_y: float


class GestureHandler:
    """Rotate, scale and move the selected graph root.

    The first selection of a root records its transform as scale
    ``0.1``, rotation ``0``; later gestures accumulate on top.
    """

    def __init__(self, arena: SceneArena,
                 rotation_sensitivity: float = ROTATION_SENSITIVITY):
        self.arena = arena
        self.rotation_sensitivity = rotation_sensitivity
        self.selected: Optional[int] = None
        self._transforms: Dict[int, _Transform] = {}

    def select(self, handle: int) -> None:
        self.selected = handle
        self._transforms.setdefault(handle, _Transform(GRAPH_INITIAL_SCALE, 0.0))

    def rotate(self, translation_x: float) -> None:
        """Spin about the vertical axis by ``translation_x * sensitivity`` rad."""
        if self.selected is None:
            return
        transform = self._transforms[self.selected]
        transform.rotation_y += translation_x * self.rotation_sensitivity
        self.arena.node(self.selected).rotation_y = transform.rotation_y

    def scale(self, factor: float) -> None:
        """Multiply the selected graph's scale by *factor* (pinch delta)."""
        if self.selected is None:
            return
        transform = self._transforms[self.selected]
        transform.scale *= factor
        self.arena.node(self.selected).scale = transform.scale

    def move(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> None:
        if self.selected is None:
            return
        node = self.arena.node(self.selected)
        x, y, z = node.position
        node.position = (x + dx, y + dy, z + dz)

    def step(self, axis: str, direction: int) -> None:
        """One move-button press: ``MOVE_STEP`` along *axis* (``"x"``, ``"y"``, ``"z"``)."""
        delta = [0.0, 0.0, 0.0]
        delta['xyz'.index(axis)] = MOVE_STEP * direction
        self.move(*delta)


class SceneHost:
    """Places one or more graphs into a shared arena.

    Parameters
    ----------
    configurations : sequence of GraphingConfiguration
        One entry per graph, laid out left to right in this order.
    """

    def __init__(self, configurations: Sequence[GraphingConfiguration]):
        self.configurations = list(configurations)
        self.arena = SceneArena()
        self.graph_roots: List[int] = []
        self.node_map: Dict[int, Record] = {}
        self.gestures = GestureHandler(self.arena)
        self.has_placed = False

    def place(self, origin: Vec3 = (0.0, 0.0, 0.0)) -> List[int]:
        """Build every renderable configuration and lay them out.

        Graph *i* is scaled by ``0.1`` and offset ``i * 0.15`` along x,
        raised slightly above *origin*.  Unsupported graph types and
        empty builds are skipped; their slot stays empty.

        Returns the placed graph root handles.
        """
        ox, oy, oz = origin
        for index, config in enumerate(self.configurations):
            if renderer_for(config.graph_type) is None:
                logger.info("Skipping %r: no renderer for %s",
                            config.dataset.name, config.graph_type)
                continue

            build = build_graph(config, self.arena)
            if build.is_empty:
                logger.info("Skipping %r: nothing to render", config.dataset.name)
                continue

            root = build.root_node
            root.scale = GRAPH_INITIAL_SCALE
            root.position = (ox + index * GRAPH_SPACING_X, oy + GRAPH_LIFT_Y, oz)
            self.graph_roots.append(build.root)
            merge_node_maps(self.node_map, build.node_map)

        self.has_placed = True
        logger.info("Placed %d graph(s) with %d point(s)",
                    len(self.graph_roots), len(self.node_map))
        return list(self.graph_roots)

    # ── Hit-test resolution ──────────────────────────────────────────

    def graph_root_for(self, handle: int) -> Optional[int]:
        """The placed graph root containing *handle*, or ``None``."""
        if handle in self.graph_roots:
            return handle
        return next((n.handle for n in self.arena.ancestors(handle)
                     if n.handle in self.graph_roots), None)

    def record_for(self, handle: int) -> Optional[Record]:
        return self.node_map.get(handle)

    def tap(self, handle: int) -> Optional[str]:
        """Summary text of the record behind *handle*, if it is a data point."""
        record = self.record_for(handle)
        return data_summary(record) if record is not None else None

    def double_tap(self, handle: int) -> Optional[int]:
        """Select the graph containing *handle* for gestures."""
        root = self.graph_root_for(handle)
        if root is not None:
            self.gestures.select(root)
        return root
