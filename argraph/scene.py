"""
Scene graph for the AR Graph Plotter.

Visual nodes are stored in an append-only ``SceneArena`` and addressed
by integer handle.  A node records *what* to draw (point shape, line
segment, text label, or an empty group) and where, relative to its
parent; the drawing backend decides *how*.

The node map that makes tap-to-inspect possible is a plain
``{handle: record}`` dict.  Handles are unique within an arena, so
several graphs built into one shared arena can merge their node maps
without ever aliasing a node to the wrong record.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .data_model import AxisProjection, Record
from .theme import MarkerShape

Vec3 = Tuple[float, float, float]
ORIGIN: Vec3 = (0.0, 0.0, 0.0)


class NodeKind(Enum):
    GROUP = "group"
    POINT = "point"
    LINE = "line"
    TEXT = "text"


@dataclass
class VisualNode:
    """One renderable primitive (or an empty group).

    ``position`` is relative to the parent.  For ``LINE`` nodes the
    segment runs from ``position`` to ``end`` in the same frame.
    ``scale`` and ``rotation_y`` apply to the node's children and are
    what the scene host changes on pinch and pan.
    """
    handle: int
    kind: NodeKind
    parent: Optional[int] = None
    name: str = ""
    position: Vec3 = ORIGIN
    color: Optional[str] = None
    shape: Optional[MarkerShape] = None
    size: float = 0.0
    end: Optional[Vec3] = None
    text: Optional[str] = None
    scale: float = 1.0
    rotation_y: float = 0.0
    children: List[int] = field(default_factory=list)


class SceneArena:
    """Append-only store of ``VisualNode`` objects."""

    def __init__(self):
        self._nodes: List[VisualNode] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[VisualNode]:
        return iter(self._nodes)

    def node(self, handle: int) -> VisualNode:
        return self._nodes[handle]

    def _append(self, kind: NodeKind, parent: Optional[int], **attrs) -> int:
        handle = len(self._nodes)
        self._nodes.append(VisualNode(handle=handle, kind=kind, parent=parent, **attrs))
        if parent is not None:
            self._nodes[parent].children.append(handle)
        return handle

    def add_group(self, parent: Optional[int] = None, name: str = "",
                  position: Vec3 = ORIGIN) -> int:
        return self._append(NodeKind.GROUP, parent, name=name, position=position)

    def add_point(self, parent: int, position: Vec3, shape: MarkerShape,
                  color: str, size: float) -> int:
        return self._append(NodeKind.POINT, parent, position=position,
                            shape=shape, color=color, size=size)

    def add_line(self, parent: int, start: Vec3, end: Vec3, color: str,
                 width: float, name: str = "") -> int:
        return self._append(NodeKind.LINE, parent, name=name, position=start,
                            end=end, color=color, size=width)

    def add_text(self, parent: int, position: Vec3, text: str, color: str,
                 scale: float, name: str = "") -> int:
        return self._append(NodeKind.TEXT, parent, name=name, position=position,
                            text=text, color=color, size=scale)

    def children(self, handle: int) -> List[VisualNode]:
        return [self._nodes[h] for h in self._nodes[handle].children]

    def walk(self, handle: int) -> Iterator[VisualNode]:
        """Depth-first iteration over *handle* and its descendants."""
        stack = [handle]
        while stack:
            node = self._nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def ancestors(self, handle: int) -> Iterator[VisualNode]:
        """Parents of *handle*, nearest first."""
        parent = self._nodes[handle].parent
        while parent is not None:
            node = self._nodes[parent]
            yield node
            parent = node.parent

    def to_world(self, handle: int, local: Vec3) -> np.ndarray:
        """Map a point given in *handle*'s parent frame to world space."""
        point = np.asarray(local, dtype=float)
        for ancestor in self.ancestors(handle):
            point = ancestor.scale * (_rotation_y(ancestor.rotation_y) @ point)
            point = point + np.asarray(ancestor.position, dtype=float)
        return point

    def world_position(self, handle: int) -> np.ndarray:
        return self.to_world(handle, self._nodes[handle].position)


def _rotation_y(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ])


@dataclass
class GraphBuild:
    """Output of a graph builder: the root group and its node map.

    An empty build (root without children, empty map) means "nothing to
    render" and is never an error.
    """
    arena: SceneArena
    root: int
    node_map: Dict[int, Record]
    projections: List[AxisProjection] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.arena.node(self.root).children

    @property
    def root_node(self) -> VisualNode:
        return self.arena.node(self.root)


def empty_build(arena: Optional[SceneArena] = None) -> GraphBuild:
    """Return a fresh root group with no children and no mappings."""
    arena = SceneArena() if arena is None else arena
    return GraphBuild(arena=arena, root=arena.add_group(name="graph"), node_map={})


def merge_node_maps(target: Dict[int, Record], source: Dict[int, Record]) -> Dict[int, Record]:
    """Merge *source* into *target*; an existing key keeps its record."""
    for handle, record in source.items():
        target.setdefault(handle, record)
    return target
