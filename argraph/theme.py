"""
Themes for the AR Graph Plotter.

Two kinds of theme live here:

- Category themes: a small closed table of ``CategoryTheme`` records
  mapping a category string to a ``(MarkerShape, colour)`` pair.  Themes
  are looked up by id; an unknown id falls back to ``"default"``.
- The dark Catppuccin GUI stylesheet and the matplotlib style switch
  used by the desktop shell.

Hash-based choices use CRC-32 of the category so the same category gets
the same colour and shape on every run.
"""

import zlib
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Tuple

from matplotlib.colors import hsv_to_rgb, to_hex

from .constants import DARK_COLORS, DEFAULT_CATEGORY


class MarkerShape(Enum):
    """Point primitive requested from the drawing backend."""
    SPHERE = "sphere"
    PYRAMID = "pyramid"
    CYLINDER = "cylinder"
    BOX = "box"
    TORUS = "torus"
    CONE = "cone"
    CAPSULE = "capsule"
    PLANE = "plane"


SYSTEM_GRAY = '#8E8E93'
SYSTEM_GREEN = '#34C759'
SYSTEM_ORANGE = '#FF9500'
SYSTEM_RED = '#FF3B30'


def stable_hash(category: str) -> int:
    """Deterministic non-negative hash of *category*."""
    return zlib.crc32(category.encode('utf-8'))


def _hue_color(category: str, saturation: float, brightness: float) -> str:
    hue = (stable_hash(category) % 256) / 255.0
    return to_hex(hsv_to_rgb((hue, saturation, brightness)))


@dataclass(frozen=True)
class CategoryTheme:
    """Pure mapping from category string to shape and colour."""
    id: str
    name: str
    color_fn: Callable[[str], str]
    shape_fn: Callable[[str], MarkerShape]

    def color(self, category: str) -> str:
        return self.color_fn(category)

    def shape(self, category: str) -> MarkerShape:
        return self.shape_fn(category)

    def style(self, category: str) -> Tuple[MarkerShape, str]:
        return self.shape_fn(category), self.color_fn(category)


# ── Default ──────────────────────────────────────────────────────────────

def _default_color(category: str) -> str:
    return _hue_color(category, 0.8, 0.9)


def _default_shape(category: str) -> MarkerShape:
    return MarkerShape.SPHERE


# ── Material (low / medium / high) ──────────────────────────────────────

_MATERIAL_STYLES = {
    'low': (MarkerShape.BOX, SYSTEM_GREEN),
    'medium': (MarkerShape.CYLINDER, SYSTEM_ORANGE),
    'high': (MarkerShape.PYRAMID, SYSTEM_RED),
}


def _material_color(category: str) -> str:
    return _MATERIAL_STYLES.get(category.lower(), (None, SYSTEM_GRAY))[1]


def _material_shape(category: str) -> MarkerShape:
    return _MATERIAL_STYLES.get(category.lower(), (MarkerShape.SPHERE, None))[0]


# ── Neon ─────────────────────────────────────────────────────────────────

_NEON_SHAPES = [MarkerShape.TORUS, MarkerShape.CONE, MarkerShape.SPHERE]


def _neon_color(category: str) -> str:
    return _hue_color(category, 1.0, 1.0)


def _neon_shape(category: str) -> MarkerShape:
    if category == DEFAULT_CATEGORY:
        return MarkerShape.SPHERE
    return _NEON_SHAPES[stable_hash(category) % len(_NEON_SHAPES)]


# ── Shape only ───────────────────────────────────────────────────────────

_SHAPE_ONLY_SHAPES = [
    MarkerShape.SPHERE, MarkerShape.PYRAMID, MarkerShape.CYLINDER,
    MarkerShape.BOX, MarkerShape.TORUS, MarkerShape.CONE,
    MarkerShape.CAPSULE, MarkerShape.PLANE,
]


def _shape_only_shape(category: str) -> MarkerShape:
    if category == DEFAULT_CATEGORY:
        return MarkerShape.SPHERE
    return _SHAPE_ONLY_SHAPES[stable_hash(category) % len(_SHAPE_ONLY_SHAPES)]


THEMES: Dict[str, CategoryTheme] = {
    theme.id: theme for theme in (
        CategoryTheme('default', "Default", _default_color, _default_shape),
        CategoryTheme('material', "Material", _material_color, _material_shape),
        CategoryTheme('neon', "Neon", _neon_color, _neon_shape),
        CategoryTheme('shape_only', "Shape Only", lambda _c: SYSTEM_GRAY, _shape_only_shape),
    )
}
DEFAULT_THEME_ID = 'default'


def get_theme(theme_id: str) -> CategoryTheme:
    """Return the theme registered under *theme_id*, or the default theme."""
    return THEMES.get(theme_id, THEMES[DEFAULT_THEME_ID])


def all_themes() -> List[CategoryTheme]:
    return list(THEMES.values())


# ── GUI stylesheet ───────────────────────────────────────────────────────

def get_dark_stylesheet() -> str:
    """Generate the dark mode Qt stylesheet."""
    c = DARK_COLORS
    return f"""
    QMainWindow, QWidget {{
        background-color: {c['bg']};
        color: {c['fg']};
        font-size: 13px;
    }}
    QGroupBox {{
        border: 1px solid {c['border']};
        border-radius: 6px;
        margin-top: 12px;
        padding-top: 16px;
        font-weight: bold;
        color: {c['accent']};
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 12px;
        padding: 0 6px;
    }}
    QPushButton {{
        background-color: {c['bg_widget']};
        color: {c['fg']};
        border: 1px solid {c['border']};
        border-radius: 4px;
        padding: 6px 16px;
        min-height: 24px;
    }}
    QPushButton:hover {{
        background-color: {c['selection']};
        border-color: {c['accent']};
    }}
    QPushButton:disabled {{
        color: {c['fg_dim']};
        background-color: {c['bg']};
    }}
    QLineEdit, QComboBox {{
        background-color: {c['bg_input']};
        color: {c['fg']};
        border: 1px solid {c['border']};
        border-radius: 4px;
        padding: 4px 8px;
        min-height: 22px;
    }}
    QListWidget {{
        background-color: {c['bg_widget']};
        color: {c['fg']};
        border: 1px solid {c['border']};
        border-radius: 4px;
    }}
    QListWidget::item:selected {{
        background-color: {c['selection']};
    }}
    QStatusBar {{
        background-color: {c['bg_alt']};
        color: {c['fg_dim']};
        border-top: 1px solid {c['border']};
    }}
    QCheckBox {{
        color: {c['fg']};
        spacing: 8px;
    }}
    QLabel {{
        color: {c['fg']};
    }}
    """


def apply_plot_style(style_dict: dict) -> None:
    """Apply a style dictionary to matplotlib rcParams.

    Parameters
    ----------
    style_dict : dict
        One of ``PLOT_STYLE_DARK`` or ``PLOT_STYLE_LIGHT``.
    """
    import matplotlib as mpl
    for key, value in style_dict.items():
        mpl.rcParams[key] = value
