"""
Constants for the AR Graph Plotter.

Centralises the axis colour convention, tick / grid geometry, graph
placement defaults, synthetic-data ranges, the GUI colour palette and
the matplotlib style dicts.
"""

import os

# ── Dataset storage ──────────────────────────────────────────────────────
STORAGE_DIR_ENV = "ARGRAPH_DATA_DIR"
DATASET_SUFFIX = ".json"
MAX_SELECTED_DATASETS = 4
CATEGORY_KEY = "category"
DEFAULT_CATEGORY = "default"


def default_storage_dir() -> str:
    """Return the dataset directory (``$ARGRAPH_DATA_DIR`` or ``~/.argraph/datasets``)."""
    override = os.environ.get(STORAGE_DIR_ENV)
    if override:
        return override
    return os.path.join(os.path.expanduser("~"), ".argraph", "datasets")


# ── Axis decoration ──────────────────────────────────────────────────────
AXIS_COLORS = {
    'x': '#FF0000',
    'y': '#00C000',
    'z': '#0000FF',
}
AXIS_LENGTH = 1.0
AXIS_LINE_RADIUS = 0.005
AXIS_LABEL_OFFSET = 0.05
AXIS_LABEL_SCALE = 0.025
TICK_COUNT = 11
TICK_MARK_OFFSET = 0.025
TICK_MARK_SIZE = 0.01
TICK_LABEL_OFFSET = 0.06
TICK_LABEL_SCALE = 0.02

# ── Grid planes ──────────────────────────────────────────────────────────
GRID_SPACING = 0.1
GRID_COLOR = '#D1D1D6'
GRID_LINE_WIDTH = 0.001
GRID_PLANES_ALL = ('xy', 'yz', 'xz')

# ── Point primitives ─────────────────────────────────────────────────────
POINT_SIZE = 0.02

# ── Scene placement / interaction ────────────────────────────────────────
GRAPH_INITIAL_SCALE = 0.1
GRAPH_SPACING_X = 0.15
GRAPH_LIFT_Y = 0.02
ROTATION_SENSITIVITY = 0.002
MOVE_STEP = 0.01

# ── Synthetic cell-signature dataset ─────────────────────────────────────
SYNTHETIC_CONDITIONS = ["ns", "M+", "M+F+", "F+", "L+F+", "L+", "L+M+"]
SYNTHETIC_NAME_PREFIX = "SyntheticCellSignatures"
SYNTHETIC_DESCRIPTION = (
    "Simulated cell signature data with 3 numeric dimensions and 1 "
    "categorical label, including negative values."
)
# (lymphoid range, myeloid range) per condition group
SYNTHETIC_RANGES = {
    'lymphoid_high': ((-0.2, 1.0), (-0.2, 0.4)),
    'myeloid_high':  ((-0.2, 0.4), (-0.2, 1.0)),
    'fibro':         ((-0.3, 0.6), (-0.3, 0.6)),
    'other':         ((-0.5, 0.7), (-0.5, 0.7)),
}
SYNTHETIC_P_RANGE = (0.0001, 0.05)

# ── Dark Catppuccin-inspired GUI colour palette ──────────────────────────
DARK_COLORS = {
    'bg':           '#1e1e2e',
    'bg_alt':       '#252536',
    'bg_widget':    '#2a2a3c',
    'bg_input':     '#333348',
    'fg':           '#cdd6f4',
    'fg_dim':       '#9399b2',
    'accent':       '#89b4fa',
    'accent_hover': '#b4befe',
    'green':        '#a6e3a1',
    'red':          '#f38ba8',
    'yellow':       '#f9e2af',
    'border':       '#45475a',
    'selection':    '#45475a',
}

# ── Matplotlib dark-theme style dict (GUI scene view) ───────────────────
PLOT_STYLE_DARK = {
    'figure.facecolor':  DARK_COLORS['bg_alt'],
    'axes.facecolor':    DARK_COLORS['bg_widget'],
    'axes.edgecolor':    DARK_COLORS['border'],
    'axes.labelcolor':   DARK_COLORS['fg'],
    'text.color':        DARK_COLORS['fg'],
    'xtick.color':       DARK_COLORS['fg_dim'],
    'ytick.color':       DARK_COLORS['fg_dim'],
    'font.size':         7,
}

# ── Matplotlib light-theme style dict (PNG export) ──────────────────────
PLOT_STYLE_LIGHT = {
    'figure.facecolor':  '#ffffff',
    'axes.facecolor':    '#ffffff',
    'axes.edgecolor':    '#333333',
    'axes.labelcolor':   '#1a1a2e',
    'text.color':        '#1a1a2e',
    'xtick.color':       '#333333',
    'ytick.color':       '#333333',
    'font.size':         7,
}

EXPORT_DPI = 300
CLIPBOARD_DPI = 150

FONT_FAMILIES = [
    "Segoe UI", "DejaVu Sans", "Liberation Sans", "Noto Sans",
    "Ubuntu", "Helvetica", "Arial", "sans-serif",
]
