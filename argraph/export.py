"""
PNG export for the AR Graph Plotter scene view.

The dark GUI background is swapped for white while the figure is saved
and restored afterwards; ``try/finally`` guarantees the restore even if
saving fails.
"""

import io

from matplotlib.figure import Figure

from .constants import CLIPBOARD_DPI, EXPORT_DPI, PLOT_STYLE_LIGHT


def _save_figure_state(fig: Figure) -> dict:
    return {
        'fig_facecolor': fig.get_facecolor(),
        'axes_facecolors': [ax.get_facecolor() for ax in fig.get_axes()],
    }


def _apply_light_theme(fig: Figure) -> None:
    fig.set_facecolor(PLOT_STYLE_LIGHT['figure.facecolor'])
    for ax in fig.get_axes():
        ax.set_facecolor(PLOT_STYLE_LIGHT['axes.facecolor'])


def _restore_figure_state(fig: Figure, state: dict) -> None:
    fig.set_facecolor(state['fig_facecolor'])
    for ax, color in zip(fig.get_axes(), state['axes_facecolors']):
        ax.set_facecolor(color)


def export_png(fig: Figure, filepath, *, dpi: int = EXPORT_DPI) -> None:
    """Save *fig* as a white-background PNG.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
    filepath : str or file-like
        Output path (should end with ``.png``) or binary buffer.
    dpi : int
        Export resolution.
    """
    state = _save_figure_state(fig)
    try:
        _apply_light_theme(fig)
        fig.savefig(
            filepath,
            format='png',
            dpi=dpi,
            bbox_inches='tight',
            facecolor=fig.get_facecolor(),
            edgecolor='none',
            pad_inches=0.1,
        )
    finally:
        _restore_figure_state(fig, state)


def png_bytes(fig: Figure, dpi: int = CLIPBOARD_DPI) -> bytes:
    """White-background PNG of *fig* as bytes (for the clipboard)."""
    buf = io.BytesIO()
    export_png(fig, buf, dpi=dpi)
    return buf.getvalue()
