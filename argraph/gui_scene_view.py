"""
Scene view (right side) for the AR Graph Plotter.

A matplotlib canvas showing the placed graphs, with a navigation
toolbar, export buttons and the X / Y / Z move controls.

Mouse handling mirrors the AR gestures:

- click a point: show its record;
- double-click a point: select the graph it belongs to;
- drag horizontally: rotate the selected graph;
- scroll: scale the selected graph.
"""

import os
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel,
    QFileDialog, QMessageBox, QApplication,
)
from PySide6.QtGui import QImage

import matplotlib
matplotlib.use('QtAgg')
from matplotlib.figure import Figure
from matplotlib.backends.backend_qtagg import (
    FigureCanvasQTAgg as FigureCanvas,
    NavigationToolbar2QT as NavigationToolbar,
)

from .constants import DARK_COLORS, PLOT_STYLE_DARK
from .export import export_png, png_bytes
from .mpl_render import PickIndex, fit_bounds, render_scene
from .scene import SceneArena
from .scene_host import SceneHost
from .theme import apply_plot_style

SCROLL_SCALE_STEP = 1.1


class SceneView(QWidget):
    """Canvas, toolbar and move controls for one ``SceneHost``."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._host: Optional[SceneHost] = None
        self._picks = PickIndex()
        self._bounds = None
        self._drag_x: Optional[float] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        # ── Toolbar row ──────────────────────────────────────────────
        toolbar_row = QHBoxLayout()
        toolbar_row.setSpacing(4)

        apply_plot_style(PLOT_STYLE_DARK)
        self._fig = Figure(figsize=(7, 6))
        self._fig.set_facecolor(DARK_COLORS['bg_alt'])
        self._canvas = FigureCanvas(self._fig)
        self._toolbar = NavigationToolbar(self._canvas, self)

        toolbar_row.addWidget(self._toolbar)
        toolbar_row.addStretch()

        self._btn_copy = QPushButton("Copy to Clipboard")
        self._btn_copy.setFixedHeight(28)
        self._btn_copy.setStyleSheet("font-size: 11px; padding: 2px 8px;")
        self._btn_copy.clicked.connect(lambda *_: self._on_copy())
        toolbar_row.addWidget(self._btn_copy)

        self._btn_export = QPushButton("Export PNG...")
        self._btn_export.setFixedHeight(28)
        self._btn_export.setStyleSheet("font-size: 11px; padding: 2px 8px;")
        self._btn_export.clicked.connect(lambda *_: self._on_export())
        toolbar_row.addWidget(self._btn_export)

        layout.addLayout(toolbar_row)

        # ── Canvas ───────────────────────────────────────────────────
        layout.addWidget(self._canvas, 1)

        # ── Move controls ────────────────────────────────────────────
        move_row = QHBoxLayout()
        move_row.setSpacing(4)
        self._lbl_selected = QLabel("Double-click a graph to select it")
        self._lbl_selected.setStyleSheet(
            f"color: {DARK_COLORS['fg_dim']}; font-size: 11px;"
        )
        move_row.addWidget(self._lbl_selected)
        move_row.addStretch()
        for axis in ('x', 'y', 'z'):
            move_row.addWidget(QLabel(axis.upper()))
            for text, direction in (("–", -1), ("+", 1)):
                btn = QPushButton(text)
                btn.setFixedWidth(32)
                btn.clicked.connect(
                    lambda checked=False, a=axis, d=direction: self._on_move(a, d)
                )
                move_row.addWidget(btn)
        layout.addLayout(move_row)

        self._canvas.mpl_connect('pick_event', self._on_pick)
        self._canvas.mpl_connect('button_press_event', self._on_press)
        self._canvas.mpl_connect('motion_notify_event', self._on_motion)
        self._canvas.mpl_connect('button_release_event', self._on_release)
        self._canvas.mpl_connect('scroll_event', self._on_scroll)

        self.redraw()

    @property
    def fig(self) -> Figure:
        return self._fig

    # ── Rendering ────────────────────────────────────────────────────

    def show_host(self, host: SceneHost):
        """Display a freshly placed host; the view box is fitted once."""
        self._host = host
        self._bounds = fit_bounds(host.arena, host.graph_roots, pad_fraction=0.25)
        self._lbl_selected.setText("Double-click a graph to select it")
        self.redraw()

    def redraw(self):
        apply_plot_style(PLOT_STYLE_DARK)
        if self._host is None:
            self._picks = render_scene(self._fig, SceneArena(), [])
        else:
            self._picks = render_scene(
                self._fig, self._host.arena, self._host.graph_roots,
                bounds=self._bounds,
            )
        for ax in self._fig.get_axes():
            ax.disable_mouse_rotation()
        self._canvas.draw_idle()

    # ── Mouse handling ───────────────────────────────────────────────

    def _on_pick(self, event):
        if self._host is None or not len(event.ind):
            return
        handle = self._picks.handle_for(event.artist, int(event.ind[0]))
        if handle is None:
            return
        if event.mouseevent.dblclick:
            self._select(handle)
            return
        summary = self._host.tap(handle)
        if summary is not None:
            QMessageBox.information(self, "Data Point", summary)

    def _on_press(self, event):
        if event.button != 1 or event.inaxes is None:
            return
        self._drag_x = event.x

    def _on_motion(self, event):
        if self._drag_x is None or self._host is None or event.x is None:
            return
        if self._host.gestures.selected is None:
            return
        self._host.gestures.rotate(event.x - self._drag_x)
        self._drag_x = event.x
        self.redraw()

    def _on_release(self, _event):
        self._drag_x = None

    def _on_scroll(self, event):
        if self._host is None or self._host.gestures.selected is None:
            return
        factor = SCROLL_SCALE_STEP if event.button == 'up' else 1.0 / SCROLL_SCALE_STEP
        self._host.gestures.scale(factor)
        self.redraw()

    def _select(self, handle: int):
        root = self._host.double_tap(handle)
        if root is None:
            return
        index = self._host.graph_roots.index(root)
        self._lbl_selected.setText(f"Selected graph {index + 1}: drag to rotate, scroll to scale")

    def _on_move(self, axis: str, direction: int):
        if self._host is None or self._host.gestures.selected is None:
            return
        self._host.gestures.step(axis, direction)
        self.redraw()

    # ── Export ───────────────────────────────────────────────────────

    def _on_copy(self):
        img = QImage()
        img.loadFromData(png_bytes(self._fig))
        clipboard = QApplication.clipboard()
        if clipboard is not None:
            clipboard.setImage(img)
            self.window().statusBar().showMessage("Scene copied to clipboard", 3000)
        else:
            QMessageBox.warning(self, "Copy Failed",
                                "Could not copy scene to clipboard.")

    def _on_export(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Scene as PNG",
            "", "PNG Files (*.png);;All Files (*)",
        )
        if path:
            if not path.lower().endswith('.png'):
                path += '.png'
            try:
                export_png(self._fig, path)
                self.window().statusBar().showMessage(
                    f"Exported to {os.path.basename(path)}", 3000
                )
            except OSError as exc:
                QMessageBox.critical(
                    self, "Export Error", f"Failed to export: {exc}"
                )
