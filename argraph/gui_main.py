"""
Main window for the AR Graph Plotter.

Hosts the ConfigPanel (left) and SceneView (right) in a horizontal
splitter, with a menu bar and status bar.  Dataset downloads and
synthetic generation run on a ``QThread`` worker; graph building runs
on the GUI thread.
"""

import logging
import warnings

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QScrollArea,
    QMessageBox,
)
from PySide6.QtGui import QAction
from PySide6.QtCore import Qt, QThread, Signal

from . import APP_NAME, APP_VERSION
from .data_input import DataInputHandler
from .dataset_store import DatasetStore
from .gui_config_panel import ConfigPanel
from .gui_scene_view import SceneView
from .scene_host import SceneHost

logger = logging.getLogger(__name__)

EXAMPLE_RECORD_COUNT = 70


class _InputWorkerThread(QThread):
    """Runs ``DataInputHandler.handle`` off the GUI thread.

    Signals
    -------
    finished_result : Signal(object)
        ``InputOutcome``, or ``None`` when the store holds an error.
    error_occurred : Signal(str)
        Emitted instead when ``handle`` raises.
    """

    finished_result = Signal(object)
    error_occurred = Signal(str)

    def __init__(self, handler: DataInputHandler, text: str, parent=None):
        super().__init__(parent)
        self._handler = handler
        self._text = text

    def run(self):  # noqa: D401 – Qt override
        try:
            self.finished_result.emit(self._handler.handle(self._text))
        except Exception as exc:
            logger.exception("Input handling failed")
            self.error_occurred.emit(f"{type(exc).__name__}: {exc}")


class PlotterMainWindow(QMainWindow):
    """Main window for the AR Graph Plotter."""

    def __init__(self, store: DatasetStore = None):
        super().__init__()
        self._store = store or DatasetStore()
        self._handler = DataInputHandler(self._store)
        self._worker = None
        self._host = None

        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(1200, 800)

        self._setup_ui()
        self._setup_menu()
        self._connect_signals()

        self._config_panel.reload()
        self.statusBar().showMessage(
            f"Ready: {len(self._store.list())} dataset(s) in {self._store.storage_dir}"
        )

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(4, 4, 4, 4)
        main_layout.setSpacing(4)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        # Left panel: config in scroll area
        self._config_panel = ConfigPanel(self._store)
        scroll = QScrollArea()
        scroll.setWidget(self._config_panel)
        scroll.setWidgetResizable(True)
        scroll.setMinimumWidth(320)
        scroll.setMaximumWidth(500)

        # Right panel: scene
        self._scene_view = SceneView()

        splitter.addWidget(scroll)
        splitter.addWidget(self._scene_view)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([380, 820])

        main_layout.addWidget(splitter)

    def _setup_menu(self):
        menubar = self.menuBar()

        # ── File menu ────────────────────────────────────────────────
        file_menu = menubar.addMenu("File")

        act_reload = QAction("Reload Datasets", self)
        act_reload.triggered.connect(lambda *_: self._config_panel.reload())
        file_menu.addAction(act_reload)

        file_menu.addSeparator()

        act_exit = QAction("Exit", self)
        act_exit.triggered.connect(self.close)
        file_menu.addAction(act_exit)

        # ── Examples menu ────────────────────────────────────────────
        examples_menu = menubar.addMenu("Examples")

        act_example = QAction("Generate Example Dataset", self)
        act_example.triggered.connect(
            lambda *_: self._run_input(f"gen {EXAMPLE_RECORD_COUNT}")
        )
        examples_menu.addAction(act_example)

        # ── Help menu ────────────────────────────────────────────────
        help_menu = menubar.addMenu("Help")

        act_about = QAction("About", self)
        act_about.triggered.connect(lambda *_: self._show_about())
        help_menu.addAction(act_about)

    def _connect_signals(self):
        self._config_panel.add_requested.connect(self._run_input)
        self._config_panel.place_button.clicked.connect(
            lambda *_: self._on_place()
        )

    # ── Slots ────────────────────────────────────────────────────────

    def _run_input(self, text: str):
        """Slot: hand one line of input to a worker thread."""
        if self._worker is not None and self._worker.isRunning():
            self.statusBar().showMessage("Still working on the previous request...", 3000)
            return
        self._config_panel.set_busy(True)
        self.statusBar().showMessage("Working...")
        self._worker = _InputWorkerThread(self._handler, text, self)
        self._worker.finished_result.connect(self._on_input_finished)
        self._worker.error_occurred.connect(self._on_input_error)
        self._worker.start()

    def _on_input_finished(self, outcome):
        """Slot: catalogue the new dataset on the GUI thread."""
        if outcome is None:
            self._config_panel.on_add_finished(None)
            self.statusBar().showMessage(self._store.error_message or "Failed", 5000)
            return
        self._store.add(outcome.dataset)
        self._config_panel.on_add_finished(outcome.message)
        self.statusBar().showMessage(outcome.message, 5000)

    def _on_input_error(self, msg: str):
        self._store.error_message = msg
        self._config_panel.on_add_finished(None)
        self.statusBar().showMessage("Error", 5000)
        QMessageBox.critical(self, "Input Failed", msg)

    def _on_place(self):
        """Slot: Place Graphs button clicked."""
        configs = self._config_panel.get_configurations()
        if not configs:
            QMessageBox.warning(self, "No Data", "Please select at least one dataset.")
            return

        unsupported = self._config_panel.unsupported_selection()
        if unsupported:
            QMessageBox.information(
                self, "Not Supported",
                "No renderer for the chosen graph type of:\n\n"
                + "\n".join(f"  - {name}" for name in unsupported),
            )

        host = SceneHost(configs)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            roots = host.place()

        if not roots:
            detail = "\n".join(str(w.message) for w in caught) or "Nothing to render."
            QMessageBox.warning(self, "Nothing to Render", detail)
            self.statusBar().showMessage("Nothing placed", 5000)
            return

        for w in caught:
            logger.warning("%s", w.message)
        self._host = host
        self._scene_view.show_host(host)
        self.statusBar().showMessage(
            f"Placed {len(roots)} graph(s), {len(host.node_map)} point(s)", 5000
        )

    def _show_about(self):
        QMessageBox.about(
            self,
            f"About {APP_NAME}",
            f"<h3>{APP_NAME} v{APP_VERSION}</h3>"
            f"<p>Interactive 3D scatter plots of tabular JSON datasets.</p>"
            f"<p>Each dataset is normalised into a unit cube with labelled "
            f"axes and grid planes; click a point to inspect its record.</p>"
            f"<p>Type <b>gen &lt;n&gt;</b> to generate a synthetic "
            f"cell-signature dataset.</p>",
        )
