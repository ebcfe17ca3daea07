"""
Configuration panel (left side) for the AR Graph Plotter.

Dataset list with multi-select (up to four), the "add dataset" input
(URL or ``gen <n>``), and per-dataset graph type, theme and feature
selection.  The panel owns no rendering; the main window asks it for
``GraphingConfiguration`` objects when the user presses Place.
"""

import uuid
from typing import Dict, List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QGroupBox,
    QLabel, QPushButton, QLineEdit, QComboBox, QListWidget,
    QListWidgetItem, QMessageBox, QFileDialog,
)
from PySide6.QtCore import Qt, Signal

from .configuration import extract_categorical_keys, extract_numeric_feature_keys, format_example
from .constants import DARK_COLORS, MAX_SELECTED_DATASETS
from .data_model import Dataset, GraphingConfiguration, GraphType, Record
from .dataset_store import DatasetStore
from .renderers import renderer_for
from .theme import DEFAULT_THEME_ID, all_themes

_ROLE_ID = Qt.ItemDataRole.UserRole


class ConfigPanel(QWidget):
    """Left-side panel: datasets, input box and graph options."""

    # Signals
    add_requested = Signal(str)     # raw text from the input box
    selection_changed = Signal()

    def __init__(self, store: DatasetStore, parent=None):
        super().__init__(parent)
        self._store = store
        self._records: Dict[uuid.UUID, List[Record]] = {}
        self._choices: Dict[uuid.UUID, dict] = {}
        self._current: Optional[Dataset] = None
        self._setup_ui()
        self._connect_signals()

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(8)

        # ── Group 1: Add dataset ─────────────────────────────────────
        grp_add = QGroupBox("Add Dataset")
        add_layout = QVBoxLayout(grp_add)
        add_layout.setSpacing(4)

        row = QHBoxLayout()
        self._edt_input = QLineEdit()
        self._edt_input.setPlaceholderText("https://... or gen 70")
        self._edt_input.setToolTip(
            "Enter a URL to download a JSON dataset,\n"
            "or 'gen <number>' to generate synthetic data."
        )
        self._btn_add = QPushButton("Add")
        self._btn_add.setFixedWidth(70)
        row.addWidget(self._edt_input, 1)
        row.addWidget(self._btn_add)
        add_layout.addLayout(row)

        self._btn_import = QPushButton("Import JSON File...")
        add_layout.addWidget(self._btn_import)

        self._lbl_status = QLabel("")
        self._lbl_status.setWordWrap(True)
        self._lbl_status.setStyleSheet(
            f"color: {DARK_COLORS['fg_dim']}; font-size: 11px;"
        )
        add_layout.addWidget(self._lbl_status)

        layout.addWidget(grp_add)

        # ── Group 2: Datasets ────────────────────────────────────────
        grp_data = QGroupBox(f"Datasets (select up to {MAX_SELECTED_DATASETS})")
        data_layout = QVBoxLayout(grp_data)
        data_layout.setSpacing(4)

        self._lst_datasets = QListWidget()
        self._lst_datasets.setMinimumHeight(140)
        data_layout.addWidget(self._lst_datasets)

        btn_row = QHBoxLayout()
        self._btn_refresh = QPushButton("Refresh")
        self._btn_delete = QPushButton("Delete")
        btn_row.addWidget(self._btn_refresh)
        btn_row.addWidget(self._btn_delete)
        data_layout.addLayout(btn_row)

        layout.addWidget(grp_data)

        # ── Group 3: Graph options for the highlighted dataset ───────
        grp_graph = QGroupBox("Graph")
        graph_layout = QFormLayout(grp_graph)
        graph_layout.setSpacing(4)

        self._cmb_graph = QComboBox()
        for graph_type in GraphType:
            self._cmb_graph.addItem(graph_type.value, graph_type)
        graph_layout.addRow("Type:", self._cmb_graph)

        self._cmb_theme = QComboBox()
        for theme in all_themes():
            self._cmb_theme.addItem(theme.name, theme.id)
        graph_layout.addRow("Theme:", self._cmb_theme)

        self._lbl_example = QLabel("")
        self._lbl_example.setWordWrap(True)
        self._lbl_example.setStyleSheet(
            f"color: {DARK_COLORS['fg_dim']}; font-size: 11px;"
        )
        graph_layout.addRow("Fields:", self._lbl_example)

        self._lst_features = QListWidget()
        self._lst_features.setMinimumHeight(120)
        graph_layout.addRow("Features:", self._lst_features)

        layout.addWidget(grp_graph)
        grp_graph.setEnabled(False)
        self._grp_graph = grp_graph

        # ── Actions ──────────────────────────────────────────────────
        c = DARK_COLORS
        self._btn_place = QPushButton("Place Graphs")
        self._btn_place.setStyleSheet(
            f"QPushButton {{ background-color: {c['accent']}; "
            f"color: {c['bg']}; font-weight: bold; "
            f"font-size: 14px; padding: 10px; }}"
            f"QPushButton:hover {{ background-color: {c['accent_hover']}; }}"
            f"QPushButton:disabled {{ background-color: {c['bg']}; "
            f"color: {c['fg_dim']}; }}"
        )
        self._btn_place.setEnabled(False)
        layout.addWidget(self._btn_place)

        layout.addStretch()

    # ── Signal connections ───────────────────────────────────────────

    def _connect_signals(self):
        self._btn_add.clicked.connect(lambda *_: self._on_add())
        self._edt_input.returnPressed.connect(self._on_add)
        self._btn_import.clicked.connect(lambda *_: self._on_import())
        self._btn_refresh.clicked.connect(lambda *_: self.reload())
        self._btn_delete.clicked.connect(lambda *_: self._on_delete())

        self._lst_datasets.itemChanged.connect(self._on_dataset_checked)
        self._lst_datasets.currentItemChanged.connect(
            lambda current, _previous: self._on_dataset_highlighted(current)
        )
        self._cmb_graph.currentIndexChanged.connect(lambda *_: self._store_choices())
        self._cmb_theme.currentIndexChanged.connect(lambda *_: self._store_choices())
        self._lst_features.itemChanged.connect(lambda *_: self._store_choices())

    # ── Dataset list ─────────────────────────────────────────────────

    def reload(self):
        """Rescan the store and rebuild the dataset list."""
        result = self._store.load_all()
        if not result.ok:
            self.show_status(result.error.message, error=True)
        self._populate_datasets()

    def _populate_datasets(self):
        self._lst_datasets.blockSignals(True)
        self._lst_datasets.clear()
        for dataset in self._store.list():
            item = QListWidgetItem(dataset.name)
            item.setToolTip(dataset.description)
            item.setData(_ROLE_ID, dataset.id)
            item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            checked = dataset.id in self._store.selected_ids
            item.setCheckState(Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
            self._lst_datasets.addItem(item)
        self._lst_datasets.blockSignals(False)
        self._update_place_button()

    def _dataset_for(self, item: Optional[QListWidgetItem]) -> Optional[Dataset]:
        if item is None:
            return None
        dataset_id = item.data(_ROLE_ID)
        return next((d for d in self._store.list() if d.id == dataset_id), None)

    def _on_dataset_checked(self, item: QListWidgetItem):
        dataset_id = item.data(_ROLE_ID)
        wants = item.checkState() == Qt.CheckState.Checked
        if wants != (dataset_id in self._store.selected_ids):
            if not self._store.toggle_selection(dataset_id):
                self._lst_datasets.blockSignals(True)
                item.setCheckState(Qt.CheckState.Unchecked)
                self._lst_datasets.blockSignals(False)
                QMessageBox.warning(self, "Selection Limit", self._store.error_message)
        self._update_place_button()
        self.selection_changed.emit()

    def _on_dataset_highlighted(self, item: Optional[QListWidgetItem]):
        self._current = self._dataset_for(item)
        self._grp_graph.setEnabled(self._current is not None)
        if self._current is None:
            return

        records = self._records_for(self._current)
        if records is None:
            self._grp_graph.setEnabled(False)
            return

        choices = self._choices.setdefault(self._current.id, {
            'graph_type': GraphType.SCATTER_PLOT,
            'theme_id': DEFAULT_THEME_ID,
            'features': [],
        })

        for widget in (self._cmb_graph, self._cmb_theme, self._lst_features):
            widget.blockSignals(True)
        self._cmb_graph.setCurrentIndex(self._cmb_graph.findData(choices['graph_type']))
        self._cmb_theme.setCurrentIndex(self._cmb_theme.findData(choices['theme_id']))

        self._lst_features.clear()
        keys = extract_categorical_keys(records) + extract_numeric_feature_keys(records)
        for key in keys:
            item = QListWidgetItem(key)
            item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            item.setCheckState(
                Qt.CheckState.Checked if key in choices['features'] else Qt.CheckState.Unchecked
            )
            self._lst_features.addItem(item)
        self._lbl_example.setText(format_example(records) or "(no records)")
        for widget in (self._cmb_graph, self._cmb_theme, self._lst_features):
            widget.blockSignals(False)

    def _records_for(self, dataset: Dataset) -> Optional[List[Record]]:
        if dataset.id not in self._records:
            result = self._store.load_records(dataset)
            if not result.ok:
                self.show_status(result.error.message, error=True)
                return None
            self._records[dataset.id] = result.value
        return self._records[dataset.id]

    def _store_choices(self):
        if self._current is None:
            return
        features = [
            self._lst_features.item(i).text()
            for i in range(self._lst_features.count())
            if self._lst_features.item(i).checkState() == Qt.CheckState.Checked
        ]
        self._choices[self._current.id] = {
            'graph_type': self._cmb_graph.currentData(),
            'theme_id': self._cmb_theme.currentData(),
            'features': features,
        }

    def _update_place_button(self):
        self._btn_place.setEnabled(bool(self._store.selected_ids))

    # ── Actions ──────────────────────────────────────────────────────

    def _on_add(self):
        text = self._edt_input.text().strip()
        if not text:
            return
        self.set_busy(True)
        self.show_status("Working...")
        self.add_requested.emit(text)

    def _on_import(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Import JSON Dataset",
            "", "JSON Files (*.json);;All Files (*)",
        )
        if not path:
            return
        try:
            with open(path, 'rb') as fh:
                raw = fh.read()
        except OSError as exc:
            QMessageBox.critical(self, "Import Error", str(exc))
            return
        result = self._store.ingest_json(raw)
        if not result.ok:
            self.show_status(result.error.message, error=True)
            QMessageBox.warning(self, "Import Failed", result.error.message)
            return
        self._store.add(result.value)
        self._populate_datasets()
        self.show_status(f"JSON dataset '{result.value.name}' imported.")

    def _on_delete(self):
        dataset = self._dataset_for(self._lst_datasets.currentItem())
        if dataset is None:
            return
        answer = QMessageBox.question(
            self, "Delete Dataset",
            f"Delete '{dataset.name}' and its file?\n\n{dataset.file_path}",
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        result = self._store.delete(dataset)
        if not result.ok:
            QMessageBox.critical(self, "Delete Failed", result.error.message)
        self._records.pop(dataset.id, None)
        self._choices.pop(dataset.id, None)
        self._populate_datasets()

    # ── Public API ───────────────────────────────────────────────────

    def show_status(self, text: str, *, error: bool = False):
        color = DARK_COLORS['red'] if error else DARK_COLORS['green']
        self._lbl_status.setText(text)
        self._lbl_status.setStyleSheet(f"color: {color}; font-size: 11px;")

    def set_busy(self, busy: bool):
        self._btn_add.setEnabled(not busy)
        self._edt_input.setEnabled(not busy)

    def on_add_finished(self, message: Optional[str]):
        """Slot for the worker: show the outcome and refresh the list."""
        self.set_busy(False)
        if message is None:
            self.show_status(self._store.error_message or "Failed.", error=True)
            return
        self._edt_input.clear()
        self.show_status(message)
        self._populate_datasets()

    def get_configurations(self) -> List[GraphingConfiguration]:
        """One configuration per selected dataset, in list order."""
        configs = []
        for dataset in self._store.selected_datasets():
            choices = self._choices.get(dataset.id, {})
            configs.append(GraphingConfiguration(
                dataset=dataset,
                graph_type=choices.get('graph_type', GraphType.SCATTER_PLOT),
                selected_features=tuple(choices.get('features', ())),
                theme_id=choices.get('theme_id', DEFAULT_THEME_ID),
            ))
        return configs

    def unsupported_selection(self) -> List[str]:
        """Names of selected datasets whose graph type has no renderer."""
        return [
            c.dataset.name for c in self.get_configurations()
            if renderer_for(c.graph_type) is None
        ]

    @property
    def place_button(self) -> QPushButton:
        """Access to the Place button for external signal connection."""
        return self._btn_place
