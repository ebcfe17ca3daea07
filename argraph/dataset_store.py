"""
Dataset catalogue for the AR Graph Plotter.

Datasets are flat UTF-8 JSON files in one storage directory.  The store
keeps an in-memory list of ``Dataset`` headers (newest first), a set of
selected dataset ids for multi-dataset scenes, and the last
user-visible error message.

Ingest runs the schema validator and writes the file only when the
document is accepted and its name is not already taken (compared
case-insensitively against both the in-memory list and the files on
disk).  Rescanning reads headers only; files that cannot be read or do
not carry a string ``name`` and ``description`` are skipped with a
warning.
"""

import logging
import os
import re
import uuid
import warnings
from typing import List, Optional, Set, Tuple

from .constants import DATASET_SUFFIX, MAX_SELECTED_DATASETS, default_storage_dir
from .data_model import Dataset, Record, ValidatedDataSet
from .example_data import synthetic_dataset_name, write_synthetic_dataset
from .json_validation import (
    InvalidStructureError, JSONValidator, ValidationError, load_json_document,
)
from .results import ErrorKind, Result

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def file_name_for(name: str) -> str:
    """Filesystem-safe ``<name>.json``."""
    return _UNSAFE_FILENAME_CHARS.sub('_', name).strip() + DATASET_SUFFIX


def read_header(path: str) -> Optional[Tuple[str, str]]:
    """Return ``(name, description)`` of a dataset file, or ``None``.

    ``None`` covers unreadable files, invalid JSON and documents without
    string ``name`` / ``description`` fields.
    """
    try:
        with open(path, 'rb') as fh:
            document = load_json_document(fh.read())
    except (OSError, InvalidStructureError):
        return None
    if not isinstance(document, dict):
        return None
    name = document.get('name')
    description = document.get('description')
    if not isinstance(name, str) or not isinstance(description, str):
        return None
    return name, description


def load_raw_records(path: str) -> List[Record]:
    """Read the ``data`` records of a dataset file.

    Raises
    ------
    OSError
        The file cannot be read.
    InvalidStructureError
        Not JSON, or ``data`` is not a list of objects.
    """
    with open(path, 'rb') as fh:
        document = load_json_document(fh.read())
    data = document.get('data') if isinstance(document, dict) else None
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise InvalidStructureError(f"Invalid JSON structure in '{os.path.basename(path)}'")
    return data


class DatasetStore:
    """Catalogue of JSON datasets stored in *storage_dir*."""

    def __init__(self, storage_dir: Optional[str] = None,
                 validator: Optional[JSONValidator] = None):
        self.storage_dir = storage_dir or default_storage_dir()
        self.validator = validator or JSONValidator()
        self.datasets: List[Dataset] = []
        self.selected_ids: Set[uuid.UUID] = set()
        self.error_message: Optional[str] = None

    # ── In-memory catalogue ──────────────────────────────────────────

    def list(self) -> List[Dataset]:
        return list(self.datasets)

    def find(self, name: str) -> Optional[Dataset]:
        wanted = name.lower()
        return next((d for d in self.datasets if d.name.lower() == wanted), None)

    def add(self, dataset: Dataset) -> bool:
        """Insert *dataset* at the front unless its name is taken.

        Returns ``False`` (and leaves the catalogue untouched) for a
        duplicate name.
        """
        if self.find(dataset.name) is not None:
            logger.info("Dataset %r already exists; skipping.", dataset.name)
            return False
        self.datasets.insert(0, dataset)
        return True

    def remove(self, dataset: Dataset) -> None:
        """Drop *dataset* from the in-memory list only."""
        self.datasets = [d for d in self.datasets if d.id != dataset.id]
        self.selected_ids.discard(dataset.id)

    # ── Selection ────────────────────────────────────────────────────

    def toggle_selection(self, dataset_id: uuid.UUID) -> bool:
        """Select or deselect a dataset; at most four may be selected.

        Returns ``False`` when the selection limit blocks the change.
        """
        if dataset_id in self.selected_ids:
            self.selected_ids.remove(dataset_id)
            return True
        if len(self.selected_ids) >= MAX_SELECTED_DATASETS:
            self.error_message = (
                f"You can select up to {MAX_SELECTED_DATASETS} datasets only."
            )
            return False
        self.selected_ids.add(dataset_id)
        return True

    def selected_datasets(self) -> List[Dataset]:
        return [d for d in self.datasets if d.id in self.selected_ids]

    # ── Storage ──────────────────────────────────────────────────────

    def _json_files(self) -> List[str]:
        if not os.path.isdir(self.storage_dir):
            return []
        return sorted(
            os.path.join(self.storage_dir, entry)
            for entry in os.listdir(self.storage_dir)
            if entry.lower().endswith(DATASET_SUFFIX)
        )

    def stored_names(self) -> List[str]:
        """Names of every readable dataset file on disk."""
        names = []
        for path in self._json_files():
            header = read_header(path)
            if header is not None:
                names.append(header[0])
        return names

    def _name_taken(self, name: str) -> bool:
        wanted = name.lower()
        if self.find(name) is not None:
            return True
        if os.path.exists(os.path.join(self.storage_dir, file_name_for(name))):
            return True
        return any(n.lower() == wanted for n in self.stored_names())

    def load_all(self) -> Result[List[Dataset]]:
        """Rescan the storage directory and rebuild the catalogue.

        Only headers are read; the full schema is not re-validated.
        """
        try:
            paths = self._json_files()
        except OSError as exc:
            self.error_message = f"Failed to load datasets: {exc}"
            logger.error(self.error_message)
            return Result.failure(ErrorKind.IO_ERROR, str(exc))

        # keep ids stable across rescans so the selection survives
        previous = {d.file_path: d for d in self.datasets}
        loaded: List[Dataset] = []
        skipped: List[str] = []
        for path in paths:
            header = read_header(path)
            if header is None:
                skipped.append(os.path.basename(path))
                continue
            name, description = header
            known = previous.get(path)
            if known is not None and known.name == name and known.description == description:
                loaded.append(known)
            else:
                loaded.append(Dataset(name=name, description=description, file_path=path))

        if skipped:
            warnings.warn(
                f"Skipped {len(skipped)} unreadable dataset file(s) in "
                f"'{self.storage_dir}': {', '.join(skipped[:5])}"
                f"{' ...' if len(skipped) > 5 else ''}",
                stacklevel=2,
            )

        self.datasets = loaded
        self.selected_ids &= {d.id for d in loaded}
        logger.info("Loaded %d dataset(s) from %s", len(loaded), self.storage_dir)
        return Result.success(self.list())

    def delete(self, dataset: Dataset) -> Result[None]:
        """Remove the dataset's file, drop it from the selection and rescan."""
        try:
            os.remove(dataset.file_path)
        except OSError as exc:
            self.error_message = f"Failed to delete: {exc}"
            logger.error(self.error_message)
            return Result.failure(ErrorKind.IO_ERROR, str(exc))
        self.selected_ids.discard(dataset.id)
        self.load_all()
        return Result.success(None)

    def load_records(self, dataset: Dataset) -> Result[List[Record]]:
        try:
            return Result.success(load_raw_records(dataset.file_path))
        except OSError as exc:
            return Result.failure(ErrorKind.IO_ERROR, str(exc))
        except InvalidStructureError as exc:
            return Result.failure(ErrorKind.PARSING_FAILED, str(exc))

    def validate(self, dataset: Dataset) -> Result[ValidatedDataSet]:
        """Re-run schema validation on a stored dataset file."""
        try:
            with open(dataset.file_path, 'rb') as fh:
                document = load_json_document(fh.read())
            return Result.success(self.validator.validate(document))
        except OSError as exc:
            return Result.failure(ErrorKind.IO_ERROR, str(exc))
        except ValidationError as exc:
            return Result.failure(ErrorKind.PARSING_FAILED, f"Validation failed: {exc}")

    # ── Ingest ───────────────────────────────────────────────────────

    def ingest_json(self, raw: bytes) -> Result[Dataset]:
        """Validate and persist a JSON dataset.

        Nothing is written unless the document passes validation and
        its name is free.  The new dataset is returned but not added to
        the catalogue; call ``add`` for that.
        """
        try:
            document = load_json_document(raw)
        except InvalidStructureError as exc:
            return Result.failure(ErrorKind.PARSING_FAILED, str(exc))

        try:
            self.validator.validate(document)
        except ValidationError as exc:
            return Result.failure(ErrorKind.PARSING_FAILED, f"Validation failed: {exc}")

        name = document['name']
        description = document['description']
        try:
            if self._name_taken(name):
                return Result.failure(ErrorKind.DUPLICATE_NAME, name)
            os.makedirs(self.storage_dir, exist_ok=True)
            path = os.path.join(self.storage_dir, file_name_for(name))
            with open(path, 'wb') as fh:
                fh.write(raw if isinstance(raw, (bytes, bytearray)) else raw.encode('utf-8'))
        except OSError as exc:
            logger.error("Failed to store dataset %r: %s", name, exc)
            return Result.failure(ErrorKind.IO_ERROR, str(exc))

        logger.info("Stored dataset %r at %s", name, path)
        return Result.success(Dataset(name=name, description=description, file_path=path))

    def ingest_csv(self, raw: bytes) -> Result[Dataset]:
        return Result.failure(ErrorKind.NOT_IMPLEMENTED, "CSV parsing not yet implemented.")

    def ingest_rest(self, raw: bytes) -> Result[Dataset]:
        return Result.failure(ErrorKind.NOT_IMPLEMENTED,
                              "RESTful response parsing not yet implemented.")

    def generate_synthetic(self, record_count: int, seed: Optional[int] = None) -> Result[Dataset]:
        """Write a synthetic cell-signature dataset of *record_count* records."""
        name = synthetic_dataset_name()
        base, n = name, 2
        try:
            while self._name_taken(name):
                name = f"{base}_{n}"
                n += 1
            path, name, description = write_synthetic_dataset(
                self.storage_dir, record_count, name=name, seed=seed,
            )
        except ValueError as exc:
            return Result.failure(ErrorKind.INVALID_INPUT, str(exc))
        except OSError as exc:
            logger.error("Synthetic generation failed: %s", exc)
            return Result.failure(ErrorKind.IO_ERROR, str(exc))
        return Result.success(Dataset(name=name, description=description, file_path=path))
