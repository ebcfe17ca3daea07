"""
Text input handling for the "Add dataset" box.

``gen <n>`` generates a synthetic dataset of *n* records; anything else
is treated as a URL, downloaded and ingested.  ``handle`` blocks, so the
GUI runs it on a worker thread.  It writes the dataset file and returns
an ``InputOutcome``, or ``None`` with the reason left in
``store.error_message``.  Adding the new dataset to the catalogue is the
caller's job, so the in-memory list is only touched on the GUI thread.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .data_model import Dataset
from .dataset_store import DatasetStore
from .network import fetch_csv, fetch_json, fetch_rest
from .results import FetchResult, Result

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[FetchResult]]

SYNTHETIC_COMMAND = "gen"


@dataclass(frozen=True)
class InputOutcome:
    """A stored dataset and the status line announcing it."""
    message: str
    dataset: Dataset


class DataInputHandler:
    """Turns one line of user input into a stored dataset file."""

    def __init__(self, store: DatasetStore, fetcher: Optional[Fetcher] = None):
        self.store = store
        self.fetcher = fetcher or fetch_json

    def handle(self, text: str) -> Optional[InputOutcome]:
        self.store.error_message = None
        trimmed = text.strip()
        if trimmed.lower().startswith(SYNTHETIC_COMMAND + " "):
            return self.handle_synthetic(trimmed)
        return self.handle_remote(trimmed)

    def handle_synthetic(self, trimmed: str) -> Optional[InputOutcome]:
        parts = trimmed.split()
        try:
            count = int(parts[1]) if len(parts) == 2 else None
        except ValueError:
            count = None
        if count is None:
            self.store.error_message = (
                "Invalid format. Use 'Gen <number>' to generate synthetic data."
            )
            return None

        result = self.store.generate_synthetic(count)
        if not result.ok:
            self.store.error_message = f"Synthetic generation failed: {result.error.message}"
            return None
        return InputOutcome(
            f"Synthetic dataset '{result.value.name}' saved successfully.", result.value,
        )

    def handle_remote(self, url: str) -> Optional[InputOutcome]:
        result = asyncio.run(self.fetcher(url))
        if not result.ok:
            self.store.error_message = f"Download failed: {result.error.message}"
            return None
        return self._store(result, self.store.ingest_json, "JSON")

    def _store(self, fetched: FetchResult, ingest, label: str) -> Optional[InputOutcome]:
        stored: Result = ingest(fetched.value)
        if not stored.ok:
            self.store.error_message = stored.error.message
            return None
        logger.info("%s dataset %r stored", label, stored.value.name)
        return InputOutcome(
            f"{label} dataset '{stored.value.name}' downloaded and saved.", stored.value,
        )


class ExtendedDataInputHandler(DataInputHandler):
    """Falls back from JSON to CSV to REST when a download is rejected."""

    def handle_remote(self, url: str) -> Optional[InputOutcome]:
        outcome = super().handle_remote(url)
        if outcome is not None:
            return outcome

        for fetch, ingest, label in (
            (fetch_csv, self.store.ingest_csv, "CSV"),
            (fetch_rest, self.store.ingest_rest, "RESTful"),
        ):
            result = asyncio.run(fetch(url))
            if result.ok:
                return self._store(result, ingest, label)
            self.store.error_message = f"Download failed: {result.error.message}"
        return None
