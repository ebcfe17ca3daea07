"""
Shared fixtures for the AR Graph Plotter tests.
"""
import json

import matplotlib
import pytest

matplotlib.use("Agg")

from argraph.data_model import Dataset, GraphingConfiguration, GraphType  # noqa: E402
from argraph.dataset_store import DatasetStore  # noqa: E402


def make_document(name="A", description="d", data=None):
    """Dataset document as a dict (the two-record example by default)."""
    if data is None:
        data = [
            {"category": "x", "v1": 1, "v2": 2},
            {"category": "y", "v1": 3, "v2": 4},
        ]
    return {"name": name, "description": description, "data": data}


def to_bytes(document) -> bytes:
    return json.dumps(document).encode("utf-8")


@pytest.fixture
def storage_dir(tmp_path):
    return tmp_path / "datasets"


@pytest.fixture
def store(storage_dir):
    return DatasetStore(str(storage_dir))


@pytest.fixture
def example_bytes():
    return to_bytes(make_document())


@pytest.fixture
def write_dataset(storage_dir):
    """Write a document straight to disk and return its ``Dataset``."""
    def _write(document, file_name=None):
        storage_dir.mkdir(parents=True, exist_ok=True)
        path = storage_dir / (file_name or f"{document['name']}.json")
        path.write_text(json.dumps(document), encoding="utf-8")
        return Dataset(name=document["name"], description=document["description"],
                       file_path=str(path))
    return _write


@pytest.fixture
def scatter_config(write_dataset):
    """Configuration for the two-record example, 3D scatter with grid."""
    def _config(graph_type=GraphType.SCATTER_PLOT, features=("category", "v1", "v2"),
                document=None, theme_id="default"):
        dataset = write_dataset(document or make_document())
        return GraphingConfiguration(
            dataset=dataset,
            graph_type=graph_type,
            selected_features=tuple(features),
            theme_id=theme_id,
        )
    return _config
