"""
Data model for the AR Graph Plotter.

Immutable dataclasses for datasets, validated record sets, axis
projections and graphing configurations.  Raw records stay plain
``dict`` objects exactly as decoded from JSON; the validator produces a
typed ``ValidatedDataSet`` alongside them but the scene builder reads
the raw records, so the tap-to-inspect summary shows every original
field.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

Record = Dict[str, Any]


class DatasetShape(Enum):
    """Accepted per-record shapes, in the order the validator tries them."""
    CAT_2NUM = (2, 0)
    CAT_3NUM = (3, 0)
    CAT_4NUM = (4, 0)
    CAT_4NUM_1STR = (4, 1)

    @property
    def numeric_count(self) -> int:
        return self.value[0]

    @property
    def string_count(self) -> int:
        return self.value[1]

    @property
    def key_count(self) -> int:
        """Total keys per record, ``category`` included."""
        return 1 + self.numeric_count + self.string_count


class GraphType(Enum):
    """Graph variants offered to the user.

    Only the scatter variants have renderers; the rest are declared so a
    configuration can name them and resolve to "nothing to render".
    """
    SCATTER_PLOT = "Scatter Plot"
    SCATTER_PLOT_NO_GRID = "Scatter Plot (No Grid)"
    SCATTER_PLOT_2D = "Scatter Plot (2D)"
    SURFACE_PLOT = "Surface Plot"
    HISTOGRAM_PLOT = "Histogram Plot"
    CLUSTER_PLOT = "Cluster Plot"


@dataclass(frozen=True)
class ValidatedPoint:
    """One record parsed under a matched ``DatasetShape``.

    Parameters
    ----------
    category : str
        Non-empty category label.
    values : tuple of Decimal
        Numeric fields in record key order (2, 3 or 4 of them).
    extra : str or None
        The single extra string field of the 4+1 shape.
    """
    category: str
    values: Tuple[Decimal, ...]
    extra: Optional[str] = None


@dataclass(frozen=True)
class ValidatedDataSet:
    """Typed result of schema validation.

    Parameters
    ----------
    shape : DatasetShape
        The first rule that matched every record.
    name, description : str
        Copied from the top-level JSON document.
    points : list of ValidatedPoint
        Parsed records; records that failed the shape's parse step are
        absent, so ``len(points)`` may be less than the input count.
    """
    shape: DatasetShape
    name: str
    description: str
    points: List[ValidatedPoint]


@dataclass(frozen=True)
class Dataset:
    """Catalogue entry for a stored dataset file.

    Only the header (``name``, ``description``) is read when the store
    scans its directory; records are loaded on demand.
    """
    name: str
    description: str
    file_path: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class AxisProjection:
    """Original value range of one axis key.

    Positions are normalised against ``raw_min`` / ``raw_max`` and tick
    labels are interpolated over the same range.
    """
    key: str
    raw_min: Decimal
    raw_max: Decimal


@dataclass(frozen=True, eq=False)
class GraphingConfiguration:
    """User's graphing choices for one dataset.

    Equality and hashing use ``id`` only, so two configurations with the
    same choices remain distinct entries in a multi-dataset scene.
    """
    dataset: Dataset
    graph_type: Optional[GraphType]
    selected_features: Tuple[str, ...] = ()
    theme_id: str = "default"
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __eq__(self, other):
        if not isinstance(other, GraphingConfiguration):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)
