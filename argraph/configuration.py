"""
Feature selection helpers for the AR Graph Plotter.

Works out which fields of a dataset can drive an axis and which can act
as the category, and checks that a ``GraphingConfiguration`` is
renderable: a graph type, a known theme, two or three numeric axis
features and at most one categorical feature.

Field types are sniffed from the first record only, matching what the
scene builder does.
"""

from typing import List, Optional, Sequence

from .constants import CATEGORY_KEY
from .data_model import GraphingConfiguration, Record
from .decimal_utils import coerce_decimal
from .theme import THEMES

MIN_AXIS_FEATURES = 2
MAX_AXIS_FEATURES = 3


def extract_numeric_feature_keys(records: Sequence[Record]) -> List[str]:
    """Non-category keys whose first-record value is numeric."""
    if not records:
        return []
    return [
        key for key, value in records[0].items()
        if key != CATEGORY_KEY and coerce_decimal(value) is not None
    ]


def extract_categorical_keys(records: Sequence[Record]) -> List[str]:
    """Keys whose first-record value is a non-numeric string.

    ``category`` always qualifies when it holds a string.
    """
    if not records:
        return []
    return [
        key for key, value in records[0].items()
        if isinstance(value, str) and (key == CATEGORY_KEY or coerce_decimal(value) is None)
    ]


def format_example(records: Sequence[Record]) -> Optional[str]:
    """Short field listing such as ``"(category, v1, v2)"``."""
    if not records:
        return None
    keys = extract_categorical_keys(records) + extract_numeric_feature_keys(records)
    return f"({', '.join(keys)})"


def resolve_category_key(records: Sequence[Record], selected_features: Sequence[str]) -> Optional[str]:
    """The category field for a selection, or ``None`` for "default".

    ``category`` wins when selected; otherwise the first selected
    feature that holds a string in the first record.
    """
    if CATEGORY_KEY in selected_features:
        return CATEGORY_KEY
    categorical = set(extract_categorical_keys(records))
    return next((f for f in selected_features if f in categorical), None)


def axis_features(records: Sequence[Record], selected_features: Sequence[str]) -> List[str]:
    """Selected features that are not categorical, in selection order."""
    categorical = set(extract_categorical_keys(records)) | {CATEGORY_KEY}
    return [f for f in selected_features if f not in categorical]


def validate_configuration(config: GraphingConfiguration, records: Sequence[Record]) -> Optional[str]:
    """Return a user-facing reason *config* cannot be rendered, or ``None``."""
    if config.graph_type is None:
        return "Please select a graph type."
    if config.theme_id not in THEMES:
        return f"Unknown theme '{config.theme_id}'."

    n_axes = len(axis_features(records, config.selected_features))
    if not MIN_AXIS_FEATURES <= n_axes <= MAX_AXIS_FEATURES:
        return (
            f"Please select at least {MIN_AXIS_FEATURES} numeric features. "
            f"You may select up to {MAX_AXIS_FEATURES} (selected {n_axes})."
        )

    categorical = set(extract_categorical_keys(records)) | {CATEGORY_KEY}
    n_categories = sum(1 for f in config.selected_features if f in categorical)
    if n_categories > 1:
        return "Please select at most one category feature."
    return None
