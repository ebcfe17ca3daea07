"""
Tests for feature extraction and configuration checks.
"""
import pytest

from argraph.configuration import (
    axis_features, extract_categorical_keys, extract_numeric_feature_keys, format_example,
    resolve_category_key, validate_configuration,
)
from argraph.data_model import Dataset, GraphingConfiguration, GraphType

RECORDS = [
    {"category": "x", "v1": 1, "v2": "2.5", "label": "alpha", "flag": True},
    {"category": "y", "v1": 3, "v2": 4, "label": "beta", "flag": False},
]
SYNTHETIC = [{"lymphoid": 0.4, "myeloid": -1.2, "-log10P": 2.1, "condition": "M+"}]


def _config(features, graph_type=GraphType.SCATTER_PLOT, theme_id="default"):
    dataset = Dataset(name="A", description="", file_path="A.json")
    return GraphingConfiguration(dataset=dataset, graph_type=graph_type,
                                 selected_features=tuple(features), theme_id=theme_id)


class TestFeatureKeys:

    def test_numeric_keys(self):
        assert extract_numeric_feature_keys(RECORDS) == ["v1", "v2"]

    def test_categorical_keys(self):
        assert extract_categorical_keys(RECORDS) == ["category", "label"]
        assert extract_categorical_keys(SYNTHETIC) == ["condition"]

    def test_numeric_looking_category_is_still_categorical(self):
        assert extract_categorical_keys([{"category": "7", "a": 1}]) == ["category"]

    def test_no_records(self):
        assert extract_numeric_feature_keys([]) == []
        assert extract_categorical_keys([]) == []
        assert format_example([]) is None

    def test_format_example(self):
        assert format_example(RECORDS) == "(category, label, v1, v2)"


class TestCategoryResolution:

    def test_category_wins(self):
        assert resolve_category_key(RECORDS, ["v1", "label", "category"]) == "category"

    def test_first_selected_string_field(self):
        assert resolve_category_key(RECORDS, ["v1", "label", "v2"]) == "label"
        assert resolve_category_key(SYNTHETIC, ["lymphoid", "condition"]) == "condition"

    def test_none_selected(self):
        assert resolve_category_key(RECORDS, ["v1", "v2"]) is None

    def test_axis_features_skip_categoricals(self):
        assert axis_features(RECORDS, ["label", "v2", "category", "v1"]) == ["v2", "v1"]


class TestValidateConfiguration:

    def test_valid(self):
        assert validate_configuration(_config(["category", "v1", "v2"]), RECORDS) is None
        assert validate_configuration(
            _config(["lymphoid", "myeloid", "-log10P", "condition"]), SYNTHETIC) is None

    def test_missing_graph_type(self):
        message = validate_configuration(_config(["v1", "v2"], graph_type=None), RECORDS)
        assert message == "Please select a graph type."

    def test_unknown_theme(self):
        message = validate_configuration(_config(["v1", "v2"], theme_id="plaid"), RECORDS)
        assert message == "Unknown theme 'plaid'."

    @pytest.mark.parametrize("features, count", [
        (["category", "v1"], 1),
        (["category"], 0),
        (["a", "b", "c", "d"], 4),
    ])
    def test_axis_count(self, features, count):
        message = validate_configuration(_config(features), RECORDS)
        assert message == (
            "Please select at least 2 numeric features. "
            f"You may select up to 3 (selected {count})."
        )

    def test_two_categories(self):
        message = validate_configuration(_config(["category", "label", "v1", "v2"]), RECORDS)
        assert message == "Please select at most one category feature."
