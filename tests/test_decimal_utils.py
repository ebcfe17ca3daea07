"""
Tests for numeric coercion and normalisation.
"""
from decimal import Decimal

import pytest

from argraph.decimal_utils import (
    ScalarKind, classify, coerce_decimal, decimal_normalize, extract_decimal,
    is_json_number,
)


class TestClassify:
    """Scalar tagging at the JSON boundary."""

    @pytest.mark.parametrize("value, kind", [
        ("abc", ScalarKind.STRING),
        (3, ScalarKind.INTEGER),
        (2.5, ScalarKind.FLOAT),
        (Decimal("1.25"), ScalarKind.DECIMAL),
        (True, ScalarKind.OTHER),
        (None, ScalarKind.OTHER),
        ([1, 2], ScalarKind.OTHER),
        ({"a": 1}, ScalarKind.OTHER),
    ])
    def test_kinds(self, value, kind):
        """Each scalar maps to exactly one tag."""
        assert classify(value) is kind

    def test_numeric_strings_are_not_json_numbers(self):
        """Only real numbers count as JSON numbers."""
        assert is_json_number(1)
        assert is_json_number(Decimal("0.5"))
        assert not is_json_number("1")
        assert not is_json_number(False)


class TestCoerceDecimal:
    """Coercion of JSON scalars to Decimal."""

    def test_integer(self):
        assert coerce_decimal(42) == Decimal(42)

    def test_float_uses_shortest_repr(self):
        """0.1 becomes Decimal('0.1'), not its binary expansion."""
        assert coerce_decimal(0.1) == Decimal("0.1")

    def test_decimal_passthrough(self):
        value = Decimal("3.14159")
        assert coerce_decimal(value) is value

    def test_numeric_string(self):
        assert coerce_decimal(" -2.50 ") == Decimal("-2.50")

    @pytest.mark.parametrize("value", [
        "abc", "", "   ", True, False, None, [1], {"a": 1},
        float("nan"), float("inf"), "NaN", "Infinity", Decimal("NaN"),
    ])
    def test_uncoercible(self, value):
        """Non-numeric and non-finite values coerce to None."""
        assert coerce_decimal(value) is None

    @pytest.mark.parametrize("value", [
        0.1, 1.5, -273.15, 123456789.012345, 9.87654321012345e-3, 1e15, 6.02214076e23,
    ])
    def test_round_trips_without_precision_loss(self, value):
        """Values with <= 15 significant digits survive coercion exactly."""
        coerced = coerce_decimal(value)
        assert float(coerced) == value
        assert coerce_decimal(str(value)) == coerced

    def test_extract_missing_key(self):
        assert extract_decimal({"a": 1}, "b") is None
        assert extract_decimal({"a": "7"}, "a") == Decimal(7)


class TestNormalize:
    """Linear mapping onto the unit interval."""

    def test_endpoints(self):
        lo, hi = Decimal("-5"), Decimal("15")
        assert decimal_normalize(lo, lo, hi) == 0.0
        assert decimal_normalize(hi, lo, hi) == 1.0

    def test_midpoint(self):
        assert decimal_normalize(Decimal(5), Decimal(0), Decimal(10)) == 0.5

    @pytest.mark.parametrize("value", [Decimal(-3), Decimal(0), Decimal("7.5")])
    def test_flat_range_is_half(self, value):
        """min == max maps every value to 0.5."""
        assert decimal_normalize(value, Decimal(2), Decimal(2)) == 0.5

    def test_unit_range_is_idempotent(self):
        """Re-normalising against [0, 1] leaves the value unchanged."""
        once = decimal_normalize(Decimal("0.25"), Decimal(0), Decimal(1))
        twice = decimal_normalize(Decimal(str(once)), Decimal(0), Decimal(1))
        assert once == twice == 0.25

    def test_single_precision_result(self):
        """The result is rounded to float32."""
        value = decimal_normalize(Decimal(1), Decimal(0), Decimal(3))
        assert value == pytest.approx(1 / 3, rel=1e-7)
        assert value != 1 / 3
