"""
Numeric coercion for the AR Graph Plotter.

Every JSON scalar that reaches the scene builder passes through
``coerce_decimal``.  Values are classified into a closed set of
``ScalarKind`` tags first, and coercion is a total match over that tag,
so a dataset can mix integers, floats, decimals and numeric strings in
the same column.

Floats are converted through their shortest decimal string (``0.1``
becomes ``Decimal("0.1")``, not the 55-digit binary expansion).  All
normalisation arithmetic stays in ``Decimal``; the result is narrowed to
single precision only at the very end.
"""

import numbers
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional

import numpy as np


class ScalarKind(Enum):
    """Tag for a parsed JSON scalar."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    OTHER = "other"


def classify(value: Any) -> ScalarKind:
    """Return the ``ScalarKind`` of *value*.

    Booleans are ``OTHER`` even though ``bool`` subclasses ``int``.
    """
    if isinstance(value, bool):
        return ScalarKind.OTHER
    if isinstance(value, Decimal):
        return ScalarKind.DECIMAL
    if isinstance(value, str):
        return ScalarKind.STRING
    if isinstance(value, numbers.Integral):
        return ScalarKind.INTEGER
    if isinstance(value, numbers.Real):
        return ScalarKind.FLOAT
    return ScalarKind.OTHER


def is_json_number(value: Any) -> bool:
    """``True`` for integer, float or decimal values (not numeric strings)."""
    return classify(value) in (ScalarKind.INTEGER, ScalarKind.FLOAT, ScalarKind.DECIMAL)


def _finite_or_none(value: Decimal) -> Optional[Decimal]:
    # NaN / Infinity are not plottable coordinates
    return value if value.is_finite() else None


def coerce_decimal(value: Any) -> Optional[Decimal]:
    """Convert a JSON scalar to an exact ``Decimal``.

    Returns ``None`` for booleans, ``None``, containers, non-finite
    numbers and strings that do not parse as a decimal number.
    """
    kind = classify(value)
    if kind is ScalarKind.DECIMAL:
        return _finite_or_none(value)
    if kind is ScalarKind.INTEGER:
        return Decimal(int(value))
    if kind is ScalarKind.FLOAT:
        try:
            return _finite_or_none(Decimal(str(value)))
        except InvalidOperation:
            return None
    if kind is ScalarKind.STRING:
        text = value.strip()
        if not text:
            return None
        try:
            return _finite_or_none(Decimal(text))
        except InvalidOperation:
            return None
    return None


def extract_decimal(record: Mapping[str, Any], key: str) -> Optional[Decimal]:
    """Look up *key* in *record* and coerce it; missing key gives ``None``."""
    if key not in record:
        return None
    return coerce_decimal(record[key])


def decimal_normalize(value: Decimal, min_value: Decimal, max_value: Decimal) -> float:
    """Map *value* linearly from ``[min_value, max_value]`` onto ``[0, 1]``.

    A flat range (``min_value == max_value``) maps every value to ``0.5``.
    The quotient is computed in ``Decimal`` and rounded to single
    precision last.
    """
    if max_value == min_value:
        return 0.5
    normalized = (value - min_value) / (max_value - min_value)
    return float(np.float32(float(normalized)))
