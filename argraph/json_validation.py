"""
Schema validation for AR Graph Plotter datasets.

A dataset document looks like::

    {"name": str, "description": str,
     "data": [{"category": str, <scalar fields...>}, ...]}

``JSONValidator`` checks the top-level structure, then tries an ordered
list of ``ValidationRule`` objects.  Each rule's ``matches`` is a
predicate over *all* records at once; the first rule that matches
parses the records into a ``ValidatedDataSet``.  Parsing is best-effort:
a record that fails an already-matched rule's parse step is dropped with
a warning instead of failing the dataset.

New record shapes are supported by adding a rule class, not by editing
the existing ones.
"""

import json
import logging
import warnings
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from .constants import CATEGORY_KEY
from .data_model import DatasetShape, Record, ValidatedDataSet, ValidatedPoint
from .decimal_utils import coerce_decimal, is_json_number

logger = logging.getLogger(__name__)


# ── Errors ───────────────────────────────────────────────────────────────

class ValidationError(ValueError):
    """Base class for dataset validation failures."""


class InvalidStructureError(ValidationError):
    """Malformed document: wrong top-level types, non-object records,
    or a record without a usable ``category``."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class NoMatchingRuleError(ValidationError):
    """Every record is well-formed but no accepted shape fits them all."""


# ── Helpers ──────────────────────────────────────────────────────────────

def load_json_document(raw: bytes) -> Any:
    """Decode UTF-8 JSON bytes, keeping non-integer numbers as ``Decimal``.

    Raises ``InvalidStructureError`` for undecodable input, including
    integers past the interpreter's digit limit (``ValueError``) and
    nesting deeper than the recursion limit.
    """
    try:
        text = raw.decode('utf-8-sig') if isinstance(raw, (bytes, bytearray)) else raw
        return json.loads(text, parse_float=Decimal)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise InvalidStructureError(f"File is not valid JSON: {exc}") from exc


def _non_category_items(record: Record):
    return [(k, v) for k, v in record.items() if k != CATEGORY_KEY]


def _coercible_values(record: Record) -> List[Decimal]:
    values = []
    for _, value in _non_category_items(record):
        number = coerce_decimal(value)
        if number is not None:
            values.append(number)
    return values


def _category_of(record: Record) -> Optional[str]:
    category = record.get(CATEGORY_KEY)
    if isinstance(category, str) and category.strip():
        return category
    return None


# ── Rules ────────────────────────────────────────────────────────────────

class ValidationRule:
    """One accepted record shape."""

    shape: DatasetShape

    @property
    def description(self) -> str:
        raise NotImplementedError

    def matches(self, records: Sequence[Record]) -> bool:
        raise NotImplementedError

    def parse_record(self, record: Record) -> Optional[ValidatedPoint]:
        raise NotImplementedError

    def parse(self, records: Sequence[Record], name: str, description: str) -> ValidatedDataSet:
        """Parse every record, dropping the ones this rule cannot read."""
        points: List[ValidatedPoint] = []
        dropped: List[int] = []
        for index, record in enumerate(records):
            point = self.parse_record(record)
            if point is None:
                dropped.append(index)
            else:
                points.append(point)

        if dropped:
            detail = ", ".join(str(i) for i in dropped[:10])
            if len(dropped) > 10:
                detail += f" ... and {len(dropped) - 10} more"
            warnings.warn(
                f"Dataset '{name}': {len(dropped)} record(s) could not be parsed "
                f"as {self.description} and were dropped (indices {detail}).",
                stacklevel=2,
            )

        return ValidatedDataSet(
            shape=self.shape,
            name=name,
            description=description,
            points=points,
        )


class NumericFieldsRule(ValidationRule):
    """``category`` plus exactly *n* numeric-coercible fields, nothing else."""

    def __init__(self, shape: DatasetShape):
        if shape.string_count:
            raise ValueError(f"{shape} has string fields; use NumericPlusStringRule")
        self.shape = shape

    @property
    def description(self) -> str:
        n = self.shape.numeric_count
        return f"category + {n} numeric fields → {self.shape.key_count} keys"

    def matches(self, records: Sequence[Record]) -> bool:
        n = self.shape.numeric_count
        return all(
            len(_coercible_values(record)) == n and len(record) == self.shape.key_count
            for record in records
        )

    def parse_record(self, record: Record) -> Optional[ValidatedPoint]:
        category = _category_of(record)
        if category is None:
            return None
        values = _coercible_values(record)
        if len(values) != self.shape.numeric_count:
            return None
        return ValidatedPoint(category=category, values=tuple(values))


class NumericPlusStringRule(ValidationRule):
    """``category`` plus 4 JSON numbers plus 1 extra string field.

    ``matches`` counts only real JSON numbers, so a numeric-looking
    string counts as the extra string.  ``parse`` coerces instead, so
    such a record yields 5 numbers and is dropped.
    """

    shape = DatasetShape.CAT_4NUM_1STR

    @property
    def description(self) -> str:
        return "category + 4 numeric fields + 1 extra string → 6 keys"

    def matches(self, records: Sequence[Record]) -> bool:
        for record in records:
            if _category_of(record) is None:
                return False
            items = _non_category_items(record)
            numeric_count = sum(1 for _, v in items if is_json_number(v))
            string_count = sum(1 for _, v in items if isinstance(v, str))
            if not (numeric_count == self.shape.numeric_count
                    and string_count == self.shape.string_count
                    and len(record) == self.shape.key_count):
                logger.debug(
                    "4+1 rule rejected record: %d numeric, %d string, %d keys",
                    numeric_count, string_count, len(record),
                )
                return False
        return True

    def parse_record(self, record: Record) -> Optional[ValidatedPoint]:
        category = _category_of(record)
        if category is None:
            return None
        values = _coercible_values(record)
        if len(values) != self.shape.numeric_count:
            return None
        extra = next(
            (v for _, v in _non_category_items(record)
             if isinstance(v, str) and coerce_decimal(v) is None),
            None,
        )
        if extra is None:
            return None
        return ValidatedPoint(category=category, values=tuple(values), extra=extra)


DEFAULT_RULES: List[ValidationRule] = [
    NumericFieldsRule(DatasetShape.CAT_2NUM),
    NumericFieldsRule(DatasetShape.CAT_3NUM),
    NumericFieldsRule(DatasetShape.CAT_4NUM),
    NumericPlusStringRule(),
]


# ── Validator ────────────────────────────────────────────────────────────

class JSONValidator:
    """Classify a decoded JSON document against an ordered rule list."""

    def __init__(self, rules: Optional[Sequence[ValidationRule]] = None):
        self.rules = list(DEFAULT_RULES if rules is None else rules)

    def validate(self, document: Any) -> ValidatedDataSet:
        """Validate *document* and return the typed dataset.

        Raises
        ------
        InvalidStructureError
            Missing / mistyped ``name``, ``description`` or ``data``,
            a non-object record, or a record without a non-empty
            ``category`` string.
        NoMatchingRuleError
            No rule matches every record.
        """
        if not isinstance(document, dict):
            raise InvalidStructureError("Top-level JSON value must be an object.")

        name = document.get('name')
        description = document.get('description')
        data = document.get('data')
        if not isinstance(name, str) or not isinstance(description, str) or not isinstance(data, list):
            raise InvalidStructureError(
                "Missing required fields: name, description, or data"
            )

        for index, record in enumerate(data):
            if not isinstance(record, dict):
                raise InvalidStructureError(
                    f"Data entry at index {index} is not a valid object.", index=index,
                )

        for index, record in enumerate(data):
            if _category_of(record) is None:
                raise InvalidStructureError(
                    f"Object at index {index} missing 'category' field.", index=index,
                )

        for rule in self.rules:
            logger.debug("Checking rule: %s", rule.description)
            if rule.matches(data):
                return rule.parse(data, name, description)

        raise NoMatchingRuleError(
            "No matching rule found. Accepted record shapes: "
            + "; ".join(rule.description for rule in self.rules)
        )
