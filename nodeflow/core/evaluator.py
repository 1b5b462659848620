"""Evaluator for filter conditions in NodeFlow.

Filter transforms carry a single condition of the form::

    <field> <operator> <value>

``field`` may be dotted once to reach into a nested object (``rating.rate``),
``operator`` is one of ``==``, ``!=``, ``>``, ``>=``, ``<``, ``<=`` or
``contains`` (case-insensitive) and ``value`` is a quoted string or a bare
token.

Conditions that do not match the grammar fail open: every record passes.
``ConditionEvaluator(strict=True)`` raises ``ConditionSyntaxError`` instead.
"""

import json
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, Optional

from nodeflow.core.models import Record, RecordSet
from nodeflow.exceptions import ConditionSyntaxError
from nodeflow.logging import get_logger

logger = get_logger(__name__)

# Longer operators first so ">=" is not read as ">" followed by "= value"
CONDITION_PATTERN = re.compile(
    r"^(\w+(?:\.\w+)?)\s*(==|!=|>=|<=|>|<|contains)\s*(.+)$",
    re.IGNORECASE | re.DOTALL,
)
NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

ORDERING_OPERATORS = {
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
}


class _Missing:
    """Marker for a field that is absent from the record."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING = _Missing()


def _parse_number(text: str) -> Optional[float]:
    if NUMBER_PATTERN.match(text.strip()):
        return float(text)
    return None


def _to_number(value: Any) -> Optional[float]:
    """Coerce a record value to a number, or None if it has no numeric form."""
    if value is MISSING or value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return _parse_number(value)
    return None


def _as_text(value: Any) -> str:
    """String form of a record value, as it would be rendered in JSON."""
    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


@dataclass(frozen=True)
class Condition:
    """A parsed ``<field> <operator> <value>`` condition."""

    field: str
    operator: str
    literal: str
    number: Optional[float] = None

    def resolve(self, record: Record) -> Any:
        """Read the (possibly dotted) field from a record."""
        value: Any = record
        for key in self.field.split("."):
            if not isinstance(value, dict) or key not in value:
                return MISSING
            value = value[key]
        return value

    def matches(self, record: Record) -> bool:
        value = self.resolve(record)

        if self.operator == "==":
            return self._loose_equals(value)
        if self.operator == "!=":
            return not self._loose_equals(value)
        if self.operator == "contains":
            return self.literal.lower() in _as_text(value).lower()

        left = _to_number(value)
        right = self.number
        if left is None or right is None:
            return False
        return ORDERING_OPERATORS[self.operator](left, right)

    def _loose_equals(self, value: Any) -> bool:
        """Equality between a record value and the literal.

        A string "5" equals the number 5, booleans equal the literals
        ``true``/``false`` and null equals the literal ``null``.
        """
        if value is MISSING:
            return False
        if value is None:
            return self.literal.lower() == "null"
        if isinstance(value, bool):
            if self.literal.lower() in ("true", "false"):
                return value == (self.literal.lower() == "true")
            return self.number is not None and float(value) == self.number
        if self.number is not None:
            number = _to_number(value)
            return number is not None and number == self.number
        return _as_text(value) == self.literal


@lru_cache(maxsize=256)
def parse_condition(condition: str) -> Optional[Condition]:
    """Parse a condition string, returning None if it does not match the grammar."""
    match = CONDITION_PATTERN.match(condition.strip())
    if not match:
        return None

    field, operator, literal = match.groups()
    literal = literal.strip()
    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "\"'":
        literal = literal[1:-1]

    return Condition(
        field=field,
        operator=operator.lower(),
        literal=literal,
        number=_parse_number(literal),
    )


class ConditionEvaluator:
    """Evaluates filter conditions against records.

    Args:
        strict: Raise ``ConditionSyntaxError`` for malformed conditions instead
            of letting every record pass
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def compile(self, condition: str) -> Optional[Condition]:
        """Parse a condition, applying the fail-open/strict policy.

        Returns:
            The parsed condition, or None when every record should pass

        Raises:
            ConditionSyntaxError: In strict mode, if the condition is malformed
        """
        parsed = parse_condition(condition)
        if parsed is None:
            if self.strict:
                raise ConditionSyntaxError(condition)
            logger.warning(
                f"Condition {condition!r} does not match '<field> <operator> <value>'; "
                "no filter applied"
            )
        return parsed

    def evaluate(self, record: Record, condition: str) -> bool:
        """Evaluate a condition against a single record."""
        parsed = self.compile(condition)
        if parsed is None:
            return True
        return parsed.matches(record)

    def filter(self, records: Iterable[Record], condition: str) -> RecordSet:
        """Keep the records for which the condition holds, preserving order."""
        records = list(records)
        if not records:
            return records

        parsed = self.compile(condition)
        if parsed is None:
            return records

        logger.debug(
            f"Filtering {len(records)} records on {parsed.field} "
            f"{parsed.operator} {parsed.literal!r}"
        )
        return [record for record in records if parsed.matches(record)]
