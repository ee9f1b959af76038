"""
Cell values held by a ColumnStore.

A value is one of a closed set of kinds: Integer, Boolean, String, Timestamp
or Absent. Every kind is a frozen dataclass, so equality and hashing are
structural; values of different kinds never compare equal (Integer(1) is not
Boolean(True)) and Absent only equals Absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Union


class AttributeType(str, Enum):
    """Declared type of a column in the input spec."""

    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING = "string"
    DATETIME = "datetime"

    @classmethod
    def from_value(cls, value: str) -> "AttributeType":
        """Create an :class:`AttributeType` from a raw (case-insensitive) string."""

        try:
            return cls(str(value).lower())
        except ValueError as exc:
            valid_values = ", ".join(item.value for item in cls)
            raise ValueError(
                f"Invalid attribute type '{value}'. Expected one of: {valid_values}."
            ) from exc


@dataclass(frozen=True)
class Integer:
    value: int


@dataclass(frozen=True)
class Boolean:
    value: bool


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Timestamp:
    """A UTC instant. Naive datetimes are taken to be UTC already."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            object.__setattr__(self, "value", self.value.replace(tzinfo=timezone.utc))
        else:
            object.__setattr__(self, "value", self.value.astimezone(timezone.utc))


@dataclass(frozen=True)
class Absent:
    pass


ABSENT = Absent()

Value = Union[Integer, Boolean, String, Timestamp, Absent]

TRUE_GLYPH = "✓"
FALSE_GLYPH = "✗"


def display_text(value: Value) -> str:
    """Text shown in a table cell for the given value."""
    if isinstance(value, Integer):
        return str(value.value)
    if isinstance(value, Boolean):
        return TRUE_GLYPH if value.value else FALSE_GLYPH
    if isinstance(value, String):
        return value.value
    if isinstance(value, Timestamp):
        ts = value.value
        return f"{ts:%H:%M:%S}.{ts.microsecond // 1000:03d}"
    if isinstance(value, Absent):
        return ""
    raise TypeError(f"Not a column value: {value!r}")


def display_width(value: Value) -> int:
    """Column width a value needs when rendered."""
    if isinstance(value, Boolean):
        return 1
    if isinstance(value, String):
        return len(value.value)
    if isinstance(value, Integer):
        return 16
    if isinstance(value, Timestamp):
        return 12
    return 0
