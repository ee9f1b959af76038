from __future__ import annotations

import hashlib
from typing import Callable, NamedTuple

from rec_browser.core.store import Column
from rec_browser.core.values import (
    ABSENT,
    Absent,
    Boolean,
    Integer,
    String,
    Timestamp,
    Value,
)

MAX_COLORS = 16
MIN_INTENSITY = 128
MAX_INTENSITY = 250


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


NEUTRAL_COLOR = Color(255, 255, 255)

Colorizer = Callable[[Value], Color]


def _canonical_bytes(value: Value) -> bytes:
    """Kind-tagged encoding of a value, identical on every run."""
    if isinstance(value, Integer):
        return b"i:" + str(value.value).encode()
    if isinstance(value, Boolean):
        return b"b:" + (b"1" if value.value else b"0")
    if isinstance(value, String):
        return b"s:" + value.value.encode("utf-8")
    if isinstance(value, Timestamp):
        return b"t:" + value.value.isoformat().encode()
    if isinstance(value, Absent):
        return b"n:"
    raise TypeError(f"Not a column value: {value!r}")


def _intensify(channel: int) -> int:
    return MIN_INTENSITY + channel % (MAX_INTENSITY - MIN_INTENSITY)


def colorize_rgb(value: Value) -> Color:
    """
    Hash-derived color for `value`.

    Each channel takes the max of three digest bytes, then is folded into
    [MIN_INTENSITY, MAX_INTENSITY) so text stays readable on a dark terminal.
    """
    digest = hashlib.blake2b(_canonical_bytes(value), digest_size=8).digest()
    r = _intensify(max(digest[0], digest[1], digest[2]))
    g = _intensify(max(digest[3], digest[4], digest[5]))
    b = _intensify(max(digest[6], digest[7], digest[0]))
    return Color(r, g, b)


def colorize_static(_: Value) -> Color:
    return NEUTRAL_COLOR


def select(column: Column) -> Colorizer:
    """
    Pick the colorizer for a column.

    Only columns with between 2 and MAX_COLORS distinct non-Absent values get
    per-value colors; constant and high-cardinality columns stay neutral.
    """
    unique_values = column.unique()
    unique_values.discard(ABSENT)
    if 2 <= len(unique_values) <= MAX_COLORS:
        return colorize_rgb
    return colorize_static
