"""
Activity timelines: per-group glyph strips showing when a group's records
occurred relative to the whole data set.

The time range of a timestamp column is cut into a grid of equally spaced
instants. Every member timestamp of a group falls into the bin of the
greatest grid point not after it; bins map onto `width × sub_slots` boolean
slots, and each character of the strip folds `sub_slots` slots into a
left-aligned eighths block reaching the latest occupied slot.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Sequence

import numpy as np

from rec_browser.core.store import Column
from rec_browser.core.values import Timestamp, Value
from rec_browser.core.views import GroupView, require_columns

TIMELINE_WIDTH = 16
SUB_SLOTS_PER_CHAR = 8

# blank, then 1/8 .. 8/8 of a cell filled from the left
FILL_LEVELS = " ▏▎▍▌▋▊▉█"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROSECOND = timedelta(microseconds=1)

TimelineGrid = List[datetime]


def _to_micros(ts: datetime) -> int:
    return (ts - _EPOCH) // _MICROSECOND


def _timestamps(values: Iterable[Value]) -> List[datetime]:
    return [v.value for v in values if isinstance(v, Timestamp)]


def build_grid(column: Column, resolution: int) -> TimelineGrid:
    """
    Return `resolution` equally spaced instants from the earliest to the
    latest timestamp in `column`.

    Non-timestamp values are ignored; a column without any timestamp gives an
    empty grid.
    """
    stamps = _timestamps(column.values)
    if not stamps:
        return []
    if resolution < 1:
        raise ValueError(f"Timeline resolution must be positive, got {resolution}")

    lo, hi = min(stamps), max(stamps)
    if resolution == 1:
        return [lo]
    span = hi - lo
    return [lo + span * k / (resolution - 1) for k in range(resolution)]


def _bin_indices(grid: Sequence[datetime], stamps: Sequence[datetime]) -> np.ndarray:
    grid_us = np.array([_to_micros(t) for t in grid], dtype=np.int64)
    stamps_us = np.array([_to_micros(t) for t in stamps], dtype=np.int64)
    bins = np.searchsorted(grid_us, stamps_us, side="right") - 1
    if bins.size and bins.min() < 0:
        # a grid derived from the column minimum cannot start after one of its timestamps
        raise ValueError("Timestamp precedes the start of the timeline grid")
    return bins


def bin_index(grid: Sequence[datetime], ts: datetime) -> int:
    """Index of the greatest grid point that is <= `ts`."""
    if not grid:
        raise ValueError("Cannot bin a timestamp into an empty grid")
    return int(_bin_indices(grid, [ts])[0])


def render_group_timeline(
    values: Iterable[Value],
    grid: Sequence[datetime],
    width_chars: int,
    sub_slots_per_char: int = SUB_SLOTS_PER_CHAR,
) -> str:
    """
    Render the occupancy strip for one group.

    :param values: the group's values in the timeline column; anything that is
        not a Timestamp is skipped
    :param grid: grid returned by :func:`build_grid`
    :param width_chars: length of the returned string
    :param sub_slots_per_char: slots folded into each character
    :return: a string of exactly `width_chars` characters
    """
    if width_chars < 0 or sub_slots_per_char < 1:
        raise ValueError("Timeline width must be >= 0 and sub-slots per char >= 1")

    stamps = _timestamps(values)
    if width_chars == 0 or not grid or not stamps:
        return " " * width_chars

    n_slots = width_chars * sub_slots_per_char
    slots = np.zeros(n_slots, dtype=bool)
    bins = _bin_indices(grid, stamps)
    slots[bins * n_slots // len(grid)] = True

    chars = []
    for run in slots.reshape(width_chars, sub_slots_per_char):
        occupied = np.flatnonzero(run)
        if occupied.size == 0:
            chars.append(FILL_LEVELS[0])
            continue
        highest = int(occupied[-1]) + 1
        level = -(-highest * (len(FILL_LEVELS) - 1) // sub_slots_per_char)
        chars.append(FILL_LEVELS[level])
    return "".join(chars)


def group_timelines(
    view: GroupView,
    column_name: str,
    width_chars: int = TIMELINE_WIDTH,
    sub_slots_per_char: int = SUB_SLOTS_PER_CHAR,
) -> List[str]:
    """Timeline strip for every group of `view`, all on one shared grid."""
    require_columns(view.store, [column_name], "timeline")
    column = view.store.column(column_name)
    grid = build_grid(column, width_chars * sub_slots_per_char)
    return [
        render_group_timeline(
            (column[j] for j in view.member_indices(i)),
            grid,
            width_chars,
            sub_slots_per_char,
        )
        for i in range(len(view))
    ]
