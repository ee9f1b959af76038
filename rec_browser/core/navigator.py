from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from rec_browser.core import colorizer
from rec_browser.core.colorizer import Color, Colorizer
from rec_browser.core.exceptions import NavigationError
from rec_browser.core.store import Column, ColumnStore
from rec_browser.core.timeline import (
    SUB_SLOTS_PER_CHAR,
    TIMELINE_WIDTH,
    group_timelines,
)
from rec_browser.core.values import Absent, Timestamp, Value, display_text, display_width
from rec_browser.core.views import FilterView, GroupView, filter_rows, group_by

logger = logging.getLogger(__name__)

MAX_COLUMN_WIDTH = 32


class Command(str, Enum):
    """Navigation commands produced by the input dispatcher."""

    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    FOCUS = "focus"
    BACK = "back"
    QUIT = "quit"


class Direction(Enum):
    UP = "up"
    DOWN = "down"


# -----------------------------------------------------------------------------
# Frames
# -----------------------------------------------------------------------------
@dataclass
class GroupedFrame:
    """Root frame: one row per group."""

    view: GroupView
    selection: int = 0

    mode = "GROUPED"


@dataclass
class FilteredFrame:
    """
    Drill-down frame: all records of one group.

    When `focused` is set the selected record is shown as a detail card.
    """

    view: FilterView
    predicate: Dict[str, Value] = field(default_factory=dict)
    focused: bool = False
    selection: int = 0

    mode = "FILTERED"


Frame = Union[GroupedFrame, FilteredFrame]


# -----------------------------------------------------------------------------
# Per-render output
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Cell:
    text: str
    color: Color


@dataclass(frozen=True)
class DisplayRow:
    cells: Tuple[Cell, ...]
    timeline: Optional[str] = None


@dataclass(frozen=True)
class FrameModel:
    """
    Everything the renderer needs to draw one frame.

    - headers: column names, in display order
    - rows: one DisplayRow per visible item
    - selection: index of the selected row
    - mode: "GROUPED" or "FILTERED"
    - total: number of rows in the current view
    - detail_card: pretty-printed record text when a record is focused
    - has_timeline: whether rows carry a timeline strip
    - widths: display width of each header's column
    """

    headers: List[str]
    rows: List[DisplayRow]
    selection: int
    mode: str
    total: int
    detail_card: Optional[str] = None
    has_timeline: bool = False
    widths: List[int] = field(default_factory=list)


def step_selection(selection: int, length: int, direction: Direction) -> int:
    """
    Move `selection` one step in `direction`, wrapping around `length` rows.

    Raises:
        NavigationError: if length is 0 (there is nothing to select)
    """
    if length <= 0:
        raise NavigationError("Cannot move the selection in an empty view")
    step = length - 1 if direction is Direction.UP else 1
    return (selection + step) % length


def column_width(column: Column) -> int:
    """
    Width of a table column: the widest value or the column name, whichever
    is longer, capped at MAX_COLUMN_WIDTH.
    """
    widest = max((display_width(v) for v in column.values), default=0)
    return min(max(widest, len(column.name)), MAX_COLUMN_WIDTH)


def pretty_record(raw: str) -> str:
    """Raw record text as indented JSON with sorted keys; non-JSON text is returned as-is."""
    try:
        obj = json.loads(raw)
    except ValueError:
        return raw
    return json.dumps(obj, indent=2, sort_keys=True, ensure_ascii=False)


class Navigator:
    """
    Stack-based drill-down state machine over a ColumnStore.

    The bottom of the stack is always the GroupedFrame built at construction
    and is never popped. `focus` drills into the selected group (or toggles
    the detail card on a FilteredFrame), `back` undoes one step.

    Raises:
        ConfigError: if a group, extra or timeline column does not exist
    """

    def __init__(
        self,
        store: ColumnStore,
        group_columns: Sequence[str],
        extra_columns: Sequence[str] = (),
        timeline_column: Optional[str] = None,
        *,
        timeline_width: int = TIMELINE_WIDTH,
        sub_slots_per_char: int = SUB_SLOTS_PER_CHAR,
    ) -> None:
        self.store = store
        self.group_columns: Tuple[str, ...] = tuple(group_columns)
        self.extra_columns: Tuple[str, ...] = tuple(extra_columns)
        self.timeline_column = timeline_column

        root = group_by(store, self.group_columns, self.extra_columns)

        self._timelines: Optional[List[str]] = None
        if timeline_column is not None:
            self._timelines = group_timelines(root, timeline_column, timeline_width, sub_slots_per_char)
            foreign = [
                v for v in store.column(timeline_column).unique()
                if not isinstance(v, (Timestamp, Absent))
            ]
            if foreign:
                logger.warning(
                    "Timeline column holds non-timestamp values; they are ignored",
                    extra={"column": timeline_column, "n_kinds": len({type(v) for v in foreign})},
                )

        self._colorizers: Dict[str, Colorizer] = {
            column.name: colorizer.select(column) for column in store.columns()
        }
        self._widths: Dict[str, int] = {column.name: column_width(column) for column in store.columns()}
        self._stack: List[Frame] = [GroupedFrame(view=root)]

        logger.info(
            "Navigator ready",
            extra={
                "n_rows": len(store),
                "n_groups": len(root),
                "group_columns": list(self.group_columns),
                "timeline_column": timeline_column,
            },
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------
    @property
    def current(self) -> Frame:
        return self._stack[-1]

    @property
    def root(self) -> GroupedFrame:
        return self._stack[0]

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def frames(self) -> Tuple[Frame, ...]:
        return tuple(self._stack)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------
    def focus(self) -> None:
        frame = self.current
        if isinstance(frame, GroupedFrame):
            if len(frame.view) == 0:
                raise NavigationError("Cannot focus a group in an empty view")
            predicate = frame.view.key(frame.selection)
            view = filter_rows(self.store, predicate)
            self._stack.append(FilteredFrame(view=view, predicate=predicate))
            logger.debug(
                "Pushed filtered frame",
                extra={"depth": self.depth, "n_rows": len(view), "columns": sorted(predicate)},
            )
        elif isinstance(frame, FilteredFrame):
            frame.focused = not frame.focused
        else:
            raise TypeError(f"Unknown frame type {type(frame).__name__}")

    def back(self) -> bool:
        """
        Undo one navigation step.

        :return: True if handled, False at the root frame (caller decides what
            to do, e.g. exit)
        """
        frame = self.current
        if isinstance(frame, GroupedFrame):
            return False
        if isinstance(frame, FilteredFrame):
            if frame.focused:
                frame.focused = False
            else:
                self._stack.pop()
                logger.debug("Popped filtered frame", extra={"depth": self.depth})
            return True
        raise TypeError(f"Unknown frame type {type(frame).__name__}")

    def move_selection(self, direction: Direction) -> int:
        frame = self.current
        frame.selection = step_selection(frame.selection, len(frame.view), direction)
        return frame.selection

    def dispatch(self, command: Command) -> bool:
        """
        Apply one command.

        :return: False when the session should end (QUIT, or BACK at the root)
        """
        if command is Command.MOVE_UP:
            self.move_selection(Direction.UP)
        elif command is Command.MOVE_DOWN:
            self.move_selection(Direction.DOWN)
        elif command is Command.FOCUS:
            self.focus()
        elif command is Command.BACK:
            return self.back()
        elif command is Command.QUIT:
            return False
        else:
            raise ValueError(f"Unknown command {command!r}")
        return True

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------
    def _cells(self, view: Union[GroupView, FilterView], index: int, headers: List[str]) -> Tuple[Cell, ...]:
        cells = []
        for name in headers:
            value = view.get(name, index)
            cells.append(Cell(text=display_text(value), color=self._colorizers[name](value)))
        return tuple(cells)

    def frame_model(self) -> FrameModel:
        frame = self.current
        headers = frame.view.column_names()
        widths = [self._widths[name] for name in headers]

        if isinstance(frame, GroupedFrame):
            rows = [
                DisplayRow(
                    cells=self._cells(frame.view, i, headers),
                    timeline=self._timelines[i] if self._timelines is not None else None,
                )
                for i in range(len(frame.view))
            ]
            return FrameModel(
                headers=headers,
                rows=rows,
                selection=frame.selection,
                mode=frame.mode,
                total=len(frame.view),
                has_timeline=self._timelines is not None,
                widths=widths,
            )

        if isinstance(frame, FilteredFrame):
            rows = [DisplayRow(cells=self._cells(frame.view, i, headers)) for i in range(len(frame.view))]
            card = pretty_record(frame.view.raw(frame.selection)) if frame.focused else None
            return FrameModel(
                headers=headers,
                rows=rows,
                selection=frame.selection,
                mode=frame.mode,
                total=len(frame.view),
                detail_card=card,
                widths=widths,
            )

        raise TypeError(f"Unknown frame type {type(frame).__name__}")
