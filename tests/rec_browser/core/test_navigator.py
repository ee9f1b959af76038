import json
from datetime import datetime, timedelta, timezone

import pytest

from rec_browser.core.colorizer import NEUTRAL_COLOR
from rec_browser.core.exceptions import ConfigError, NavigationError
from rec_browser.core.navigator import (
    Command,
    Direction,
    FilteredFrame,
    GroupedFrame,
    MAX_COLUMN_WIDTH,
    Navigator,
    column_width,
    pretty_record,
    step_selection,
)
from rec_browser.core.store import ColumnStore
from rec_browser.core.values import Boolean, Integer, String, Timestamp

BASE = datetime(2021, 1, 1, tzinfo=timezone.utc)


def _make_store() -> ColumnStore:
    """
    3 records:
    - name: a, a, b
    - value: 1, 2, 3
    - ts: +0s, +15s, +7s
    """
    records = [
        {"value": 1, "name": "a"},
        {"value": 2, "name": "a"},
        {"value": 3, "name": "b"},
    ]
    return ColumnStore.from_values(
        {
            "name": [String(r["name"]) for r in records],
            "value": [Integer(r["value"]) for r in records],
            "ts": [Timestamp(BASE + timedelta(seconds=s)) for s in (0, 15, 7)],
        },
        [json.dumps(r) for r in records],
    )


def _make_navigator(**kwargs) -> Navigator:
    return Navigator(_make_store(), ["name"], ["value"], **kwargs)


def test_focus_then_back_restores_root():
    nav = _make_navigator()
    root = nav.current
    assert isinstance(root, GroupedFrame)
    assert len(root.view) == 2
    assert root.view.member_indices(0) == [0, 1]

    nav.focus()
    frame = nav.current

    assert isinstance(frame, FilteredFrame)
    assert frame.predicate == {"name": String("a")}
    assert frame.view.indices.tolist() == [0, 1]
    assert frame.selection == 0
    assert not frame.focused
    assert nav.depth == 2

    assert nav.back() is True
    assert nav.current is root
    assert nav.depth == 1
    assert len(nav.current.view) == 2


def test_back_preserves_root_selection():
    nav = _make_navigator()

    nav.move_selection(Direction.DOWN)
    nav.focus()
    assert nav.current.predicate == {"name": String("b")}
    assert len(nav.current.view) == 1

    nav.back()
    assert nav.root.selection == 1


def test_focus_toggles_detail_card_and_back_unfocuses():
    nav = _make_navigator()
    nav.focus()

    nav.focus()
    assert nav.current.focused

    nav.focus()
    assert not nav.current.focused

    nav.focus()
    assert nav.back() is True
    assert nav.depth == 2
    assert not nav.current.focused

    assert nav.back() is True
    assert nav.depth == 1


def test_back_at_root_is_not_handled():
    nav = _make_navigator()
    assert nav.back() is False
    assert nav.depth == 1


def test_move_selection_wraps():
    nav = _make_navigator()

    assert nav.move_selection(Direction.UP) == 1
    assert nav.move_selection(Direction.DOWN) == 0
    assert nav.move_selection(Direction.DOWN) == 1
    assert nav.move_selection(Direction.DOWN) == 0


def test_step_selection_in_empty_view_raises():
    with pytest.raises(NavigationError):
        step_selection(0, 0, Direction.DOWN)


def test_dispatch():
    nav = _make_navigator()

    assert nav.dispatch(Command.MOVE_DOWN) is True
    assert nav.current.selection == 1
    assert nav.dispatch(Command.MOVE_UP) is True
    assert nav.current.selection == 0
    assert nav.dispatch(Command.FOCUS) is True
    assert nav.depth == 2
    assert nav.dispatch(Command.BACK) is True
    assert nav.dispatch(Command.BACK) is False
    assert nav.dispatch(Command.QUIT) is False


def test_grouped_frame_model():
    nav = _make_navigator()

    model = nav.frame_model()

    assert model.mode == "GROUPED"
    assert model.headers == ["name", "value"]
    assert [[c.text for c in row.cells] for row in model.rows] == [["a", "1"], ["b", "3"]]
    assert model.total == 2
    assert model.selection == 0
    assert model.detail_card is None
    assert not model.has_timeline
    assert all(row.timeline is None for row in model.rows)


def test_filtered_frame_model_and_detail_card():
    nav = _make_navigator()
    nav.focus()

    model = nav.frame_model()
    assert model.mode == "FILTERED"
    assert model.headers == ["name", "value", "ts"]
    assert [[c.text for c in row.cells][:2] for row in model.rows] == [["a", "1"], ["a", "2"]]
    assert model.detail_card is None

    nav.move_selection(Direction.DOWN)
    nav.focus()
    model = nav.frame_model()
    assert model.selection == 1
    assert model.detail_card == '{\n  "name": "a",\n  "value": 2\n}'


def test_cells_share_colors_per_value():
    nav = _make_navigator()
    nav.focus()

    rows = nav.frame_model().rows
    name_colors = {row.cells[0].color for row in rows}

    assert len(name_colors) == 1
    assert name_colors != {NEUTRAL_COLOR}


def test_timeline_strips_on_grouped_rows():
    nav = _make_navigator(timeline_column="ts", timeline_width=2, sub_slots_per_char=8)

    model = nav.frame_model()

    assert model.has_timeline
    assert [row.timeline for row in model.rows] == ["▏█", "█ "]


def test_unknown_columns_raise():
    store = _make_store()
    with pytest.raises(ConfigError):
        Navigator(store, ["missing"])
    with pytest.raises(ConfigError):
        Navigator(store, ["name"], ["missing"])
    with pytest.raises(ConfigError):
        Navigator(store, ["name"], timeline_column="missing")


def test_pretty_record_passes_through_non_json():
    assert pretty_record("not json") == "not json"
    assert pretty_record('{"b": 1, "a": [true]}') == '{\n  "a": [\n    true\n  ],\n  "b": 1\n}'


def test_column_widths_fit_widest_value_or_header():
    store = ColumnStore.from_values(
        {
            "name": [String("a"), String("x" * 40)],
            "ok": [Boolean(True), Boolean(False)],
            "count": [Integer(1), Integer(2)],
            "timestamp_of_event": [Timestamp(BASE), Timestamp(BASE)],
        },
        ["{}", "{}"],
    )

    assert [column_width(c) for c in store.columns()] == [MAX_COLUMN_WIDTH, 2, 16, 18]


def test_frame_model_carries_column_widths():
    nav = _make_navigator()
    assert nav.frame_model().widths == [4, 16]

    nav.focus()
    assert nav.frame_model().widths == [4, 16, 12]
