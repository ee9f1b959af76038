from datetime import datetime, timedelta, timezone

import pytest

from rec_browser.core.values import (
    ABSENT,
    Absent,
    AttributeType,
    Boolean,
    Integer,
    String,
    Timestamp,
    display_text,
)


def test_values_compare_structurally_and_by_kind():
    assert Integer(1) == Integer(1)
    assert Integer(1) != Boolean(True)
    assert String("1") != Integer(1)
    assert Absent() == ABSENT
    assert ABSENT != String("")

    assert len({Integer(1), Integer(1), Boolean(True), ABSENT, Absent()}) == 3


def test_timestamp_is_normalised_to_utc():
    local = datetime(2021, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    utc = datetime(2021, 3, 1, 10, 0, tzinfo=timezone.utc)

    assert Timestamp(local) == Timestamp(utc)
    assert Timestamp(local).value.tzinfo == timezone.utc
    assert Timestamp(datetime(2021, 3, 1, 10, 0)).value == utc


def test_display_text_per_kind():
    ts = Timestamp(datetime(2021, 3, 1, 10, 4, 5, 123456, tzinfo=timezone.utc))

    assert display_text(Integer(-42)) == "-42"
    assert display_text(Boolean(True)) == "✓"
    assert display_text(Boolean(False)) == "✗"
    assert display_text(String("abc")) == "abc"
    assert display_text(ts) == "10:04:05.123"
    assert display_text(ABSENT) == ""


def test_display_text_of_timestamp_uses_utc():
    ts = Timestamp(datetime(2021, 3, 1, 1, 0, 0, tzinfo=timezone(timedelta(hours=3))))
    assert display_text(ts) == "22:00:00.000"


def test_attribute_type_from_value_is_case_insensitive():
    assert AttributeType.from_value("DateTime") is AttributeType.DATETIME
    assert AttributeType.from_value("integer") is AttributeType.INTEGER

    with pytest.raises(ValueError):
        AttributeType.from_value("float")
