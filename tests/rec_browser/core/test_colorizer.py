from rec_browser.core.colorizer import (
    MAX_INTENSITY,
    MIN_INTENSITY,
    NEUTRAL_COLOR,
    Color,
    colorize_rgb,
    colorize_static,
    select,
)
from rec_browser.core.store import Column
from rec_browser.core.values import ABSENT, Integer, String


def test_constant_column_is_neutral():
    colorize = select(Column(name="c", values=(String("x"), String("x"), ABSENT)))

    assert colorize is colorize_static
    assert colorize(String("x")) == NEUTRAL_COLOR
    assert colorize(ABSENT) == NEUTRAL_COLOR
    assert colorize(String("other")) == NEUTRAL_COLOR


def test_column_of_absent_only_is_neutral():
    assert select(Column(name="c", values=(ABSENT, ABSENT))) is colorize_static


def test_low_cardinality_column_gets_distinct_stable_colors():
    colorize = select(Column(name="c", values=(String("a"), String("b"), ABSENT)))

    ca, cb = colorize(String("a")), colorize(String("b"))

    assert colorize is colorize_rgb
    assert ca != cb
    assert colorize(String("a")) == ca
    for color in (ca, cb):
        assert all(MIN_INTENSITY <= channel <= MAX_INTENSITY for channel in color)


def test_high_cardinality_column_is_neutral():
    values = tuple(Integer(i) for i in range(17))
    assert select(Column(name="c", values=values)) is colorize_static


def test_sixteen_distinct_values_are_still_colored():
    values = tuple(Integer(i) for i in range(16))
    assert select(Column(name="c", values=values)) is colorize_rgb


def test_color_hex():
    assert Color(255, 0, 16).hex == "#ff0010"


def test_colors_are_fixed_by_value_content():
    assert colorize_rgb(String("a")) == Color(133, 241, 133)
    assert colorize_rgb(String("b")) == Color(184, 241, 184)
    assert colorize_rgb(Integer(1)) == Color(194, 133, 249)
