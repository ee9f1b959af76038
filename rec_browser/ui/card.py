"""
Detail card: a focused record drawn as colored, YAML-like text.
"""

from __future__ import annotations

import json
from typing import Any, List, Tuple

from rich.text import Text

PADDING_INCR = 2
KEY_STYLE = "red"
STRING_STYLE = "bright_green"
LITERAL_STYLE = "bright_cyan"
SYNTAX_STYLE = "yellow"

# (text, style) pairs; the first span of every line is its indentation
Span = Tuple[str, str]
Line = List[Span]


def _line(padding: int, *spans: Span) -> Line:
    return [(" " * padding, "")] + list(spans)


def _serialize(obj: Any, padding: int) -> Tuple[List[Line], bool]:
    """
    Lay out one JSON value.

    :return: the lines, and whether the value is a block (object or array)
        that must start on its own line rather than after "key: "
    """
    if isinstance(obj, bool):
        return [_line(padding, ("true" if obj else "false", LITERAL_STYLE))], False
    if obj is None:
        return [_line(padding, ("null", LITERAL_STYLE))], False
    if isinstance(obj, (int, float)):
        return [_line(padding, (json.dumps(obj), LITERAL_STYLE))], False
    if isinstance(obj, str):
        if not obj:
            return [_line(padding, ('""', STRING_STYLE))], False
        lines = [_line(padding, (part, STRING_STYLE)) for part in obj.split("\n")]
        if len(lines) > 1:
            lines.insert(0, _line(padding, ("|", SYNTAX_STYLE)))
        return lines, False
    if isinstance(obj, list):
        if not obj:
            return [_line(padding, ("[]", SYNTAX_STYLE))], False
        result: List[Line] = []
        for item in obj:
            lines, _ = _serialize(item, padding + PADDING_INCR)
            first = _line(padding, ("- ", SYNTAX_STYLE)) + lines[0][1:]
            result.append(first)
            result.extend(lines[1:])
        return result, True
    if isinstance(obj, dict):
        if not obj:
            return [_line(padding, ("{}", SYNTAX_STYLE))], False
        result = []
        for key, value in obj.items():
            key_line = _line(padding, (str(key), KEY_STYLE), (": ", SYNTAX_STYLE))
            lines, is_block = _serialize(value, padding + PADDING_INCR)
            if is_block:
                result.append(key_line)
                result.extend(lines)
            else:
                result.append(key_line + lines[0][1:])
                result.extend(lines[1:])
        return result, True
    return [_line(padding, (str(obj), LITERAL_STYLE))], False


def card_lines(text: str) -> List[Line]:
    """Colored lines for a record; text that is not JSON becomes a single plain block."""
    try:
        obj = json.loads(text)
    except ValueError:
        return [_line(0, (line, "")) for line in text.split("\n")]
    lines, _ = _serialize(obj, 0)
    return lines


def render_card(text: str) -> Text:
    return Text("\n").join(Text.assemble(*line) for line in card_lines(text))
