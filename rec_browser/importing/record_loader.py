from __future__ import annotations

import json
import re
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, TextIO, Tuple, Union

import pandas as pd

from rec_browser.config.model import InputSpec
from rec_browser.core.exceptions import RecordExtractionError
from rec_browser.core.store import Column, ColumnStore
from rec_browser.core.values import (
    ABSENT,
    AttributeType,
    Boolean,
    Integer,
    String,
    Timestamp,
    Value,
)

logger = logging.getLogger(__name__)

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1

# calendar date prefix: 2021-03, 202103
_ISO_DATE_PREFIX = re.compile(r"^\d{4}-?\d{2}")

JSONRecord = Dict[str, Any]
ValueExtractor = Callable[[Any], Value]


# -----------------------------------------------------------------------------
# Value extractors
# Each one accepts a decoded JSON value and either returns a typed Value or
# raises ValueError with a short reason. No coercion between kinds.
# -----------------------------------------------------------------------------
def extract_integer(value: Any) -> Value:
    # bool is an int subclass in Python but not a JSON number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("value is not a number")
    if not isinstance(value, int):
        raise ValueError("value is not integer")
    if not I64_MIN <= value <= I64_MAX:
        raise ValueError("integer does not fit in 64 bits")
    return Integer(value)


def extract_boolean(value: Any) -> Value:
    if not isinstance(value, bool):
        raise ValueError("value is not a boolean")
    return Boolean(value)


def extract_string(value: Any) -> Value:
    if not isinstance(value, str):
        raise ValueError("value is not a string")
    return String(value)


def extract_datetime(value: Any) -> Value:
    """ISO-8601 string -> UTC Timestamp; naive times are read as UTC."""
    if not isinstance(value, str):
        raise ValueError("value is not a date-time string")
    # pandas also accepts relative words such as "now" and "today"
    if not _ISO_DATE_PREFIX.match(value):
        raise ValueError("value is not a valid date-time")
    parsed = pd.to_datetime(value, utc=True, format="ISO8601")
    if pd.isna(parsed):
        raise ValueError("value is not a valid date-time")
    return Timestamp(parsed.to_pydatetime())


EXTRACTORS: Dict[AttributeType, ValueExtractor] = {
    AttributeType.INTEGER: extract_integer,
    AttributeType.BOOLEAN: extract_boolean,
    AttributeType.STRING: extract_string,
    AttributeType.DATETIME: extract_datetime,
}


def get_extractor(attr_type: AttributeType) -> ValueExtractor:
    return EXTRACTORS[attr_type]


# -----------------------------------------------------------------------------
# Record decoding
# -----------------------------------------------------------------------------
def _iter_stream(text: str) -> Iterator[Tuple[Any, str]]:
    """Yield (object, source text) for every JSON value in a concatenated stream."""
    decoder = json.JSONDecoder()
    pos = 0
    end = len(text)
    index = 0
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            return
        try:
            obj, next_pos = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as exc:
            raise RecordExtractionError(f"invalid JSON: {exc}", record_index=index) from exc
        yield obj, text[pos:next_pos]
        pos = next_pos
        index += 1


def _iter_array(text: str) -> Iterator[Tuple[Any, str]]:
    """Yield (object, serialised text) for every element of a single JSON array."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecordExtractionError(f"invalid JSON: {exc}", record_index=0) from exc
    if not isinstance(data, list):
        raise RecordExtractionError("input is not a JSON array", record_index=0)
    for obj in data:
        yield obj, json.dumps(obj, ensure_ascii=False)


def iter_records(text: str, single: bool = False) -> Iterator[Tuple[JSONRecord, str]]:
    """
    Decode input text into (record, raw text) pairs.

    :param single: parse the input as one JSON array of objects instead of a
        stream of concatenated objects
    :raises RecordExtractionError: on invalid JSON or a record that is not an object
    """
    source = _iter_array(text) if single else _iter_stream(text)
    for index, (obj, raw) in enumerate(source):
        if not isinstance(obj, dict):
            raise RecordExtractionError(
                f"record is a JSON {type(obj).__name__}, expected an object",
                record_index=index,
            )
        yield obj, raw


# -----------------------------------------------------------------------------
# Store construction
# -----------------------------------------------------------------------------
def read_store(source: Union[str, TextIO], spec: InputSpec, single: bool = False) -> ColumnStore:
    """
    Build a ColumnStore from JSON input according to `spec`.

    For every record and declared attribute: a missing key becomes Absent,
    anything else must satisfy the attribute's extractor. A single bad value
    fails the whole load.

    :param source: input text or a readable text stream
    :param spec: validated input spec
    :param single: parse the input as one JSON array
    :raises RecordExtractionError: naming the record index and field at fault
    :raises StoreSchemaError: if the input holds no records
    """
    text = source if isinstance(source, str) else source.read()

    extractors = [(a.name, get_extractor(a.attr_type)) for a in spec.attrs]
    values: Dict[str, List[Value]] = {a.name: [] for a in spec.attrs}
    raw_records: List[str] = []

    for index, (record, raw) in enumerate(iter_records(text, single=single)):
        for name, extract in extractors:
            if name not in record:
                values[name].append(ABSENT)
                continue
            input_value = record[name]
            if input_value is None:
                raise RecordExtractionError(
                    "failed to parse value=null: value is null",
                    record_index=index,
                    field=name,
                    value=None,
                )
            try:
                values[name].append(extract(input_value))
            except ValueError as exc:
                raise RecordExtractionError(
                    f"failed to parse value={json.dumps(input_value, ensure_ascii=False)}: {exc}",
                    record_index=index,
                    field=name,
                    value=input_value,
                ) from exc
        raw_records.append(raw)

    store = ColumnStore(
        [Column(name=a.name, values=tuple(values[a.name]), attr_type=a.attr_type) for a in spec.attrs],
        raw_records,
    )
    logger.info(
        "Records loaded",
        extra={"n_records": len(store), "columns": store.column_names(), "single": single},
    )
    return store


def load_store(path: Path, spec: InputSpec, single: bool = False) -> ColumnStore:
    """Read the input file at `path` and build its ColumnStore."""
    if not path.is_file():
        raise FileNotFoundError(f"File not found at {path}")
    logger.info("Loading records", extra={"input_path": str(path)})
    with path.open("r", encoding="utf-8") as fp:
        return read_store(fp, spec, single=single)
