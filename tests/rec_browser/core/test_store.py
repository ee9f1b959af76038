import pytest

from rec_browser.core.exceptions import ConfigError, StoreSchemaError
from rec_browser.core.store import Column, ColumnStore
from rec_browser.core.values import ABSENT, Integer, String


def _make_store() -> ColumnStore:
    return ColumnStore.from_values(
        {
            "name": [String("a"), String("a"), String("b")],
            "value": [Integer(1), Integer(2), ABSENT],
        },
        ['{"name": "a", "value": 1}', '{"name": "a", "value": 2}', '{"name": "b"}'],
    )


def test_read_api():
    store = _make_store()

    assert len(store) == 3
    assert store.column_names() == ["name", "value"]
    assert store.row(1) == [String("a"), Integer(2)]
    assert store.row(2) == [String("b"), ABSENT]
    assert store.raw(2) == '{"name": "b"}'
    assert store.get("value", 0) == Integer(1)
    assert store.column("name").unique() == {String("a"), String("b")}


def test_columns_are_immutable_tuples():
    store = _make_store()
    assert isinstance(store.column("name").values, tuple)


def test_unknown_column_raises_key_error():
    store = _make_store()
    with pytest.raises(KeyError):
        store.get("missing", 0)


def test_store_requires_columns():
    with pytest.raises(StoreSchemaError):
        ColumnStore([], [])


def test_store_requires_rows():
    with pytest.raises(StoreSchemaError):
        ColumnStore([Column(name="a", values=())], [])


def test_store_rejects_mismatched_column_lengths():
    with pytest.raises(StoreSchemaError):
        ColumnStore(
            [
                Column(name="a", values=(Integer(1), Integer(2))),
                Column(name="b", values=(Integer(1),)),
            ],
            ["{}", "{}"],
        )


def test_store_rejects_mismatched_raw_records():
    with pytest.raises(StoreSchemaError):
        ColumnStore([Column(name="a", values=(Integer(1), Integer(2)))], ["{}"])


def test_store_rejects_duplicate_column_names():
    with pytest.raises(StoreSchemaError):
        ColumnStore(
            [Column(name="a", values=(Integer(1),)), Column(name="a", values=(Integer(2),))],
            ["{}"],
        )


def test_schema_error_is_a_config_error():
    with pytest.raises(ConfigError):
        ColumnStore([], [])
