from __future__ import annotations

from typing import Any, Optional


class RecBrowserError(Exception):
    """Base exception for all rec_browser errors"""
    pass

class ConfigError(RecBrowserError):
    """Invalid or inconsistent input spec, or a column name that does not exist"""
    pass

class StoreSchemaError(ConfigError):
    """
    Column data doesn't satisfy what ColumnStore expects
    no columns, no rows, duplicate names, mismatched lengths, etc
    """
    pass

class RecordExtractionError(RecBrowserError):
    """
    A source record could not be turned into typed column values.
    One malformed record invalidates the whole load.
    """

    def __init__(
        self,
        message: str,
        *,
        record_index: int,
        field: Optional[str] = None,
        value: Any = None,
    ) -> None:
        self.record_index = record_index
        self.field = field
        self.value = value
        location = f"record {record_index}"
        if field is not None:
            location += f", field '{field}'"
        super().__init__(f"{location}: {message}")

class NavigationError(RecBrowserError):
    """Navigator precondition broken at runtime (e.g. an empty view)"""
    pass
