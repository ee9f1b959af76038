"""
Importing package: turns JSON input into a ColumnStore.
"""

from .record_loader import iter_records, load_store, read_store

__all__ = ["iter_records", "load_store", "read_store"]
