from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from rec_browser.core.exceptions import StoreSchemaError
from rec_browser.core.values import AttributeType, Value


@dataclass(frozen=True)
class Column:
    """
    A named, typed, immutable sequence of values.

    `values` is stored as a tuple so a Column cannot be mutated after the
    store has been built.
    """
    name: str
    values: Tuple[Value, ...]
    attr_type: Optional[AttributeType] = None

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> Value:
        return self.values[index]

    def unique(self) -> Set[Value]:
        """Distinct values of this column (Absent included)."""
        return set(self.values)


class ColumnStore:
    """
    Immutable columnar storage for a fixed collection of typed records.

    Includes:
    - an ordered mapping of column name -> Column (declaration order preserved)
    - the raw text of every source record, parallel to the columns

    The store is built once by the loader and never mutated afterwards; views
    (FilterView / GroupView) keep a reference to it plus row indices only.

    Raises:
        StoreSchemaError: if there are no columns, no rows, duplicate column
        names, or the columns / raw records disagree on the row count
    """

    # -------------------------------------------------------------------------
    # Constructor
    # -------------------------------------------------------------------------
    def __init__(self, columns: Iterable[Column], raw_records: Sequence[str]) -> None:
        column_list: List[Column] = list(columns)
        if not column_list:
            raise StoreSchemaError("data should have at least one column")

        self._columns: Dict[str, Column] = {}
        for column in column_list:
            if column.name in self._columns:
                raise StoreSchemaError(f"duplicate column '{column.name}'")
            self._columns[column.name] = column

        row_counts = {len(column) for column in column_list}
        if len(row_counts) != 1:
            lengths = ", ".join(f"{c.name}={len(c)}" for c in column_list)
            raise StoreSchemaError(f"columns have different number of rows ({lengths})")

        n_rows = row_counts.pop()
        if n_rows == 0:
            raise StoreSchemaError("data should have at least one row")

        raw = tuple(raw_records)
        if len(raw) != n_rows:
            raise StoreSchemaError(
                f"raw record count {len(raw)} does not match row count {n_rows}"
            )

        self._raw: Tuple[str, ...] = raw
        self._n_rows = n_rows

    @classmethod
    def from_values(
        cls,
        values: Dict[str, Sequence[Value]],
        raw_records: Sequence[str],
    ) -> "ColumnStore":
        """Convenience factory from a plain name -> values mapping."""
        return cls(
            [Column(name=name, values=tuple(column)) for name, column in values.items()],
            raw_records,
        )

    # -------------------------------------------------------------------------
    # Read API
    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return self._n_rows

    def column_names(self) -> List[str]:
        return list(self._columns)

    def has_column(self, name: str) -> bool:
        return name in self._columns

    def column(self, name: str) -> Column:
        try:
            return self._columns[name]
        except KeyError:
            raise KeyError(f"Column '{name}' not found")

    def columns(self) -> List[Column]:
        return list(self._columns.values())

    def row(self, index: int) -> List[Value]:
        """Values of row `index` across all columns, in declaration order."""
        return [column[index] for column in self._columns.values()]

    def raw(self, index: int) -> str:
        """Original text of the record at `index`."""
        return self._raw[index]

    def get(self, name: str, index: int) -> Value:
        return self.column(name)[index]

    def source_index(self, index: int) -> int:
        """A store row is its own source row."""
        return index

    def __repr__(self) -> str:
        return f"ColumnStore(rows={self._n_rows}, columns={self.column_names()!r})"
