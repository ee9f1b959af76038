"""
Read-only views over a ColumnStore.

Both view kinds keep a reference to the store plus numpy arrays of store row
indices; no column data is copied. They expose the same read contract as the
store itself (len / column_names / row / raw / get / source_index), so code
that renders rows does not care which kind it holds.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

import numpy as np

from rec_browser.core.exceptions import ConfigError
from rec_browser.core.store import ColumnStore
from rec_browser.core.values import Value

logger = logging.getLogger(__name__)


def _frozen_indices(indices: Iterable[int]) -> np.ndarray:
    if not isinstance(indices, np.ndarray):
        indices = list(indices)
    arr = np.array(indices, dtype=np.intp)
    arr.setflags(write=False)
    return arr


class FilterView:
    """
    Ordered subset of store rows.

    Row i of the view is store row `indices[i]`; the order of `indices` is the
    order rows appear in.
    """

    def __init__(self, store: ColumnStore, indices: Iterable[int]) -> None:
        self.store = store
        self._idx = _frozen_indices(indices)
        if self._idx.size and (self._idx.min() < 0 or self._idx.max() >= len(store)):
            raise IndexError(f"Row indices out of range for a store of {len(store)} rows")

    @property
    def indices(self) -> np.ndarray:
        """Store row indices of this view (read-only array)."""
        return self._idx

    def __len__(self) -> int:
        return int(self._idx.size)

    def column_names(self) -> List[str]:
        return self.store.column_names()

    def source_index(self, index: int) -> int:
        return int(self._idx[index])

    def row(self, index: int) -> List[Value]:
        return self.store.row(self.source_index(index))

    def raw(self, index: int) -> str:
        return self.store.raw(self.source_index(index))

    def get(self, name: str, index: int) -> Value:
        return self.store.get(name, self.source_index(index))

    def __repr__(self) -> str:
        return f"FilterView(rows={len(self)})"


class GroupView:
    """
    One row per distinct tuple of key-column values.

    Each group keeps the ordered list of its member store rows; the first
    member is the group's representative and supplies the values shown for
    the group (`row`, `get`, `raw`).

    Groups are ordered by first occurrence of their key tuple, members by
    original row order.
    """

    def __init__(
        self,
        store: ColumnStore,
        key_columns: Sequence[str],
        extra_columns: Sequence[str],
        groups: Iterable[Iterable[int]],
    ) -> None:
        self.store = store
        self.key_columns: Tuple[str, ...] = tuple(key_columns)
        self.extra_columns: Tuple[str, ...] = tuple(extra_columns)
        self._groups: Tuple[np.ndarray, ...] = tuple(_frozen_indices(g) for g in groups)
        if any(g.size == 0 for g in self._groups):
            raise ValueError("Groups must not be empty")

    def __len__(self) -> int:
        return len(self._groups)

    def column_names(self) -> List[str]:
        return list(self.key_columns + self.extra_columns)

    def member_indices(self, index: int) -> List[int]:
        """All store rows belonging to group `index`, in original order."""
        return self._groups[index].tolist()

    def groups(self) -> List[List[int]]:
        return [g.tolist() for g in self._groups]

    def source_index(self, index: int) -> int:
        """Store row of the representative (first member) of group `index`."""
        return int(self._groups[index][0])

    def row(self, index: int) -> List[Value]:
        rep = self.source_index(index)
        return [self.store.get(name, rep) for name in self.column_names()]

    def raw(self, index: int) -> str:
        return self.store.raw(self.source_index(index))

    def get(self, name: str, index: int) -> Value:
        return self.store.get(name, self.source_index(index))

    def key(self, index: int) -> Dict[str, Value]:
        """Key-column values shared by every member of group `index`."""
        rep = self.source_index(index)
        return {name: self.store.get(name, rep) for name in self.key_columns}

    def representatives(self) -> FilterView:
        """The representative rows of every group, as a FilterView."""
        return FilterView(self.store, [int(g[0]) for g in self._groups])

    def __repr__(self) -> str:
        return f"GroupView(groups={len(self)}, key_columns={list(self.key_columns)!r})"


View = Union[ColumnStore, FilterView, GroupView]
RowSource = Union[ColumnStore, FilterView]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _store_and_indices(source: RowSource) -> Tuple[ColumnStore, np.ndarray]:
    if isinstance(source, ColumnStore):
        return source, np.arange(len(source), dtype=np.intp)
    if isinstance(source, FilterView):
        return source.store, source.indices
    raise TypeError(f"Cannot derive a view from {type(source).__name__}")


def require_columns(store: ColumnStore, names: Iterable[str], role: str) -> None:
    """
    Raise ConfigError if any of `names` is not a column of `store`.

    :param role: what the columns are used for, for the error message
    """
    missing = [name for name in names if not store.has_column(name)]
    if missing:
        raise ConfigError(
            f"Unknown {role} column(s): {', '.join(missing)}. "
            f"Available columns: {', '.join(store.column_names())}"
        )


# -----------------------------------------------------------------------------
# View construction
# -----------------------------------------------------------------------------
def filter_rows(source: RowSource, predicate: Mapping[str, Value]) -> FilterView:
    """
    Return the rows of `source` whose values equal `predicate` on every
    constrained column.

    Columns not named in the predicate are ignored; an empty predicate gives
    the identity view over `source` in its original order.

    Raises:
        ConfigError: if the predicate names a column the store does not have
    """
    store, base = _store_and_indices(source)
    require_columns(store, predicate.keys(), "filter")

    mask = np.ones(base.size, dtype=bool)
    for name, expected in predicate.items():
        column = store.column(name)
        mask &= np.fromiter(
            (column[i] == expected for i in base.tolist()),
            dtype=bool,
            count=base.size,
        )

    view = FilterView(store, base[mask])
    logger.debug(
        "Filtered rows",
        extra={"predicate": sorted(predicate), "n_source": int(base.size), "n_rows": len(view)},
    )
    return view


def group_by(
    source: RowSource,
    key_columns: Sequence[str],
    extra_columns: Sequence[str] = (),
) -> GroupView:
    """
    Group the rows of `source` by the tuple of their `key_columns` values.

    Absent takes part in the key like any other value. Runs in one pass: a
    dict maps each key tuple to its position in the ordered group list.

    Raises:
        ConfigError: if a key or extra column does not exist
    """
    store, base = _store_and_indices(source)
    require_columns(store, key_columns, "group")
    require_columns(store, extra_columns, "extra")

    keys = [store.column(name) for name in key_columns]
    group_of: Dict[Tuple[Value, ...], int] = {}
    groups: List[List[int]] = []

    for i in base.tolist():
        key = tuple(column[i] for column in keys)
        pos = group_of.get(key)
        if pos is None:
            group_of[key] = len(groups)
            groups.append([i])
        else:
            groups[pos].append(i)

    view = GroupView(store, key_columns, extra_columns, groups)
    logger.debug(
        "Grouped rows",
        extra={"key_columns": list(key_columns), "n_source": int(base.size), "n_groups": len(view)},
    )
    return view
