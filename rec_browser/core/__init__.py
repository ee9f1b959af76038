"""
Core domain layer: typed values, the columnar store, filter/group views,
timelines, colors and the drill-down navigator
"""

from .navigator import Command, Direction, FrameModel, Navigator
from .store import Column, ColumnStore
from .views import FilterView, GroupView, filter_rows, group_by

__all__ = [
    "Column",
    "ColumnStore",
    "Command",
    "Direction",
    "FilterView",
    "FrameModel",
    "GroupView",
    "Navigator",
    "filter_rows",
    "group_by",
]
