"""Filter variants: global search, per-column search, custom procedure."""

from __future__ import annotations

from .base import IFilter, SearchFilter, is_empty_search_value
from .column_filter import ColumnFilter
from .custom_filter import CustomFilter
from .global_filter import GlobalFilter

Filter = GlobalFilter | ColumnFilter | CustomFilter

__all__ = [
    "ColumnFilter",
    "CustomFilter",
    "Filter",
    "GlobalFilter",
    "IFilter",
    "SearchFilter",
    "is_empty_search_value",
]
