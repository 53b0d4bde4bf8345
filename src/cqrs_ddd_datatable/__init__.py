"""
Server-side data tables: filtering, sorting, pagination and export.

Filters describe predicates against the :class:`IQuery` protocol; the
:class:`DataTableService` reads a client request, applies the filters
in a fixed order and renders a page, a shaped envelope or an export.

Query engines live in ``cqrs_ddd_datatable.adapters``.
"""

from __future__ import annotations

from .config import CacheConfig, DataTableConfig, DownloadConfig
from .exceptions import (
    ColumnNotFoundError,
    DataTableError,
    InvalidParameterError,
    RelationNotFoundError,
    UnsupportedOperatorError,
)
from .filters import (
    ColumnFilter,
    CustomFilter,
    Filter,
    GlobalFilter,
    IFilter,
    SearchFilter,
    is_empty_search_value,
)
from .operators import LogicalOperator, QueryOperator, SearchType, SortDirection
from .pagination import Page, coerce_page, coerce_per_page
from .query import ColumnRef, IQuery, SortField, fold_clauses, lower
from .resources import (
    PaginatedEnvelope,
    Resource,
    ResourceCollection,
    ResourceRegistry,
)
from .service import DataTableService

__all__ = [
    "CacheConfig",
    "ColumnFilter",
    "ColumnNotFoundError",
    "ColumnRef",
    "CustomFilter",
    "DataTableConfig",
    "DataTableError",
    "DataTableService",
    "DownloadConfig",
    "Filter",
    "GlobalFilter",
    "IFilter",
    "IQuery",
    "InvalidParameterError",
    "LogicalOperator",
    "Page",
    "PaginatedEnvelope",
    "QueryOperator",
    "RelationNotFoundError",
    "Resource",
    "ResourceCollection",
    "ResourceRegistry",
    "SearchFilter",
    "SearchType",
    "SortDirection",
    "SortField",
    "UnsupportedOperatorError",
    "coerce_page",
    "coerce_per_page",
    "fold_clauses",
    "is_empty_search_value",
    "lower",
]
