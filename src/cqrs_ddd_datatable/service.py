"""
DataTableService: request-scoped filtering, sorting, pagination and export.

Usage::

    service = (
        DataTableService.make(MemoryQuery(rows))
        .set_global_filters([GlobalFilter("name"), GlobalFilter("email")])
        .set_column_filters([ColumnFilter("status"), ColumnFilter("user.name")])
        .set_custom_filters([CustomFilter(only_active)])
        .set_download_columns(["name", "email"])
        .fill_from_request(request.query_params)
    )
    return service.render()

``fill_from_request`` applies filters in a fixed order (global, column,
custom, then sorting) because AND/OR grouping on the query is order
sensitive. ``render`` is the terminal call.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from .config import DataTableConfig
from .exceptions import InvalidParameterError
from .filters import (
    ColumnFilter,
    CustomFilter,
    GlobalFilter,
    IFilter,
    is_empty_search_value,
)
from .operators import SortDirection
from .pagination import coerce_page, coerce_per_page
from .query import SortField
from .resources import PaginatedEnvelope, ResourceRegistry

if TYPE_CHECKING:
    from .pagination import Page
    from .query import IQuery

logger = logging.getLogger("cqrs_ddd.datatable")

_TRUTHY = frozenset({"1", "true", "yes", "on"})

F = TypeVar("F", bound=IFilter)


class DataTableService:
    """Configure once per request, ingest the request, then ``render()``.

    Setters validate eagerly, raise :class:`InvalidParameterError` on bad
    input and return the service for chaining. A failed setter leaves the
    previous value in place.
    """

    def __init__(
        self,
        query: IQuery,
        *,
        config: DataTableConfig | None = None,
        resources: ResourceRegistry | None = None,
    ) -> None:
        self._query = query
        self._config = config or DataTableConfig()
        self._resources = resources or ResourceRegistry()
        self._page = 1
        self._items_per_page = self._config.default_items_per_page
        self._sort_by: list[SortField] = []
        self._resource_mapper: type[Any] | None = None
        self._download = False
        self._global_filters: list[GlobalFilter] = []
        self._column_filters: list[ColumnFilter] = []
        self._custom_filters: list[CustomFilter] = []
        self._request_filter: dict[str, Any] = {}
        self._download_columns: list[str] = []
        self._download_mapper: Callable[[Any], Any] | None = None

    @classmethod
    def make(
        cls,
        query: IQuery,
        *,
        config: DataTableConfig | None = None,
        resources: ResourceRegistry | None = None,
    ) -> DataTableService:
        return cls(query, config=config, resources=resources)

    # -- setters -------------------------------------------------------------

    def set_page(self, page: int) -> DataTableService:
        if not isinstance(page, int) or isinstance(page, bool) or page < 1:
            raise InvalidParameterError(
                "Page number must be greater than 0", parameter="page"
            )
        self._page = page
        return self

    def set_items_per_page(self, items_per_page: int) -> DataTableService:
        max_items = self._config.max_items_per_page
        if (
            not isinstance(items_per_page, int)
            or isinstance(items_per_page, bool)
            or items_per_page < 1
        ):
            raise InvalidParameterError(
                "Items per page must be greater than 0", parameter="items_per_page"
            )
        if items_per_page > max_items:
            raise InvalidParameterError(
                f"Items per page cannot exceed {max_items}",
                parameter="items_per_page",
            )
        self._items_per_page = items_per_page
        return self

    def set_sort_by(self, sort_by: Iterable[Any]) -> DataTableService:
        """Set the sort order from ``{"key": ..., "order": ...}`` entries."""
        self._sort_by = [_parse_sort_entry(entry) for entry in sort_by]
        return self

    def set_resource_mapper(self, reference: str | type[Any]) -> DataTableService:
        self._resource_mapper = self._resources.resolve(reference)
        return self

    def set_global_filters(self, filters: Iterable[Any]) -> DataTableService:
        self._global_filters = _require_all(filters, GlobalFilter, "global_filters")
        return self

    def set_column_filters(self, filters: Iterable[Any]) -> DataTableService:
        self._column_filters = _require_all(filters, ColumnFilter, "column_filters")
        return self

    def set_custom_filters(self, filters: Iterable[Any]) -> DataTableService:
        self._custom_filters = _require_all(filters, CustomFilter, "custom_filters")
        return self

    def set_download_columns(self, columns: Iterable[str]) -> DataTableService:
        if isinstance(columns, str):
            raise InvalidParameterError(
                "Download columns must be a list of column names, got a string",
                parameter="download_columns",
            )
        names = list(columns)
        for name in names:
            if not isinstance(name, str) or not name:
                raise InvalidParameterError(
                    f"Download column names must be non-empty strings, got {name!r}",
                    parameter="download_columns",
                )
        self._download_columns = names
        return self

    def set_download_mapper(self, mapper: Callable[[Any], Any]) -> DataTableService:
        if not callable(mapper):
            raise InvalidParameterError(
                "Download mapper must be callable", parameter="download_mapper"
            )
        self._download_mapper = mapper
        return self

    # -- request ingestion ---------------------------------------------------

    def fill_from_request(self, request: Any) -> DataTableService:
        """Read paging, sorting, filter and export values, then apply filters.

        ``request`` is anything with ``get(key, default)``. Out-of-range or
        unparsable paging values are clamped; malformed sort entries are
        dropped with a warning.
        """
        self._page = coerce_page(request.get("page", 1))
        self._items_per_page = coerce_per_page(
            request.get("itemsPerPage", self._items_per_page),
            default=self._items_per_page,
            max_per_page=self._config.max_items_per_page,
        )
        self._sort_by = _parse_request_sort(request.get("sortBy", []))
        raw_filter = request.get("filter", {})
        if isinstance(raw_filter, Mapping):
            self._request_filter = dict(raw_filter)
        else:
            if raw_filter:
                logger.warning(
                    "Ignoring non-mapping filter payload of type %s",
                    type(raw_filter).__name__,
                )
            self._request_filter = {}
        self._download = _truthy(request.get("download", False))

        logger.debug(
            "Filled from request: page=%s items_per_page=%s sort=%s download=%s",
            self._page,
            self._items_per_page,
            self._sort_by,
            self._download,
        )

        self._apply_global_filters()
        self._apply_column_filters()
        self._apply_custom_filters()
        self._apply_sorting()
        return self

    def _apply_global_filters(self) -> None:
        if not self._global_filters:
            return
        search = self._request_filter.get("search", "")
        if is_empty_search_value(search):
            return

        self._query.where_group(
            lambda group: _apply_all(self._global_filters, group, search)
        )

    def _apply_column_filters(self) -> None:
        if not self._column_filters:
            return

        self._query.where_group(
            lambda group: _apply_all(self._column_filters, group, self._request_filter)
        )

    def _apply_custom_filters(self) -> None:
        _apply_all(self._custom_filters, self._query, self._request_filter)

    def _apply_sorting(self) -> None:
        for field in self._sort_by:
            self._query.order_by(field.key, field.direction)

    # -- terminal operations -------------------------------------------------

    def apply(self) -> Page[Any]:
        """Paginate the filtered query."""
        return self._query.paginate(self._items_per_page, self._page)

    def expects_download(self) -> bool:
        return self._download and bool(self._download_columns)

    def render(self) -> Any:
        """Return exported rows, a shaped envelope, or the raw page."""
        if self.expects_download():
            return self._apply_download()

        page = self.apply()
        if self._resource_mapper is None:
            return page

        shaped = self._resource_mapper.collection(page.items)
        return PaginatedEnvelope.from_page(page, list(shaped.collection))

    def _apply_download(self) -> list[Any]:
        rows = self._query.fetch_all()
        if self._download_mapper is not None:
            rows = [self._download_mapper(row) for row in rows]
        logger.info(
            "Exported %d rows (columns=%s)",
            len(rows),
            ", ".join(self._download_columns),
        )
        return rows

    # -- accessors -----------------------------------------------------------

    @property
    def query(self) -> IQuery:
        return self._query

    @property
    def config(self) -> DataTableConfig:
        return self._config

    @property
    def page(self) -> int:
        return self._page

    @property
    def items_per_page(self) -> int:
        return self._items_per_page

    @property
    def sort_by(self) -> list[SortField]:
        return list(self._sort_by)

    @property
    def resource_mapper(self) -> type[Any] | None:
        return self._resource_mapper

    @property
    def global_filters(self) -> list[GlobalFilter]:
        return list(self._global_filters)

    @property
    def column_filters(self) -> list[ColumnFilter]:
        return list(self._column_filters)

    @property
    def custom_filters(self) -> list[CustomFilter]:
        return list(self._custom_filters)

    @property
    def request_filter(self) -> dict[str, Any]:
        return dict(self._request_filter)

    @property
    def download_columns(self) -> list[str]:
        return list(self._download_columns)

    @property
    def download_mapper(self) -> Callable[[Any], Any] | None:
        return self._download_mapper


def _apply_all(filters: Iterable[IFilter], query: IQuery, data: Any) -> None:
    for search_filter in filters:
        search_filter.apply(query, data)


def _require_all(filters: Iterable[Any], kind: type[F], parameter: str) -> list[F]:
    items = list(filters)
    for item in items:
        if not isinstance(item, kind):
            raise InvalidParameterError(
                f"All {parameter.replace('_', ' ')} must be instances of "
                f"{kind.__name__}, got {type(item).__name__}",
                parameter=parameter,
            )
    return items


def _parse_sort_entry(entry: Any) -> SortField:
    if isinstance(entry, SortField):
        return entry
    if not isinstance(entry, Mapping) or "key" not in entry or "order" not in entry:
        raise InvalidParameterError(
            'Sort array must contain "key" and "order" fields', parameter="sort_by"
        )
    key = entry["key"]
    if not isinstance(key, str) or not key:
        raise InvalidParameterError(
            "Sort key must be a non-empty string", parameter="sort_by"
        )
    return SortField(key, SortDirection.parse(entry["order"]))


def _parse_request_sort(raw: Any) -> list[SortField]:
    if not raw:
        return []
    if isinstance(raw, str):
        raw = [part.strip() for part in raw.split(",") if part.strip()]
    elif isinstance(raw, Mapping):
        raw = [raw]
    elif not isinstance(raw, (list, tuple)):
        logger.warning("Ignoring sortBy of type %s", type(raw).__name__)
        return []

    fields: list[SortField] = []
    for entry in raw:
        if isinstance(entry, str):
            key = entry.lstrip("-")
            if key:
                direction = (
                    SortDirection.DESC if entry.startswith("-") else SortDirection.ASC
                )
                fields.append(SortField(key, direction))
            continue
        try:
            fields.append(_parse_sort_entry(entry))
        except InvalidParameterError as exc:
            logger.warning("Dropping sort entry %r: %s", entry, exc)
    return fields


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)
