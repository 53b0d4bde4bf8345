"""ColumnFilter: structured per-column search."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..operators import LogicalOperator, QueryOperator, SearchType
from ..query import lower
from .base import SearchFilter

if TYPE_CHECKING:
    from ..query import IQuery


class ColumnFilter(SearchFilter):
    """Filter on the value stored under this filter's column key.

    The value is looked up in the request's ``filter`` mapping by the
    effective column key (``"user.name"`` reads ``filter["name"]``). A list
    value means set membership; a scalar is compared according to the
    search type. Defaults to a case-sensitive exact match AND'ed with the
    other column filters.
    """

    default_case_insensitive = False
    default_search_type = SearchType.EQUAL
    default_logical_operator = LogicalOperator.AND

    def _extract(self, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return None
        return data.get(self._column_key)

    def _cast(self, value: Any) -> Any:
        assert self._caster is not None
        if isinstance(value, (list, tuple)):
            return [self._caster(item) for item in value]
        return self._caster(value)

    def _apply_direct(
        self, query: IQuery, value: Any, boolean: LogicalOperator
    ) -> None:
        if isinstance(value, (list, tuple)):
            self._apply_set(query, list(value), boolean)
            return

        term = (
            value
            if self._search_type is SearchType.EQUAL
            else self._search_type.pattern(value)
        )
        # Non-string cast results are compared as-is.
        if self._case_insensitive and isinstance(value, str):
            term = term.lower()
        self._compare(query, term, boolean)

    def _apply_set(
        self, query: IQuery, values: list[Any], boolean: LogicalOperator
    ) -> None:
        if not self._case_insensitive:
            query.where_in(self._column_key, values, boolean)
            return

        lowered = [item.lower() if isinstance(item, str) else item for item in values]
        column = lower(self._column_key)

        def any_of(group: IQuery) -> None:
            for index, item in enumerate(lowered):
                group.where(
                    column,
                    QueryOperator.EQ,
                    item,
                    LogicalOperator.AND if index == 0 else LogicalOperator.OR,
                )

        query.where_group(any_of, boolean)
