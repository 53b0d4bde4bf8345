"""GlobalFilter: free-text search applied to one column."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..operators import LogicalOperator, SearchType
from .base import SearchFilter

if TYPE_CHECKING:
    from ..query import IQuery


class GlobalFilter(SearchFilter):
    """Match the request's ``search`` term against a column.

    Defaults to a case-insensitive ``contains`` match OR'ed with the other
    global filters, so ``GlobalFilter("name")`` with search ``"Jo"`` adds
    ``lower(name) LIKE '%jo%'``.
    """

    default_case_insensitive = True
    default_search_type = SearchType.CONTAINS
    default_logical_operator = LogicalOperator.OR

    def _extract(self, data: Any) -> Any:
        if isinstance(data, str):
            return data
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return str(data)
        return ""

    def _apply_direct(
        self, query: IQuery, value: Any, boolean: LogicalOperator
    ) -> None:
        term = self._search_type.pattern(value)
        if self._case_insensitive:
            term = term.lower()
        self._compare(query, term, boolean)
