"""Shared configuration and application logic for search filters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypeVar, runtime_checkable

from ..exceptions import InvalidParameterError
from ..operators import LogicalOperator, QueryOperator, SearchType
from ..query import ColumnRef, lower

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..query import IQuery

logger = logging.getLogger("cqrs_ddd.datatable.filters")

F = TypeVar("F", bound="SearchFilter")


@runtime_checkable
class IFilter(Protocol):
    """Anything that can mutate a query given the request's filter data."""

    def apply(self, query: IQuery, data: Any) -> None: ...


def is_empty_search_value(value: Any) -> bool:
    """Return True when ``value`` should not produce a predicate.

    ``None``, ``""`` and empty lists are empty. ``"0"``, ``0`` and ``False``
    are real values and are kept.
    """
    if value is None:
        return True
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    if isinstance(value, str):
        return value == ""
    return False


class SearchFilter(ABC):
    """
    Column-bound filter configured through chained setters.

    A ``relation.column`` key splits once on the first dot: the prefix
    becomes the relation and the predicate is applied inside a
    relation-existence scope. ``"user.profile.name"`` scopes to ``user``
    and filters on ``profile.name``.
    """

    default_case_insensitive: ClassVar[bool]
    default_search_type: ClassVar[SearchType]
    default_logical_operator: ClassVar[LogicalOperator]

    def __init__(self, column_key: str) -> None:
        if not isinstance(column_key, str) or not column_key:
            raise InvalidParameterError(
                "Column key must be a non-empty string", parameter="column_key"
            )
        relation, separator, column = column_key.partition(".")
        if separator:
            self._relation = relation
            self._column_key = column
        else:
            self._relation = ""
            self._column_key = column_key
        self._case_insensitive = self.default_case_insensitive
        self._search_type = self.default_search_type
        self._logical_operator = self.default_logical_operator
        self._caster: Callable[[Any], Any] | None = None

    @classmethod
    def make(cls: type[F], column_key: str) -> F:
        return cls(column_key)

    # -- configuration -------------------------------------------------------

    def case_insensitive(self: F, enabled: bool = True) -> F:
        self._case_insensitive = bool(enabled)
        return self

    def with_search_type(self: F, search_type: SearchType | str) -> F:
        self._search_type = SearchType.parse(search_type)
        return self

    def with_caster(self: F, caster: Callable[[Any], Any]) -> F:
        if not callable(caster):
            raise InvalidParameterError("Caster must be callable", parameter="caster")
        self._caster = caster
        return self

    def with_logical_operator(self: F, operator: LogicalOperator | str) -> F:
        self._logical_operator = LogicalOperator.parse(operator)
        return self

    # -- accessors -----------------------------------------------------------

    @property
    def column_key(self) -> str:
        return self._column_key

    @property
    def relation(self) -> str:
        return self._relation

    @property
    def is_case_insensitive(self) -> bool:
        return self._case_insensitive

    @property
    def search_type(self) -> SearchType:
        return self._search_type

    @property
    def logical_operator(self) -> LogicalOperator:
        return self._logical_operator

    @property
    def caster(self) -> Callable[[Any], Any] | None:
        return self._caster

    # -- application ---------------------------------------------------------

    def apply(self, query: IQuery, data: Any) -> None:
        value = self._extract(data)
        if self._caster is not None:
            value = self._cast(value)

        if is_empty_search_value(value):
            logger.debug(
                "%s on %r skipped: empty search value",
                type(self).__name__,
                self._column_key,
            )
            return

        if self._relation:
            # The scope holds one predicate, so its own combinator is AND.
            query.where_has(
                self._relation,
                lambda scoped: self._apply_direct(scoped, value, LogicalOperator.AND),
                self._logical_operator,
            )
        else:
            self._apply_direct(query, value, self._logical_operator)

    @abstractmethod
    def _extract(self, data: Any) -> Any:
        """Pull the raw search value for this filter out of ``data``."""

    @abstractmethod
    def _apply_direct(
        self, query: IQuery, value: Any, boolean: LogicalOperator
    ) -> None:
        """Add the predicate for ``value`` against the bare column."""

    def _cast(self, value: Any) -> Any:
        assert self._caster is not None
        return self._caster(value)

    def _search_column(self) -> ColumnRef:
        if self._case_insensitive:
            return lower(self._column_key)
        return ColumnRef(self._column_key)

    def _compare(self, query: IQuery, value: Any, boolean: LogicalOperator) -> None:
        operator = (
            QueryOperator.EQ
            if self._search_type is SearchType.EQUAL
            else QueryOperator.LIKE
        )
        logger.debug(
            "%s adds %s %s %r (%s)",
            type(self).__name__,
            self._search_column(),
            operator.value,
            value,
            boolean.value,
        )
        query.where(self._search_column(), operator, value, boolean)

    def __repr__(self) -> str:
        key = (
            f"{self._relation}.{self._column_key}"
            if self._relation
            else self._column_key
        )
        return (
            f"{type(self).__name__}({key!r}, search_type={self._search_type.value}, "
            f"case_insensitive={self._case_insensitive}, "
            f"logical={self._logical_operator.value})"
        )
