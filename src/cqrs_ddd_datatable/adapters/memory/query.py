"""MemoryQuery: ``IQuery`` over a list of dicts or objects."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

from ...operators import LogicalOperator, QueryOperator, SortDirection
from ...pagination import Page
from ...query import ColumnRef, SortField, fold_clauses
from .operators import MemoryOperatorRegistry, build_default_registry

logger = logging.getLogger("cqrs_ddd.datatable.memory")

T = TypeVar("T")
Predicate = Callable[[Any], bool]


def resolve_field(obj: Any, attr_path: str) -> Any:
    """
    Resolve a dot-separated attribute path on *obj*.

    Supports mapping keys and attributes (``address.city``) and implicit
    list traversal: once a list is reached, the rest of the path resolves
    on every item, so ``team.members.name`` returns
    ``[member.name for member in team.members]`` and lists nest one level
    per collection crossed.
    """
    return _resolve(obj, attr_path.split("."))


def _resolve(obj: Any, parts: list[str]) -> Any:
    for index, part in enumerate(parts):
        if obj is None:
            return None
        if isinstance(obj, (list, tuple)):
            return [_resolve(item, parts[index:]) for item in obj]
        obj = obj.get(part) if isinstance(obj, dict) else getattr(obj, part, None)
    return obj


def _leaves(value: Any) -> Iterator[Any]:
    if isinstance(value, (list, tuple, set)):
        for item in value:
            yield from _leaves(item)
    else:
        yield value


def _all_of(predicates: list[Predicate]) -> Predicate:
    return lambda row: all(predicate(row) for predicate in predicates)


def _any_of(predicates: list[Predicate]) -> Predicate:
    return lambda row: any(predicate(row) for predicate in predicates)


def _sort_key(value: Any) -> tuple[bool, Any]:
    # NULLs first when ascending.
    return (value is not None, value)


class MemoryQuery(Generic[T]):
    """
    In-memory query used by tests, fixtures and small static data sets.

    Rows are never copied or mutated. Predicates are evaluated lazily when
    the query is paginated or fetched.

    Usage::

        query = MemoryQuery([{"name": "John", "posts": [{"title": "Hi"}]}])
        query.where_has("posts", lambda q: q.where("title", "like", "H%"))
        query.fetch_all()
    """

    def __init__(
        self,
        rows: Iterable[T] = (),
        *,
        registry: MemoryOperatorRegistry | None = None,
        path: str = "/",
    ) -> None:
        self._rows: list[T] = list(rows)
        self._registry = registry or build_default_registry()
        self._path = path
        self._clauses: list[tuple[LogicalOperator, Predicate]] = []
        self._orders: list[SortField] = []

    def _scope(self) -> MemoryQuery[Any]:
        return MemoryQuery(registry=self._registry, path=self._path)

    def _column_values(self, row: Any, column: ColumnRef) -> Iterator[Any]:
        # A path crossing a collection matches when any reached value does.
        for value in _leaves(resolve_field(row, column.name)):
            if column.case_folded and isinstance(value, str):
                yield value.lower()
            else:
                yield value

    # -- IQuery --------------------------------------------------------------

    def where(
        self,
        column: str | ColumnRef,
        operator: QueryOperator | str,
        value: Any,
        boolean: LogicalOperator | str = LogicalOperator.AND,
    ) -> MemoryQuery[T]:
        ref = ColumnRef.of(column)
        op = QueryOperator.parse(operator)

        def predicate(row: Any) -> bool:
            return any(
                self._registry.evaluate(op, actual, value)
                for actual in self._column_values(row, ref)
            )

        self._clauses.append((LogicalOperator.parse(boolean), predicate))
        return self

    def where_group(
        self,
        callback: Callable[[Any], Any],
        boolean: LogicalOperator | str = LogicalOperator.AND,
    ) -> MemoryQuery[T]:
        scope = self._scope()
        callback(scope)
        criterion = scope.criterion()
        if criterion is not None:
            self._clauses.append((LogicalOperator.parse(boolean), criterion))
        return self

    def where_has(
        self,
        relation: str,
        callback: Callable[[Any], Any] | None = None,
        boolean: LogicalOperator | str = LogicalOperator.AND,
    ) -> MemoryQuery[T]:
        scope = self._scope()
        if callback is not None:
            callback(scope)
        inner = scope.criterion() or (lambda _row: True)

        def exists(row: Any) -> bool:
            return any(
                inner(item)
                for item in _leaves(resolve_field(row, relation))
                if item is not None
            )

        self._clauses.append((LogicalOperator.parse(boolean), exists))
        return self

    def where_in(
        self,
        column: str | ColumnRef,
        values: Iterable[Any],
        boolean: LogicalOperator | str = LogicalOperator.AND,
    ) -> MemoryQuery[T]:
        ref = ColumnRef.of(column)
        candidates = list(values)

        def member(row: Any) -> bool:
            return any(
                actual in candidates for actual in self._column_values(row, ref)
            )

        self._clauses.append((LogicalOperator.parse(boolean), member))
        return self

    def order_by(
        self,
        column: str,
        direction: SortDirection | str = SortDirection.ASC,
    ) -> MemoryQuery[T]:
        self._orders.append(SortField(column, SortDirection.parse(direction)))
        return self

    def paginate(self, per_page: int, page: int) -> Page[T]:
        rows = self._matching()
        start = (page - 1) * per_page
        items = rows[start : start + per_page]
        logger.debug(
            "Paginated %d of %d rows (page=%d, per_page=%d)",
            len(items),
            len(rows),
            page,
            per_page,
        )
        return Page(
            items=items,
            total=len(rows),
            per_page=per_page,
            current_page=page,
            path=self._path,
        )

    def fetch_all(self) -> list[T]:
        return self._matching()

    # -- inspection ----------------------------------------------------------

    def criterion(self) -> Predicate | None:
        """The folded predicate, or ``None`` when nothing was added."""
        return fold_clauses(self._clauses, _all_of, _any_of)

    @property
    def orders(self) -> list[SortField]:
        return list(self._orders)

    def _matching(self) -> list[T]:
        criterion = self.criterion()
        rows = [row for row in self._rows if criterion is None or criterion(row)]
        # Stable sorts applied last key first leave the first key primary.
        for field in reversed(self._orders):
            rows.sort(
                key=lambda row, key=field.key: _sort_key(resolve_field(row, key)),
                reverse=field.direction is SortDirection.DESC,
            )
        return rows
