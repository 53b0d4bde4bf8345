"""
IQuery: the query-mutation boundary consumed by filters and the service.

Filters never build SQL. They describe predicates through this protocol
and each backend (``adapters.memory``, ``adapters.sqla``) compiles the
calls into its native form::

    query.where(lower("name"), "like", "%jo%", LogicalOperator.OR)
    query.where_has("user", lambda q: q.where("name", "=", "Admin"))
    query.where_in("status", ["draft", "published"])
    query.order_by("age", SortDirection.DESC)

Predicates accumulate in call order and are folded with SQL textual
precedence: AND binds tighter than OR, so ``a OR b AND c`` means
``a OR (b AND c)``. The combinator of the first predicate in a scope
is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    NamedTuple,
    Protocol,
    TypeVar,
    runtime_checkable,
)

from .operators import LogicalOperator, SortDirection

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from .operators import QueryOperator
    from .pagination import Page

C = TypeVar("C")


@dataclass(frozen=True)
class ColumnRef:
    """Structured column reference, optionally folded to lower case."""

    name: str
    case_folded: bool = False

    @classmethod
    def of(cls, column: str | ColumnRef) -> ColumnRef:
        return column if isinstance(column, ColumnRef) else cls(column)

    def __str__(self) -> str:
        return f"lower({self.name})" if self.case_folded else self.name


def lower(column: str | ColumnRef) -> ColumnRef:
    """Return a case-folded reference to ``column``."""
    return ColumnRef(ColumnRef.of(column).name, case_folded=True)


class SortField(NamedTuple):
    key: str
    direction: SortDirection = SortDirection.ASC


@runtime_checkable
class IQuery(Protocol):
    """Minimal mutable query surface required by the data-table core."""

    def where(
        self,
        column: str | ColumnRef,
        operator: QueryOperator | str,
        value: Any,
        boolean: LogicalOperator = LogicalOperator.AND,
    ) -> IQuery:
        """Add a single comparison predicate."""
        ...

    def where_group(
        self,
        callback: Callable[[IQuery], Any],
        boolean: LogicalOperator = LogicalOperator.AND,
    ) -> IQuery:
        """Scope the predicates added by ``callback`` under one combinator."""
        ...

    def where_has(
        self,
        relation: str,
        callback: Callable[[IQuery], Any] | None = None,
        boolean: LogicalOperator = LogicalOperator.AND,
    ) -> IQuery:
        """Require a related row satisfying ``callback``'s predicates to exist."""
        ...

    def where_in(
        self,
        column: str | ColumnRef,
        values: Iterable[Any],
        boolean: LogicalOperator = LogicalOperator.AND,
    ) -> IQuery:
        """Add a set-membership predicate."""
        ...

    def order_by(
        self,
        column: str,
        direction: SortDirection | str = SortDirection.ASC,
    ) -> IQuery:
        """Append one ordering clause; earlier clauses take precedence."""
        ...

    def paginate(self, per_page: int, page: int) -> Page[Any]:
        """Execute with offset/limit pagination."""
        ...

    def fetch_all(self) -> list[Any]:
        """Execute without pagination and return every matching row."""
        ...


def fold_clauses(
    clauses: Sequence[tuple[LogicalOperator, C]],
    all_of: Callable[[list[C]], C],
    any_of: Callable[[list[C]], C],
) -> C | None:
    """Fold ``(combinator, clause)`` pairs with AND-over-OR precedence.

    Returns ``None`` for an empty sequence. Single-member groups are passed
    through unwrapped.
    """
    if not clauses:
        return None
    groups: list[list[C]] = [[clauses[0][1]]]
    for boolean, clause in clauses[1:]:
        if boolean is LogicalOperator.OR:
            groups.append([clause])
        else:
            groups[-1].append(clause)
    conjunctions = [
        group[0] if len(group) == 1 else all_of(group) for group in groups
    ]
    if len(conjunctions) == 1:
        return conjunctions[0]
    return any_of(conjunctions)
