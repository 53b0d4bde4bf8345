"""
SqlAlchemyQuery: ``IQuery`` compiled into a SQLAlchemy 2.0 ``Select``.

Each ``where*`` call compiles immediately into a ``ColumnElement[bool]``
through the operator registry. Relation scopes compile into
``relationship.any()`` for collections and ``relationship.has()`` for
scalar relations. Dotted column names (``profile.name``) are traversed
the same way.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from sqlalchemy import and_, asc, desc, func, or_, select
from sqlalchemy import inspect as sa_inspect

from ...exceptions import ColumnNotFoundError, RelationNotFoundError
from ...operators import LogicalOperator, QueryOperator, SortDirection
from ...pagination import Page
from ...query import ColumnRef, SortField, fold_clauses
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.orm import Session

    from .operators import SQLAlchemyOperatorRegistry

logger = logging.getLogger("cqrs_ddd.datatable.sqla")

T = TypeVar("T")


def _all_of(clauses: list[ColumnElement[bool]]) -> ColumnElement[bool]:
    return and_(*clauses)


def _any_of(clauses: list[ColumnElement[bool]]) -> ColumnElement[bool]:
    return or_(*clauses)


class SqlAlchemyQuery(Generic[T]):
    """
    Mutable query over one mapped model.

    Usage::

        with Session(engine) as session:
            query = SqlAlchemyQuery(session, UserRecord, path="/users")
            service = DataTableService(query)
            service.set_global_filters([GlobalFilter("name")])
            service.fill_from_request(request_params)
            page = service.apply()

    Args:
        session: Session used by ``paginate`` and ``fetch_all``. Nested
            scopes never execute and receive ``None``.
        model: The mapped class rows are selected from.
        registry: Optional custom operator registry. Falls back to
            ``DEFAULT_SQLA_REGISTRY``.
        path: Base URL passed on to the returned ``Page``.
    """

    def __init__(
        self,
        session: Session | None,
        model: type[T],
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
        path: str = "/",
    ) -> None:
        self._session = session
        self._model = model
        self._registry = registry or DEFAULT_SQLA_REGISTRY
        self._path = path
        self._clauses: list[tuple[LogicalOperator, ColumnElement[bool]]] = []
        self._orders: list[SortField] = []

    @property
    def model(self) -> type[T]:
        return self._model

    def _scope(self, model: type[Any]) -> SqlAlchemyQuery[Any]:
        return SqlAlchemyQuery(None, model, registry=self._registry, path=self._path)

    def _add(
        self, boolean: LogicalOperator | str, clause: ColumnElement[bool]
    ) -> None:
        self._clauses.append((LogicalOperator.parse(boolean), clause))

    # -- model introspection -------------------------------------------------

    def _column(self, name: str) -> Any:
        mapper = sa_inspect(self._model)
        if name not in mapper.column_attrs:
            raise ColumnNotFoundError(
                name, self._model.__name__, list(mapper.column_attrs.keys())
            )
        return getattr(self._model, name)

    def _relationship(self, name: str) -> Any:
        mapper = sa_inspect(self._model)
        if name not in mapper.relationships:
            raise RelationNotFoundError(
                name, self._model.__name__, list(mapper.relationships.keys())
            )
        return getattr(self._model, name)

    def _expression(self, ref: ColumnRef) -> Any:
        column = self._column(ref.name)
        return func.lower(column) if ref.case_folded else column

    def _nested(
        self,
        ref: ColumnRef,
        boolean: LogicalOperator | str,
        build: Callable[[SqlAlchemyQuery[Any], ColumnRef], Any],
    ) -> SqlAlchemyQuery[T]:
        relation, rest = ref.name.split(".", 1)
        inner = ColumnRef(rest, ref.case_folded)
        return self.where_has(relation, lambda scoped: build(scoped, inner), boolean)

    # -- IQuery --------------------------------------------------------------

    def where(
        self,
        column: str | ColumnRef,
        operator: QueryOperator | str,
        value: Any,
        boolean: LogicalOperator | str = LogicalOperator.AND,
    ) -> SqlAlchemyQuery[T]:
        ref = ColumnRef.of(column)
        op = QueryOperator.parse(operator)
        if "." in ref.name:
            return self._nested(
                ref, boolean, lambda scoped, inner: scoped.where(inner, op, value)
            )
        self._add(boolean, self._registry.apply(op, self._expression(ref), value))
        return self

    def where_group(
        self,
        callback: Callable[[Any], Any],
        boolean: LogicalOperator | str = LogicalOperator.AND,
    ) -> SqlAlchemyQuery[T]:
        scope = self._scope(self._model)
        callback(scope)
        criterion = scope.criterion()
        if criterion is not None:
            self._add(boolean, criterion)
        return self

    def where_has(
        self,
        relation: str,
        callback: Callable[[Any], Any] | None = None,
        boolean: LogicalOperator | str = LogicalOperator.AND,
    ) -> SqlAlchemyQuery[T]:
        rel_attr = self._relationship(relation)
        scope = self._scope(rel_attr.property.mapper.class_)
        if callback is not None:
            callback(scope)
        inner = scope.criterion()
        args = () if inner is None else (inner,)

        if rel_attr.property.uselist:
            clause = rel_attr.any(*args)
        else:
            clause = rel_attr.has(*args)
        self._add(boolean, cast("ColumnElement[bool]", clause))
        return self

    def where_in(
        self,
        column: str | ColumnRef,
        values: Iterable[Any],
        boolean: LogicalOperator | str = LogicalOperator.AND,
    ) -> SqlAlchemyQuery[T]:
        ref = ColumnRef.of(column)
        candidates = list(values)
        if "." in ref.name:
            return self._nested(
                ref, boolean, lambda scoped, inner: scoped.where_in(inner, candidates)
            )
        clause = self._expression(ref).in_(candidates)
        self._add(boolean, cast("ColumnElement[bool]", clause))
        return self

    def order_by(
        self,
        column: str,
        direction: SortDirection | str = SortDirection.ASC,
    ) -> SqlAlchemyQuery[T]:
        self._column(column)
        self._orders.append(SortField(column, SortDirection.parse(direction)))
        return self

    def paginate(self, per_page: int, page: int) -> Page[T]:
        session = self._require_session()
        stmt = self.statement()
        total = session.scalar(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        )
        items = list(
            session.scalars(stmt.limit(per_page).offset((page - 1) * per_page))
        )
        logger.debug(
            "Paginated %s: %d of %d rows (page=%d, per_page=%d)",
            self._model.__name__,
            len(items),
            total or 0,
            page,
            per_page,
        )
        return Page(
            items=items,
            total=total or 0,
            per_page=per_page,
            current_page=page,
            path=self._path,
        )

    def fetch_all(self) -> list[T]:
        session = self._require_session()
        return list(session.scalars(self.statement()))

    # -- compilation ---------------------------------------------------------

    def criterion(self) -> ColumnElement[bool] | None:
        """The folded WHERE clause, or ``None`` when nothing was added."""
        return fold_clauses(self._clauses, _all_of, _any_of)

    def statement(self) -> Select[Any]:
        """Compile the accumulated predicates and orderings to a ``Select``."""
        stmt = select(self._model)
        criterion = self.criterion()
        if criterion is not None:
            stmt = stmt.where(criterion)
        order_clauses = [
            desc(getattr(self._model, field.key))
            if field.direction is SortDirection.DESC
            else asc(getattr(self._model, field.key))
            for field in self._orders
        ]
        if order_clauses:
            stmt = stmt.order_by(*order_clauses)
        return stmt

    def _require_session(self) -> Session:
        if self._session is None:
            raise RuntimeError(
                f"{type(self).__name__} for {self._model.__name__} has no session"
            )
        return self._session
