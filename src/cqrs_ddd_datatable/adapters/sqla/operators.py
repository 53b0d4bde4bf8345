"""
SQLAlchemy operator compilation strategy.

Structured in the same strategy pattern as the in-memory evaluator:
each :class:`QueryOperator` compiles through an isolated
:class:`SQLAlchemyOperator` registered on a :class:`SQLAlchemyOperatorRegistry`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, cast

from ...operators import QueryOperator
from ..registry import OperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class SQLAlchemyOperator(ABC):
    """
    Strategy interface for compiling a query operator
    into a SQLAlchemy ``ColumnElement[bool]``.
    """

    @property
    @abstractmethod
    def name(self) -> QueryOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Build a SQLAlchemy filter clause.

        Args:
            column: A column, instrumented attribute or SQL function.
            value: The value given to ``IQuery.where``.
        """
        ...


class SQLAlchemyOperatorRegistry(OperatorRegistry[SQLAlchemyOperator]):
    """Registry of ``SQLAlchemyOperator`` instances keyed by QueryOperator."""

    def apply(
        self, name: QueryOperator, column: Any, value: Any
    ) -> ColumnElement[bool]:
        return self.require(name).apply(column, value)


class EqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.EQ

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is None:
            return cast("ColumnElement[bool]", column.is_(None))
        return cast("ColumnElement[bool]", column == value)


class NotEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.NE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is None:
            return cast("ColumnElement[bool]", column.is_not(None))
        return cast("ColumnElement[bool]", column != value)


class GreaterThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.GT

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column > value)


class LessThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LT

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column < value)


class GreaterEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.GE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column >= value)


class LessEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column <= value)


class LikeOperator(SQLAlchemyOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.like(value))


class NotLikeOperator(SQLAlchemyOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.NOT_LIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", ~column.like(value))


def build_default_sqla_registry() -> SQLAlchemyOperatorRegistry:
    """Create a fresh registry with every built-in operator."""
    registry = SQLAlchemyOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        LessThanOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
        LikeOperator(),
        NotLikeOperator(),
    )
    return registry


DEFAULT_SQLA_REGISTRY = build_default_sqla_registry()
