"""Operator strategy registry shared by the query engines."""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar

from ..exceptions import UnsupportedOperatorError
from ..operators import QueryOperator


class NamedOperator(Protocol):
    @property
    def name(self) -> QueryOperator: ...


S = TypeVar("S", bound=NamedOperator)


class OperatorRegistry(Generic[S]):
    """
    Operator strategies keyed by :class:`QueryOperator`.

    Engines subclass this with their strategy type and add the method that
    runs a strategy (``evaluate`` in memory, ``apply`` for SQLAlchemy).
    """

    def __init__(self) -> None:
        self._operators: dict[QueryOperator, S] = {}

    def register(self, operator: S) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: S) -> None:
        for op in operators:
            self.register(op)

    def unregister(self, name: QueryOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: QueryOperator) -> S | None:
        return self._operators.get(name)

    def require(self, name: QueryOperator) -> S:
        """Return the strategy for ``name`` or raise ``UnsupportedOperatorError``."""
        op = self._operators.get(name)
        if op is None:
            raise UnsupportedOperatorError(
                name.value, [supported.value for supported in self._operators]
            )
        return op
