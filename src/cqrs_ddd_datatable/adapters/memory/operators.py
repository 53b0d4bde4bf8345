"""
In-memory operator evaluation strategy.

Each :class:`QueryOperator` maps to an isolated :class:`MemoryOperator`
with a single ``evaluate`` method. New operators are added by
subclassing and registering on a :class:`MemoryOperatorRegistry`.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

from ...operators import QueryOperator
from ..registry import OperatorRegistry


class MemoryOperator(ABC):
    """Strategy interface for in-memory operator evaluation."""

    @property
    @abstractmethod
    def name(self) -> QueryOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        """
        Evaluate the operator against concrete values.

        Args:
            field_value: The value resolved from the row.
            condition_value: The value given to ``IQuery.where``.
        """
        ...


class MemoryOperatorRegistry(OperatorRegistry[MemoryOperator]):
    """
    Registry of MemoryOperator instances keyed by QueryOperator.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register(EqualOperator())

        registry.evaluate(QueryOperator.EQ, actual, expected)
    """

    def evaluate(
        self, name: QueryOperator, field_value: Any, condition_value: Any
    ) -> bool:
        return self.require(name).evaluate(field_value, condition_value)


@lru_cache(maxsize=256)
def like_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a SQL LIKE pattern: ``%`` is any run, ``_`` one character."""
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


class EqualOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value == condition_value)


class NotEqualOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.NE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value != condition_value)


class _OrderingOperator(MemoryOperator):
    """Comparisons against ``None`` never match, as in SQL."""

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None or condition_value is None:
            return False
        try:
            return self._compare(field_value, condition_value)
        except TypeError:
            return False

    @abstractmethod
    def _compare(self, left: Any, right: Any) -> bool: ...


class GreaterThanOperator(_OrderingOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.GT

    def _compare(self, left: Any, right: Any) -> bool:
        return bool(left > right)


class LessThanOperator(_OrderingOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LT

    def _compare(self, left: Any, right: Any) -> bool:
        return bool(left < right)


class GreaterEqualOperator(_OrderingOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.GE

    def _compare(self, left: Any, right: Any) -> bool:
        return bool(left >= right)


class LessEqualOperator(_OrderingOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LE

    def _compare(self, left: Any, right: Any) -> bool:
        return bool(left <= right)


class LikeOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        match = like_to_regex(str(condition_value)).fullmatch(str(field_value))
        return match is not None


class NotLikeOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.NOT_LIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        match = like_to_regex(str(condition_value)).fullmatch(str(field_value))
        return match is None


def build_default_registry() -> MemoryOperatorRegistry:
    """Create a fresh registry with every built-in operator."""
    registry = MemoryOperatorRegistry()
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
