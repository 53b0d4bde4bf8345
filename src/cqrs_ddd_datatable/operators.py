"""Search, logical, sort and comparison operators."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .exceptions import InvalidParameterError, UnsupportedOperatorError


class SearchType(str, Enum):
    """How a filter value is matched against a column."""

    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    CONTAINS = "contains"
    EQUAL = "equal"

    @classmethod
    def parse(cls, value: SearchType | str) -> SearchType:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise InvalidParameterError(
                f"Invalid search type '{value}'. Valid types are: {valid}",
                parameter="search_type",
            ) from None

    def pattern(self, value: Any) -> str:
        """Wrap ``value`` in LIKE wildcards for this search type."""
        if self is SearchType.STARTS_WITH:
            return f"{value}%"
        if self is SearchType.ENDS_WITH:
            return f"%{value}"
        if self is SearchType.CONTAINS:
            return f"%{value}%"
        return str(value)


class LogicalOperator(str, Enum):
    """How a predicate combines with the ones before it."""

    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: LogicalOperator | str) -> LogicalOperator:
        if isinstance(value, cls):
            return value
        normalized = str(value).upper()
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidParameterError(
                f"Invalid logical operator '{normalized}'. "
                "Valid operators are: AND, OR",
                parameter="logical_operator",
            ) from None


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: SortDirection | str) -> SortDirection:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidParameterError(
                'Sort order must be "asc" or "desc"', parameter="sort_by"
            ) from None


class QueryOperator(str, Enum):
    """Comparison operators understood by every ``IQuery`` implementation."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    LIKE = "like"
    NOT_LIKE = "not_like"

    @classmethod
    def parse(cls, value: QueryOperator | str) -> QueryOperator:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnsupportedOperatorError(
                str(value), [member.value for member in cls]
            ) from None
