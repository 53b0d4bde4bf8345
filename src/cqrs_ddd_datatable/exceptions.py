"""
Data-table exception hierarchy.

All exceptions inherit from ``DataTableError`` and provide ``to_dict()``
for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class DataTableError(Exception):
    """Base exception for all data-table errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class InvalidParameterError(DataTableError, ValueError):
    """A filter or service setter received an invalid value.

    Raised synchronously by the setter; the receiving object keeps its
    previous, valid state.
    """

    def __init__(self, message: str, parameter: str | None = None) -> None:
        self.message = message
        self.parameter = parameter
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_PARAMETER",
            "message": self.message,
            "parameter": self.parameter,
        }


class UnsupportedOperatorError(DataTableError):
    """
    Unknown comparison operator passed to a query.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.6)

        message = f"Unsupported operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(sorted(valid_operators))}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATOR",
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": sorted(self.valid_operators),
        }


class ColumnNotFoundError(DataTableError):
    """
    A query referenced a column the underlying model does not map.

    Example error message::

        Invalid column 'nmae' on 'UserRecord'. Did you mean: name?
    """

    def __init__(
        self,
        column: str,
        model_name: str,
        available_columns: list[str],
    ) -> None:
        self.column = column
        self.model_name = model_name
        self.available_columns = available_columns
        self.suggestions = get_close_matches(
            column, available_columns, n=3, cutoff=0.6
        )

        message = f"Invalid column '{column}' on '{model_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "COLUMN_NOT_FOUND",
            "column": self.column,
            "model": self.model_name,
            "suggestions": self.suggestions,
        }


class RelationNotFoundError(DataTableError):
    """A relation-scoped predicate named something that is not a relationship."""

    def __init__(
        self,
        relation: str,
        model_name: str,
        available_relations: list[str],
    ) -> None:
        self.relation = relation
        self.model_name = model_name
        self.available_relations = available_relations
        self.suggestions = get_close_matches(
            relation, available_relations, n=3, cutoff=0.6
        )

        message = f"'{relation}' is not a relationship of '{model_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "RELATION_NOT_FOUND",
            "relation": self.relation,
            "model": self.model_name,
            "suggestions": self.suggestions,
        }
