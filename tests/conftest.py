"""Shared fixtures for data-table tests."""

from __future__ import annotations

from typing import Any

import pytest

from cqrs_ddd_datatable.config import DataTableConfig
from cqrs_ddd_datatable.operators import LogicalOperator, QueryOperator, SortDirection
from cqrs_ddd_datatable.pagination import Page
from cqrs_ddd_datatable.query import ColumnRef


class RecordingQuery:
    """
    ``IQuery`` double that records every call as a plain tuple.

    Nested scopes (groups and relation scopes) run their callback against a
    fresh recorder and store its calls inline::

        ("where", "lower(name)", "like", "%jo%", "OR")
        ("group", "AND", [...])
        ("has", "user", "AND", [...])
        ("in", "status", ["a", "b"], "AND")
        ("order", "age", "desc")
    """

    def __init__(self, rows: list[Any] | None = None) -> None:
        self.rows = list(rows or [])
        self.calls: list[tuple[Any, ...]] = []

    def where(
        self,
        column: Any,
        operator: Any,
        value: Any,
        boolean: Any = LogicalOperator.AND,
    ) -> RecordingQuery:
        self.calls.append(
            (
                "where",
                str(ColumnRef.of(column)),
                QueryOperator.parse(operator).value,
                value,
                LogicalOperator.parse(boolean).value,
            )
        )
        return self

    def where_group(self, callback: Any, boolean: Any = LogicalOperator.AND) -> Any:
        scope = RecordingQuery()
        callback(scope)
        self.calls.append(("group", LogicalOperator.parse(boolean).value, scope.calls))
        return self

    def where_has(
        self, relation: str, callback: Any = None, boolean: Any = LogicalOperator.AND
    ) -> RecordingQuery:
        scope = RecordingQuery()
        if callback is not None:
            callback(scope)
        self.calls.append(
            ("has", relation, LogicalOperator.parse(boolean).value, scope.calls)
        )
        return self

    def where_in(
        self, column: Any, values: Any, boolean: Any = LogicalOperator.AND
    ) -> RecordingQuery:
        self.calls.append(
            (
                "in",
                str(ColumnRef.of(column)),
                list(values),
                LogicalOperator.parse(boolean).value,
            )
        )
        return self

    def order_by(
        self, column: str, direction: Any = SortDirection.ASC
    ) -> RecordingQuery:
        self.calls.append(("order", column, SortDirection.parse(direction).value))
        return self

    def paginate(self, per_page: int, page: int) -> Page[Any]:
        self.calls.append(("paginate", per_page, page))
        start = (page - 1) * per_page
        return Page(
            items=self.rows[start : start + per_page],
            total=len(self.rows),
            per_page=per_page,
            current_page=page,
        )

    def fetch_all(self) -> list[Any]:
        self.calls.append(("fetch_all",))
        return list(self.rows)


@pytest.fixture
def recorder() -> RecordingQuery:
    return RecordingQuery()


@pytest.fixture
def users() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "name": "John",
            "email": "john@example.com",
            "age": 30,
            "status": "active",
            "user": {"name": "Admin"},
            "posts": [{"title": "Hello"}, {"title": "Release notes"}],
        },
        {
            "id": 2,
            "name": "jose",
            "email": "jose@example.com",
            "age": 25,
            "status": "inactive",
            "user": {"name": "admin"},
            "posts": [],
        },
        {
            "id": 3,
            "name": "Amy",
            "email": "amy@example.org",
            "age": 41,
            "status": "active",
            "user": {"name": "Guest"},
            "posts": [{"title": "Weekly digest"}],
        },
        {
            "id": 4,
            "name": "Bob",
            "email": None,
            "age": 30,
            "status": "banned",
            "user": None,
            "posts": [],
        },
    ]


@pytest.fixture
def config() -> DataTableConfig:
    return DataTableConfig(default_items_per_page=2, max_items_per_page=50)
