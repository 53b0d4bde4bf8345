"""Tests for the in-memory query engine."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from cqrs_ddd_datatable import (
    IQuery,
    LogicalOperator,
    QueryOperator,
    SortDirection,
    UnsupportedOperatorError,
    lower,
)
from cqrs_ddd_datatable.adapters.memory import (
    MemoryQuery,
    build_default_registry,
    resolve_field,
)
from cqrs_ddd_datatable.adapters.memory.operators import like_to_regex


def _names(rows) -> list[str]:
    return [row["name"] for row in rows]


@dataclass
class Address:
    city: str


@dataclass
class Person:
    name: str
    address: Address | None = None
    tags: list[Address] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Field resolution
# ---------------------------------------------------------------------------


def test_resolve_field_on_objects_and_mappings() -> None:
    person = Person("Ann", Address("Paris"))
    assert resolve_field(person, "address.city") == "Paris"
    assert resolve_field({"a": {"b": 1}}, "a.b") == 1
    assert resolve_field(Person("Bo"), "address.city") is None


def test_resolve_field_traverses_lists() -> None:
    row = {"posts": [{"title": "a"}, {"title": "b"}]}
    assert resolve_field(row, "posts.title") == ["a", "b"]


def test_resolve_field_continues_past_nested_lists() -> None:
    row = {"team": {"members": [{"tags": [{"label": "x"}]}, {"tags": []}]}}
    assert resolve_field(row, "team.members.tags.label") == [["x"], []]
    assert resolve_field(row, "team.members.name") == [None, None]


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("pattern", "value", "expected"),
    [
        ("%jo%", "major", True),
        ("jo%", "major", False),
        ("%or", "major", True),
        ("j_hn", "john", True),
        ("j_hn", "jhn", False),
        ("a.c", "abc", False),
        ("a.c", "a.c", True),
        ("100%", "100% sure", True),
        ("%Jo%", "john", False),
    ],
)
def test_like_semantics(pattern, value, expected) -> None:
    assert (like_to_regex(pattern).fullmatch(value) is not None) is expected


def test_ordering_operators_never_match_none_or_mixed_types() -> None:
    registry = build_default_registry()
    assert registry.evaluate(QueryOperator.GT, None, 1) is False
    assert registry.evaluate(QueryOperator.LT, "a", 1) is False
    assert registry.evaluate(QueryOperator.GE, 3, 3) is True


def test_like_against_none_never_matches() -> None:
    registry = build_default_registry()
    assert registry.evaluate(QueryOperator.LIKE, None, "%") is False
    assert registry.evaluate(QueryOperator.NOT_LIKE, None, "%") is False


def test_unregistered_operator_raises() -> None:
    registry = build_default_registry()
    registry.unregister(QueryOperator.LIKE)
    assert registry.get(QueryOperator.LIKE) is None
    query = MemoryQuery([{"name": "x"}], registry=registry).where("name", "like", "x")
    with pytest.raises(UnsupportedOperatorError):
        query.fetch_all()


def test_unknown_operator_string_raises_immediately() -> None:
    with pytest.raises(UnsupportedOperatorError):
        MemoryQuery([]).where("name", "contains", "x")


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def test_satisfies_protocol(users) -> None:
    assert isinstance(MemoryQuery(users), IQuery)


def test_where_equal(users) -> None:
    assert _names(MemoryQuery(users).where("status", "=", "active").fetch_all()) == [
        "John",
        "Amy",
    ]


def test_folded_column(users) -> None:
    rows = MemoryQuery(users).where(lower("name"), "like", "jo%").fetch_all()
    assert _names(rows) == ["John", "jose"]


def test_and_binds_tighter_than_or(users) -> None:
    # name = Bob OR (status = active AND age > 35)
    rows = (
        MemoryQuery(users)
        .where("name", "=", "Bob")
        .where("status", "=", "active", LogicalOperator.OR)
        .where("age", ">", 35)
        .fetch_all()
    )
    assert _names(rows) == ["Amy", "Bob"]


def test_where_group_scopes_or(users) -> None:
    rows = (
        MemoryQuery(users)
        .where("age", "=", 30)
        .where_group(
            lambda q: q.where("status", "=", "banned").where(
                "name", "=", "John", LogicalOperator.OR
            )
        )
        .fetch_all()
    )
    assert _names(rows) == ["John", "Bob"]


def test_empty_group_adds_nothing(users) -> None:
    assert len(MemoryQuery(users).where_group(lambda q: None).fetch_all()) == 4


def test_where_has_on_collection(users) -> None:
    rows = (
        MemoryQuery(users)
        .where_has("posts", lambda q: q.where(lower("title"), "like", "%digest%"))
        .fetch_all()
    )
    assert _names(rows) == ["Amy"]


def test_where_has_on_single_relation(users) -> None:
    rows = (
        MemoryQuery(users)
        .where_has("user", lambda q: q.where(lower("name"), "=", "admin"))
        .fetch_all()
    )
    assert _names(rows) == ["John", "jose"]


def test_where_has_without_callback_checks_existence(users) -> None:
    assert _names(MemoryQuery(users).where_has("posts").fetch_all()) == [
        "John",
        "Amy",
    ]
    assert len(MemoryQuery(users).where_has("user").fetch_all()) == 3


def test_where_has_on_objects() -> None:
    people = [Person("Ann", Address("Paris")), Person("Bo")]
    rows = (
        MemoryQuery(people)
        .where_has("address", lambda q: q.where("city", "=", "Paris"))
        .fetch_all()
    )
    assert [p.name for p in rows] == ["Ann"]


def test_where_in(users) -> None:
    rows = MemoryQuery(users).where_in("status", ["banned", "inactive"]).fetch_all()
    assert _names(rows) == ["jose", "Bob"]


def test_where_in_folded(users) -> None:
    rows = MemoryQuery(users).where_in(lower("name"), ["amy", "bob"]).fetch_all()
    assert _names(rows) == ["Amy", "Bob"]


# ---------------------------------------------------------------------------
# Paths crossing collections
# ---------------------------------------------------------------------------

TEAMS = [
    {"id": 1, "team": {"members": [{"name": "Ann"}, {"name": "Bo"}]}},
    {"id": 2, "team": {"members": [{"name": "Cy"}]}},
    {"id": 3, "team": {"members": []}},
    {"id": 4, "team": None},
]


def _ids(rows) -> list[int]:
    return [row["id"] for row in rows]


def test_where_matches_any_value_across_collection() -> None:
    rows = MemoryQuery(TEAMS).where("team.members.name", "=", "Ann").fetch_all()
    assert _ids(rows) == [1]


def test_folded_where_across_collection() -> None:
    rows = (
        MemoryQuery(TEAMS)
        .where_has("team", lambda q: q.where(lower("members.name"), "=", "cy"))
        .fetch_all()
    )
    assert _ids(rows) == [2]


def test_where_in_across_collection() -> None:
    rows = MemoryQuery(TEAMS).where_in("team.members.name", ["Bo", "Cy"]).fetch_all()
    assert _ids(rows) == [1, 2]


def test_where_has_through_nested_collection() -> None:
    rows = (
        MemoryQuery(TEAMS)
        .where_has("team.members", lambda q: q.where("name", "=", "Cy"))
        .fetch_all()
    )
    assert _ids(rows) == [2]
    assert _ids(MemoryQuery(TEAMS).where_has("team.members").fetch_all()) == [1, 2]


# ---------------------------------------------------------------------------
# Ordering and pagination
# ---------------------------------------------------------------------------


def test_multi_key_ordering(users) -> None:
    query = MemoryQuery(users).order_by("age", "desc").order_by("name")
    assert _names(query.fetch_all()) == ["Amy", "Bob", "John", "jose"]
    assert [f.direction for f in query.orders] == [
        SortDirection.DESC,
        SortDirection.ASC,
    ]


def test_none_sorts_first_ascending(users) -> None:
    rows = MemoryQuery(users).order_by("email").fetch_all()
    assert rows[0]["name"] == "Bob"


def test_rows_are_not_mutated(users) -> None:
    snapshot = [row["name"] for row in users]
    MemoryQuery(users).order_by("name", "desc").fetch_all()
    assert [row["name"] for row in users] == snapshot


def test_paginate(users) -> None:
    page = MemoryQuery(users, path="/users").order_by("id").paginate(3, 2)
    assert _names(page.items) == ["Bob"]
    assert page.total == 4
    assert page.current_page == 2
    assert page.last_page == 2
    assert page.path == "/users"


def test_paginate_beyond_last_page_is_empty(users) -> None:
    page = MemoryQuery(users).paginate(10, 5)
    assert page.items == []
    assert page.total == 4
