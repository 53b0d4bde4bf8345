"""Tests for Page and request value coercion."""

from __future__ import annotations

import pytest

from cqrs_ddd_datatable import Page, coerce_page, coerce_per_page


def test_middle_page_navigation() -> None:
    page = Page(
        items=[11, 12, 13], total=25, per_page=10, current_page=2, path="/users"
    )
    assert page.last_page == 3
    assert page.first_item == 11
    assert page.last_item == 13
    assert page.has_more_pages is True
    assert page.first_page_url == "/users?page=1"
    assert page.last_page_url == "/users?page=3"
    assert page.next_page_url == "/users?page=3"
    assert page.previous_page_url == "/users?page=1"


def test_last_page_has_no_next() -> None:
    page = Page(items=[21], total=21, per_page=10, current_page=3)
    assert page.has_more_pages is False
    assert page.next_page_url is None


def test_first_page_has_no_previous() -> None:
    assert Page(items=[1], total=1).previous_page_url is None


def test_empty_result() -> None:
    page = Page(items=[], total=0, per_page=10)
    assert page.last_page == 1
    assert page.first_item is None
    assert page.last_item is None


def test_url_appends_to_existing_query_string() -> None:
    page = Page(items=[], total=30, path="/users?sort=name")
    assert page.url(2) == "/users?sort=name&page=2"
    assert page.url(0) == "/users?sort=name&page=1"


def test_to_dict_envelope() -> None:
    page = Page(items=["a", "b"], total=3, per_page=2, path="/p")
    assert page.to_dict() == {
        "current_page": 1,
        "data": ["a", "b"],
        "first_page_url": "/p?page=1",
        "from": 1,
        "last_page": 2,
        "last_page_url": "/p?page=2",
        "next_page_url": "/p?page=2",
        "path": "/p",
        "per_page": 2,
        "prev_page_url": None,
        "to": 2,
        "total": 3,
    }


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("3", 3), (4, 4), ("0", 1), ("-5", 1), ("abc", 1), (None, 1), ([], 1)],
)
def test_coerce_page(raw, expected) -> None:
    assert coerce_page(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("25", 25), ("500", 100), ("0", 1), ("x", 10), (None, 10), (100, 100)],
)
def test_coerce_per_page(raw, expected) -> None:
    assert coerce_per_page(raw, default=10, max_per_page=100) == expected
