"""Page: length-aware page descriptor, plus request value coercion."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from urllib.parse import urlencode

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results together with the totals needed to navigate.

    Attributes:
        items: Rows on this page.
        total: Number of rows matching the query across all pages.
        per_page: Page size used for the query.
        current_page: 1-based page number.
        path: Base URL used to build navigation links.
        page_name: Query-string parameter carrying the page number.
    """

    items: list[T] = field(default_factory=list)
    total: int = 0
    per_page: int = 10
    current_page: int = 1
    path: str = "/"
    page_name: str = "page"

    @property
    def last_page(self) -> int:
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def first_item(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        first = self.first_item
        if first is None:
            return None
        return first + len(self.items) - 1

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    def url(self, page: int) -> str:
        """Return the URL of ``page`` (clamped to 1)."""
        query = urlencode({self.page_name: max(page, 1)})
        separator = "&" if "?" in self.path else "?"
        return f"{self.path}{separator}{query}"

    @property
    def first_page_url(self) -> str:
        return self.url(1)

    @property
    def last_page_url(self) -> str:
        return self.url(self.last_page)

    @property
    def next_page_url(self) -> str | None:
        if not self.has_more_pages:
            return None
        return self.url(self.current_page + 1)

    @property
    def previous_page_url(self) -> str | None:
        if self.current_page <= 1:
            return None
        return self.url(self.current_page - 1)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the standard paginated envelope."""
        return {
            "current_page": self.current_page,
            "data": list(self.items),
            "first_page_url": self.first_page_url,
            "from": self.first_item,
            "last_page": self.last_page,
            "last_page_url": self.last_page_url,
            "next_page_url": self.next_page_url,
            "path": self.path,
            "per_page": self.per_page,
            "prev_page_url": self.previous_page_url,
            "to": self.last_item,
            "total": self.total,
        }


def coerce_page(raw: Any, default: int = 1) -> int:
    """Parse a page number from client input; never below 1."""
    if raw is None:
        return default
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return default


def coerce_per_page(raw: Any, *, default: int, max_per_page: int) -> int:
    """Parse a page size from client input, clamped to ``[1, max_per_page]``."""
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except (TypeError, ValueError):
            value = default
    return min(max_per_page, max(1, value))
