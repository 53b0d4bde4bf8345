"""
Output shaping for paginated results.

A :class:`Resource` turns one row into its public representation.
The service resolves a resource by reference (class, registered name or
import path), shapes the page's rows through ``Resource.collection`` and
wraps them in a :class:`PaginatedEnvelope`.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidParameterError
from .pagination import Page


class Resource:
    """Shape a single row for output.

    Subclasses override :meth:`to_dict`::

        class UserResource(Resource):
            def to_dict(self) -> dict[str, Any]:
                return {"id": self.resource.id, "name": self.resource.name}
    """

    def __init__(self, resource: Any) -> None:
        self.resource = resource

    def to_dict(self) -> dict[str, Any]:
        row = self.resource
        if isinstance(row, Mapping):
            return dict(row)
        if isinstance(row, BaseModel):
            return row.model_dump()
        return {
            key: value for key, value in vars(row).items() if not key.startswith("_")
        }

    @classmethod
    def collection(cls, rows: Iterable[Any]) -> ResourceCollection:
        return ResourceCollection(cls, rows)


class ResourceCollection:
    """A list of resources of one type."""

    def __init__(self, resource_class: type[Resource], rows: Iterable[Any]) -> None:
        self.resource_class = resource_class
        self.resources = [resource_class(row) for row in rows]

    @property
    def collection(self) -> list[dict[str, Any]]:
        return [resource.to_dict() for resource in self.resources]

    def __len__(self) -> int:
        return len(self.resources)


class ResourceRegistry:
    """
    Registry of resource classes keyed by name.

    Usage::

        resources = ResourceRegistry()
        resources.register("users", UserResource)

        resources.resolve("users")                    # UserResource
        resources.resolve("app.resources:UserResource")  # imported
    """

    def __init__(self) -> None:
        self._resources: dict[str, type[Resource]] = {}

    def register(self, name: str, resource_class: type[Resource]) -> None:
        self._resources[name] = resource_class

    def unregister(self, name: str) -> None:
        self._resources.pop(name, None)

    def get(self, name: str) -> type[Resource] | None:
        return self._resources.get(name)

    def has(self, name: str) -> bool:
        return name in self._resources

    @property
    def names(self) -> set[str]:
        return set(self._resources.keys())

    def resolve(self, reference: str | type[Any]) -> type[Any]:
        """Resolve ``reference`` to a class exposing ``collection(rows)``.

        Raises:
            InvalidParameterError: If nothing usable can be found.
        """
        if isinstance(reference, str):
            target = self._resources.get(reference) or _import_path(reference)
        else:
            target = reference
        if target is None or not callable(getattr(target, "collection", None)):
            raise InvalidParameterError(
                f"Resource mapper '{reference}' does not exist",
                parameter="resource_mapper",
            )
        return target


def _import_path(path: str) -> Any:
    """Import ``package.module:Name`` or ``package.module.Name``."""
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    return getattr(module, attr, None)


class PaginatedEnvelope(BaseModel):
    """Page of shaped rows with navigation metadata."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    current_page: int
    data: list[Any]
    first_page_url: str
    from_: int | None = Field(default=None, alias="from")
    last_page: int
    last_page_url: str
    next_page_url: str | None = None
    path: str
    per_page: int
    prev_page_url: str | None = None
    to: int | None = None
    total: int

    @classmethod
    def from_page(cls, page: Page[Any], data: list[Any]) -> PaginatedEnvelope:
        return cls(
            current_page=page.current_page,
            data=data,
            first_page_url=page.first_page_url,
            from_=page.first_item,
            last_page=page.last_page,
            last_page_url=page.last_page_url,
            next_page_url=page.next_page_url,
            path=page.path,
            per_page=page.per_page,
            prev_page_url=page.previous_page_url,
            to=page.last_item,
            total=page.total,
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
