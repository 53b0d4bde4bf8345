"""CustomFilter: caller-supplied procedure with full query access."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import InvalidParameterError

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..query import IQuery


class CustomFilter:
    """Escape hatch for predicates the search filters cannot express.

    The procedure receives the query and the whole request filter mapping
    and is always invoked; it decides for itself whether to add anything::

        CustomFilter(lambda query, data: query.where("active", "=", True))
    """

    def __init__(self, procedure: Callable[[IQuery, Any], Any]) -> None:
        if not callable(procedure):
            raise InvalidParameterError(
                "Custom filter procedure must be callable", parameter="procedure"
            )
        self._procedure = procedure

    @classmethod
    def make(cls, procedure: Callable[[IQuery, Any], Any]) -> CustomFilter:
        return cls(procedure)

    @property
    def procedure(self) -> Callable[[IQuery, Any], Any]:
        return self._procedure

    def apply(self, query: IQuery, data: Any) -> None:
        self._procedure(query, data)

    def __repr__(self) -> str:
        name = getattr(self._procedure, "__qualname__", repr(self._procedure))
        return f"CustomFilter({name})"
