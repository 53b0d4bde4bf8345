"""In-memory query engine."""

from __future__ import annotations

from .operators import MemoryOperator, MemoryOperatorRegistry, build_default_registry
from .query import MemoryQuery, resolve_field

__all__ = [
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "MemoryQuery",
    "build_default_registry",
    "resolve_field",
]
