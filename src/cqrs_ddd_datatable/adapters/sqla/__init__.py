"""SQLAlchemy query engine."""

from __future__ import annotations

from .operators import (
    DEFAULT_SQLA_REGISTRY,
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
    build_default_sqla_registry,
)
from .query import SqlAlchemyQuery

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "SqlAlchemyQuery",
    "build_default_sqla_registry",
]
