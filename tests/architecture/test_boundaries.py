"""Package boundary tests: core modules never depend on query engines."""

from pytest_archon import archrule


def test_core_does_not_import_adapters() -> None:
    """
    Filters, the service and the query boundary only know ``IQuery``.
    Concrete engines are plugged in by the caller.
    """
    (
        archrule("core_is_engine_agnostic")
        .match("cqrs_ddd_datatable.filters*")
        .match("cqrs_ddd_datatable.service")
        .match("cqrs_ddd_datatable.query")
        .match("cqrs_ddd_datatable.pagination")
        .should_not_import("cqrs_ddd_datatable.adapters*")
        .check("cqrs_ddd_datatable")
    )


def test_core_does_not_import_sqlalchemy() -> None:
    """SQLAlchemy is confined to ``adapters.sqla``."""
    (
        archrule("sqlalchemy_confined_to_adapter")
        .match("cqrs_ddd_datatable*")
        .exclude("cqrs_ddd_datatable.adapters.sqla*")
        .should_not_import("sqlalchemy*")
        .check("cqrs_ddd_datatable")
    )


def test_memory_adapter_is_independent_of_sqla() -> None:
    """The in-memory engine must not pull SQLAlchemy in."""
    (
        archrule("memory_adapter_independence")
        .match("cqrs_ddd_datatable.adapters.memory*")
        .should_not_import("cqrs_ddd_datatable.adapters.sqla*")
        .check("cqrs_ddd_datatable")
    )
