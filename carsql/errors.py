"""
Exception hierarchy for loading and statement execution.
"""
from __future__ import annotations


class CarSqlError(Exception):
    """Base class for all project errors."""


class LoadError(CarSqlError):
    """The input file cannot be loaded at all (missing file, missing columns)."""


class QueryError(CarSqlError):
    """A statement failed inside the engine."""

    def __init__(self, message: str, sql: str | None = None) -> None:
        super().__init__(message)
        self.sql = sql


class SchemaError(QueryError):
    """Statement references a column or table absent from the catalog."""


class ArtifactExistsError(QueryError):
    """CREATE of a table/view/index that already exists."""


class ReadOnlyError(QueryError):
    """A mutating statement was submitted where only reads are allowed."""
