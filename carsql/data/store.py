"""
CarStore — file-backed SQLite catalog holding the base table and its artifacts.

The engine does all the relational work; this class loads the base table,
dispatches statements by class and maps engine errors onto the project's
exception hierarchy.
"""
from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd
from sqlalchemy import Float, Integer, Text, create_engine, inspect, text
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import StatementError
from sqlalchemy.pool import NullPool

from carsql.config import BASE_TABLE, COLUMN_TYPES, DB_PATH, SPECS_TABLE
from carsql.data.loader import load_csv
from carsql.data.schemas import Ack, LoadResult, ResultSet, Statement, StatementKind, classify
from carsql.errors import (
    ArtifactExistsError,
    QueryError,
    ReadOnlyError,
    SchemaError,
)

_SQL_TYPES = {"INTEGER": Integer(), "TEXT": Text(), "REAL": Float()}

_SCHEMA_ERROR_MARKERS = (
    "no such column",
    "no such table",
    "no such view",
    "no such index",
    "has no column named",
)


def translate_error(exc: StatementError, sql: str) -> QueryError:
    """Map a SQLAlchemy/DBAPI error onto SchemaError, ArtifactExistsError, etc."""
    orig = getattr(exc, "orig", None)
    msg = str(orig) if orig is not None else str(exc)
    low = msg.lower()
    if "already exists" in low:
        return ArtifactExistsError(msg, sql)
    if any(m in low for m in _SCHEMA_ERROR_MARKERS):
        return SchemaError(msg, sql)
    if "readonly" in low or "read-only" in low:
        return ReadOnlyError(msg, sql)
    return QueryError(msg, sql)


class CarStore:
    """Car sales catalog: base table, derived table, view and indexes in one file."""

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine: Engine = create_engine(URL.create("sqlite", database=str(self.db_path)))
        # Touch the file so the read-only engine can open it
        with self.engine.connect():
            pass
        # Read queries go through a read-only connection so they cannot mutate
        # as_uri() percent-encodes "#", "?" and "%" in the path
        ro_uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        self.read_engine: Engine = create_engine(
            "sqlite://",
            creator=lambda: sqlite3.connect(ro_uri, uri=True, check_same_thread=False),
            poolclass=NullPool,
        )
        self.last_load: Optional[LoadResult] = None

    def close(self) -> None:
        self.engine.dispose()
        self.read_engine.dispose()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, csv_path: str | Path, replace: bool = False) -> "CarStore":
        """Load the CSV into the base table.

        An existing base table is reused unless ``replace`` is set. Replacing
        also drops the derived table so the next script run rebuilds it.
        """
        if self.is_loaded and not replace:
            print(f"  Reusing {BASE_TABLE} in {self.db_path.name} ({self.row_count():,} rows)")
            return self

        print("Loading car sales data...")
        result = load_csv(csv_path)
        with self.engine.begin() as conn:
            conn.exec_driver_sql(f"DROP TABLE IF EXISTS {SPECS_TABLE}")
            result.frame.to_sql(
                BASE_TABLE,
                conn,
                if_exists="replace",
                index=False,
                dtype={c: _SQL_TYPES[t] for c, t in COLUMN_TYPES.items()},
                chunksize=10_000,
            )
        self.last_load = result
        print(f"  Loaded {result.rows_loaded:,} rows into {BASE_TABLE} ({result.errors:,} rejected)")
        return self

    @property
    def is_loaded(self) -> bool:
        return BASE_TABLE in self.tables()

    # ------------------------------------------------------------------
    # Statement execution
    # ------------------------------------------------------------------

    def run(self, sql: str, params: dict[str, Any] | None = None) -> Union[ResultSet, Ack]:
        """Execute one statement, dispatching on its class."""
        kind = classify(sql)
        if kind == StatementKind.READ:
            return self.query(sql, params)
        if kind == StatementKind.INTROSPECTION:
            return self._fetch(self.engine, sql, params)
        if kind == StatementKind.SCHEMA:
            return self._execute_schema(sql)
        raise ReadOnlyError("Only SELECT, CREATE and PRAGMA statements are supported", sql)

    def query(self, sql: str, params: dict[str, Any] | None = None) -> ResultSet:
        """Run a read query on the read-only connection."""
        if classify(sql) != StatementKind.READ:
            raise ReadOnlyError("Not a read query", sql)
        return self._fetch(self.read_engine, sql, params)

    def _fetch(self, engine: Engine, sql: str, params: dict[str, Any] | None) -> ResultSet:
        with engine.connect() as conn:
            try:
                result = self._execute(conn, sql, params)
                frame = pd.DataFrame(result.fetchall(), columns=list(result.keys()), dtype=object)
            except StatementError as exc:
                raise translate_error(exc, sql) from exc
        return ResultSet(frame=frame, sql=sql)

    def _execute_schema(self, sql: str) -> Ack:
        artifact_type, name = Statement(sql).artifact or ("", "")
        existed = bool(name) and self.has_artifact(artifact_type, name)
        try:
            with self.engine.begin() as conn:
                self._execute(conn, sql, None)
        except StatementError as exc:
            err = translate_error(exc, sql)
            if isinstance(err, ArtifactExistsError):
                return Ack(sql=sql, artifact_type=artifact_type, name=name, created=False)
            raise err from exc
        return Ack(sql=sql, artifact_type=artifact_type, name=name, created=not existed)

    @staticmethod
    def _execute(conn: Connection, sql: str, params: dict[str, Any] | None):
        if params:
            return conn.execute(text(sql), params)
        # Raw driver SQL: script text may contain ':' inside literals
        return conn.exec_driver_sql(sql)

    # ------------------------------------------------------------------
    # Catalog introspection
    # ------------------------------------------------------------------

    def tables(self) -> list[str]:
        return sorted(inspect(self.engine).get_table_names())

    def views(self) -> list[str]:
        return sorted(inspect(self.engine).get_view_names())

    def indexes(self, table: str = BASE_TABLE) -> list[dict]:
        """Secondary indexes on ``table``: [{name, columns, unique}]."""
        if table not in self.tables():
            return []
        return [
            {"name": ix["name"], "columns": list(ix["column_names"]), "unique": bool(ix["unique"])}
            for ix in inspect(self.engine).get_indexes(table)
        ]

    def columns(self, table: str = BASE_TABLE) -> list[str]:
        if table not in self.tables() and table not in self.views():
            raise SchemaError(f"no such table: {table}")
        return [c["name"] for c in inspect(self.engine).get_columns(table)]

    def has_artifact(self, artifact_type: str, name: str) -> bool:
        if artifact_type == "table":
            return name in self.tables()
        if artifact_type == "view":
            return name in self.views()
        if artifact_type == "index":
            return any(ix["name"] == name for t in self.tables() for ix in self.indexes(t))
        return False

    def row_count(self, table: str = BASE_TABLE) -> int:
        if not self.is_loaded and table == BASE_TABLE:
            return 0
        result = self.query(f"SELECT COUNT(*) AS n FROM {table}")
        return int(result.frame["n"].iloc[0])
