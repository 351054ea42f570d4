"""
QueryRunner — executes a script statement by statement and records a status for each.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional, Union

from carsql.data.schemas import Ack, ResultSet, Statement
from carsql.data.store import CarStore
from carsql.errors import QueryError, SchemaError


class Status:
    OK = "ok"
    EXISTS = "exists"
    FAILED = "failed"


@dataclass
class StatementStatus:
    statement: Statement
    status: str
    error: Optional[str] = None
    error_type: Optional[str] = None
    rows: Optional[int] = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status != Status.FAILED


@dataclass
class RunReport:
    """Per-statement statuses plus the result sets of read/introspection statements."""
    statuses: list[StatementStatus] = field(default_factory=list)
    results: list[tuple[Statement, ResultSet]] = field(default_factory=list)

    @property
    def failed(self) -> list[StatementStatus]:
        return [s for s in self.statuses if not s.ok]

    @property
    def schema_errors(self) -> list[StatementStatus]:
        return [s for s in self.failed if s.error_type == SchemaError.__name__]

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


class QueryRunner:
    """Runs statements against a CarStore, one at a time, in order."""

    def __init__(self, store: CarStore) -> None:
        self.store = store
        self.report = RunReport()

    def run(self, statement: Statement | str) -> Union[ResultSet, Ack, None]:
        """Run one statement. Failures are recorded, not raised."""
        if isinstance(statement, str):
            statement = Statement(sql=statement, index=len(self.report.statuses) + 1)

        started = time.perf_counter()
        try:
            outcome = self.store.run(statement.sql)
        except QueryError as exc:
            self.report.statuses.append(StatementStatus(
                statement=statement,
                status=Status.FAILED,
                error=str(exc),
                error_type=type(exc).__name__,
                elapsed_ms=(time.perf_counter() - started) * 1000,
            ))
            print(f"  [{statement.index}] FAILED {type(exc).__name__}: {exc}")
            return None

        elapsed = (time.perf_counter() - started) * 1000
        if isinstance(outcome, Ack):
            status = Status.OK if outcome.created else Status.EXISTS
            self.report.statuses.append(StatementStatus(statement, status, elapsed_ms=elapsed))
        else:
            self.report.statuses.append(StatementStatus(statement, Status.OK, rows=len(outcome), elapsed_ms=elapsed))
            self.report.results.append((statement, outcome))
        return outcome

    def run_script(self, statements: list[Statement], on_result=None) -> RunReport:
        """Run every statement once, in order.

        on_result(statement, result_set) is called after each read or
        introspection statement, e.g. to print it.
        """
        for stmt in statements:
            outcome = self.run(stmt)
            if on_result and isinstance(outcome, ResultSet):
                on_result(stmt, outcome)
        return self.report
