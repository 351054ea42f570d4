"""
Text rendering of result sets and run status lists.
"""
from __future__ import annotations

from carsql.data.schemas import ResultSet
from carsql.queries.runner import RunReport, Status
from carsql.reports.common import is_null

NULL_TEXT = "NULL"


def format_value(value) -> str:
    if is_null(value):
        return NULL_TEXT
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _is_numeric(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_table(result: ResultSet, limit: int | None = None) -> str:
    """Column-aligned table with a header row. Numbers right-aligned.

    Only the first ``limit`` rows are rendered; a footer notes the rest.
    """
    columns = result.columns
    rows = result.rows
    total = len(rows)
    if limit is not None and limit >= 0:
        rows = rows[:limit]

    cells = [[format_value(v) for v in row] for row in rows]
    widths = [len(c) for c in columns]
    for row in cells:
        for i, c in enumerate(row):
            widths[i] = max(widths[i], len(c))

    numeric = [
        any(_is_numeric(row[i]) for row in rows) and all(_is_numeric(row[i]) or is_null(row[i]) for row in rows)
        for i in range(len(columns))
    ]

    def _line(values: list[str]) -> str:
        out = []
        for i, v in enumerate(values):
            out.append(v.rjust(widths[i]) if numeric[i] else v.ljust(widths[i]))
        return "  ".join(out).rstrip()

    lines = [_line(columns), "  ".join("-" * w for w in widths)]
    lines.extend(_line(row) for row in cells)

    if total == 0:
        lines.append("(no rows)")
    elif len(rows) < total:
        lines.append(f"({len(rows):,} of {total:,} rows shown)")
    else:
        lines.append(f"({total:,} row{'s' if total != 1 else ''})")
    return "\n".join(lines)


def format_status(report: RunReport) -> str:
    """One line per statement: index, status, label, rows/error, time."""
    lines = []
    for s in report.statuses:
        tag = {Status.OK: " ok ", Status.EXISTS: "skip", Status.FAILED: "FAIL"}[s.status]
        detail = ""
        if s.status == Status.FAILED:
            detail = f"  {s.error_type}: {s.error}"
        elif s.status == Status.EXISTS:
            detail = "  already exists"
        elif s.rows is not None:
            detail = f"  {s.rows:,} rows"
        lines.append(
            f"  [{tag}] {s.statement.index:>3}. {s.statement.label}{detail}  ({s.elapsed_ms:,.1f} ms)"
        )

    ok = sum(1 for s in report.statuses if s.ok)
    lines.append(f"\n  {ok}/{len(report.statuses)} statements succeeded, {len(report.failed)} failed")
    return "\n".join(lines)
