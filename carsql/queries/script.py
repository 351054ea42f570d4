"""
Query script parsing: split SQL text into ordered, titled statements.
"""
from __future__ import annotations

import sqlite3
from pathlib import Path

from carsql.config import DEFAULT_SCRIPT
from carsql.data.schemas import Statement


def _title_from(lines: list[str]) -> str:
    """Comment block directly above the statement's SQL, joined."""
    parts: list[str] = []
    for line in lines:
        s = line.strip()
        if not s:
            parts = []
            continue
        if not s.startswith("--"):
            break
        parts.append(s.lstrip("-").strip())
    return " ".join(p for p in parts if p)


def parse_script(source: str) -> list[Statement]:
    """Split a SQL script into statements, keeping order.

    Statement boundaries come from ``sqlite3.complete_statement`` so semicolons
    inside literals and comments do not split a statement.
    """
    statements: list[Statement] = []
    buffer: list[str] = []

    for line in source.splitlines(keepends=True):
        buffer.append(line)
        chunk = "".join(buffer)
        if sqlite3.complete_statement(chunk):
            sql = chunk.strip()
            buffer = []
            body = "\n".join(l for l in sql.splitlines() if not l.strip().startswith("--")).strip()
            if not body or body == ";":
                continue
            statements.append(Statement(
                sql=sql.rstrip(";").rstrip(),
                title=_title_from(sql.splitlines()),
                index=len(statements) + 1,
            ))

    # Trailing statement without a semicolon
    tail = "".join(buffer).strip()
    tail_body = "\n".join(l for l in tail.splitlines() if not l.strip().startswith("--")).strip()
    if tail_body:
        statements.append(Statement(sql=tail, title=_title_from(tail.splitlines()), index=len(statements) + 1))

    return statements


def load_script(path: str | Path = DEFAULT_SCRIPT) -> list[Statement]:
    """Read and parse a script file."""
    return parse_script(Path(path).read_text(encoding="utf-8"))
