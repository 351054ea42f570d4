"""
Statement, result and load-summary types shared by the loader, store and runner.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import pandas as pd


class StatementKind(str, Enum):
    READ = "read"
    SCHEMA = "schema"
    INTROSPECTION = "introspection"
    OTHER = "other"


_READ_KEYWORDS = {"SELECT", "WITH", "VALUES", "EXPLAIN"}
_COMMENT_RE = re.compile(r"^\s*(--[^\n]*\n|/\*.*?\*/)", re.DOTALL)
_LITERAL_RE = re.compile(r"'(?:[^']|'')*'")
_ANY_COMMENT_RE = re.compile(r"--[^\n]*|/\*.*?\*/", re.DOTALL)
_LIMIT_RE = re.compile(
    r"\bLIMIT\s+(\d+)(?:\s*,\s*(\d+)|\s+OFFSET\s+\d+)?\s*;?\s*$",
    re.IGNORECASE,
)
_CREATE_RE = re.compile(
    r"^CREATE\s+(?:UNIQUE\s+)?(?:TEMP\s+|TEMPORARY\s+)?(TABLE|VIEW|INDEX)\s+"
    r"(?:IF\s+NOT\s+EXISTS\s+)?[\"`\[]?(\w+)",
    re.IGNORECASE,
)


def strip_leading_comments(sql: str) -> str:
    """Drop leading ``--`` and ``/* */`` comments and whitespace."""
    prev = None
    while prev != sql:
        prev = sql
        sql = _COMMENT_RE.sub("", sql, count=1)
    return sql.strip()


def classify(sql: str) -> StatementKind:
    """Statement class from its first keyword."""
    body = strip_leading_comments(sql)
    first = body.split(None, 1)[0].upper() if body else ""
    if first in _READ_KEYWORDS:
        return StatementKind.READ
    if first == "CREATE":
        return StatementKind.SCHEMA
    if first == "PRAGMA":
        return StatementKind.INTROSPECTION
    return StatementKind.OTHER


@dataclass
class Statement:
    """One statement of a query script."""
    sql: str
    title: str = ""
    index: int = 0                       # 1-based position in the script

    @property
    def kind(self) -> StatementKind:
        return classify(self.sql)

    @property
    def limit(self) -> Optional[int]:
        """Trailing ``LIMIT n`` of a read query (the "top N" of the query)."""
        if self.kind != StatementKind.READ:
            return None
        # Literals first, so "--" inside a string is not taken for a comment
        body = _ANY_COMMENT_RE.sub(" ", _LITERAL_RE.sub("''", self.sql))
        m = _LIMIT_RE.search(body.strip())
        if not m:
            return None
        # LIMIT offset, count
        return int(m.group(2) or m.group(1))

    @property
    def artifact(self) -> Optional[tuple[str, str]]:
        """(artifact_type, name) created by a schema statement."""
        m = _CREATE_RE.match(strip_leading_comments(self.sql))
        if not m:
            return None
        return m.group(1).lower(), m.group(2)

    @property
    def label(self) -> str:
        if self.title:
            return self.title
        first_line = strip_leading_comments(self.sql).splitlines()[0] if self.sql.strip() else ""
        return first_line[:70]


@dataclass
class ResultSet:
    """Ordered rows returned by a read or introspection statement."""
    frame: pd.DataFrame
    sql: str = ""

    @property
    def columns(self) -> list[str]:
        return [str(c) for c in self.frame.columns]

    @property
    def rows(self) -> list[tuple]:
        return [
            tuple(None if _is_null(v) else v for v in row)
            for row in self.frame.itertuples(index=False, name=None)
        ]

    def records(self) -> list[dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]

    def __len__(self) -> int:
        return len(self.frame)


@dataclass
class Ack:
    """Acknowledgement of a schema statement."""
    sql: str = ""
    artifact_type: str = ""
    name: str = ""
    created: bool = True                 # False when the artifact already existed


@dataclass
class LoadResult:
    """Outcome of reading the input file."""
    frame: pd.DataFrame
    rows_read: int = 0
    errors: int = 0
    bad_lines: list[int] = field(default_factory=list)
    coerced: dict[str, int] = field(default_factory=dict)   # column → cells turned NULL

    @property
    def rows_loaded(self) -> int:
        return len(self.frame)


def _is_null(value) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
