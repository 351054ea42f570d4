"""
CSV loading: field-count validation, type coercion, NULL handling.
"""
from __future__ import annotations

import csv
import re
from pathlib import Path

import pandas as pd

from carsql.config import COLUMNS, NUMERIC_COLUMNS, INTEGER_COLUMNS, TEXT_COLUMNS
from carsql.data.schemas import LoadResult
from carsql.errors import LoadError


# Line numbers kept in LoadResult.bad_lines (the error count itself is unbounded)
MAX_BAD_LINES_KEPT = 100

# Longest single cell accepted; longer cells reject their row
MAX_FIELD_SIZE = 1 << 20

_UNDECODABLE_RE = re.compile("[\udc80-\udcff]")


# ---------------------------------------------------------------------------
# Raw reading
# ---------------------------------------------------------------------------

def _read_rows(filepath: Path, delimiter: str) -> tuple[list[str], list[list[str]], int, list[int]]:
    """Read header + rows, rejecting rows whose cell count differs from the header.

    pandas pads short rows with NaN instead of reporting them, so field counts
    are checked here and the typed frame is built afterwards.
    """
    rows: list[list[str]] = []
    bad_lines: list[int] = []
    errors = 0

    def _reject(line_num: int) -> None:
        nonlocal errors
        errors += 1
        if len(bad_lines) < MAX_BAD_LINES_KEPT:
            bad_lines.append(line_num)

    previous_limit = csv.field_size_limit(MAX_FIELD_SIZE)
    try:
        # Undecodable bytes surface as lone surrogates and reject their row
        with open(filepath, newline="", encoding="utf-8-sig", errors="surrogateescape") as f:
            reader = csv.reader(f, delimiter=delimiter)
            try:
                header = next(reader)
            except StopIteration:
                raise LoadError(f"{filepath.name} is empty")
            except csv.Error as exc:
                raise LoadError(f"{filepath.name} has an unreadable header: {exc}")
            header = [h.strip() for h in header]
            width = len(header)

            while True:
                try:
                    cells = next(reader)
                except StopIteration:
                    break
                except csv.Error:
                    _reject(reader.line_num)
                    continue
                if not cells:
                    continue
                if len(cells) != width or any(_UNDECODABLE_RE.search(c) for c in cells):
                    _reject(reader.line_num)
                    continue
                rows.append(cells)
    finally:
        csv.field_size_limit(previous_limit)

    return header, rows, errors, bad_lines


# ---------------------------------------------------------------------------
# Typing
# ---------------------------------------------------------------------------

def _coerce_types(df: pd.DataFrame) -> tuple[pd.DataFrame, dict[str, int]]:
    """Cast columns to the base-table schema. Unparseable numbers become NULL."""
    coerced: dict[str, int] = {}

    for col in TEXT_COLUMNS:
        s = df[col].str.strip()
        df[col] = s.mask(s == "")

    for col in NUMERIC_COLUMNS + INTEGER_COLUMNS:
        raw = df[col].str.strip()
        num = pd.to_numeric(raw, errors="coerce")
        failed = int((num.isna() & (raw != "")).sum())
        if col in INTEGER_COLUMNS:
            whole = num.notna() & (num % 1 == 0)
            failed += int((num.notna() & ~whole).sum())
            num = num.where(whole).astype("Int64")
        df[col] = num
        if failed:
            coerced[col] = failed

    return df, coerced


def load_csv(filepath: str | Path, delimiter: str = ",") -> LoadResult:
    """Load the car sales CSV into a typed DataFrame.

    Malformed rows are skipped and counted; loading continues. A missing
    file or a header without the required columns raises LoadError.
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise LoadError(f"Dataset not found: {filepath}")

    header, rows, errors, bad_lines = _read_rows(filepath, delimiter)

    missing = [c for c in COLUMNS if c not in header]
    if missing:
        raise LoadError(f"{filepath.name} is missing columns: {', '.join(missing)}")

    df = pd.DataFrame(rows, columns=header, dtype=object)
    # Extra columns are dropped; order follows the schema
    df = df[COLUMNS].copy()
    df, coerced = _coerce_types(df)

    print(f"  Read {len(rows) + errors:,} rows from {filepath.name}")
    if errors:
        print(f"  Skipped {errors:,} malformed rows (first at line {bad_lines[0]})")
    for col, n in coerced.items():
        print(f"  {col}: {n:,} unparseable values stored as NULL")

    return LoadResult(
        frame=df,
        rows_read=len(rows) + errors,
        errors=errors,
        bad_lines=bad_lines,
        coerced=coerced,
    )
