"""
Excel export of a script run — one sheet per result set plus a run summary.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from carsql.excel.writer import ExcelWriter
from carsql.queries.runner import RunReport, Status
from carsql.reports.common import column_type

SUMMARY_COLS = [
    ("#", "number"),
    ("Statement", "text"),
    ("Kind", "text"),
    ("Status", "text"),
    ("Rows", "number"),
    ("Time (ms)", "decimal"),
    ("Error", "text"),
]


def export_excel(report: RunReport, output_path: str | Path, dataset: str = "") -> Path:
    ew = ExcelWriter()

    ws = ew.add_sheet("Run Summary")
    subtitle = f"{dataset}  |  Generated {pd.Timestamp.now():%B %d, %Y %H:%M}" if dataset else \
        f"Generated {pd.Timestamp.now():%B %d, %Y %H:%M}"
    row = ew.write_title(ws, "CAR PRICES ANALYSIS", subtitle)
    row = ew.write_kpi_row(ws, row, [
        (len(report.statuses), "STATEMENTS", "number"),
        (len(report.statuses) - len(report.failed), "SUCCEEDED", "number"),
        (len(report.failed), "FAILED", "number"),
    ])

    rows = [
        (
            s.statement.index,
            s.statement.label,
            s.statement.kind.value,
            s.status,
            s.rows,
            round(s.elapsed_ms, 2),
            s.error,
        )
        for s in report.statuses
    ]

    def _highlight(_, values):
        if values[3] == Status.FAILED:
            return "failed"
        if values[3] == Status.EXISTS:
            return "skipped"
        return None

    ew.write_table(ws, row, SUMMARY_COLS, rows, highlight_fn=_highlight)

    for stmt, result in report.results:
        ws_r = ew.add_sheet(f"{stmt.index}. {stmt.label}")
        values = result.rows
        columns = [
            (name, column_type(name, [r[i] for r in values]))
            for i, name in enumerate(result.columns)
        ]
        ew.write_table(ws_r, 1, columns, values)

    return ew.save(output_path)
