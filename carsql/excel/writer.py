"""
ExcelWriter — builds a styled workbook, one sheet per result set.
"""
from __future__ import annotations

import re
from pathlib import Path

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from carsql.excel.styles import TITLE_FONT, SUBTITLE_FONT
from carsql.excel.formatters import add_kpi_card, auto_column_width, format_data_cell, format_header_row


ColSpec = tuple[str, str]  # (label, col_type)

_BAD_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")
_MAX_SHEET_TITLE = 31


class ExcelWriter:

    def __init__(self) -> None:
        self.wb = Workbook()
        self._titles: set[str] = set()

    def _sheet_title(self, title: str) -> str:
        """Excel-safe, unique sheet title."""
        base = _BAD_SHEET_CHARS.sub(" ", title).strip()[:_MAX_SHEET_TITLE] or "Sheet"
        candidate, n = base, 2
        while candidate.lower() in self._titles:
            suffix = f" ({n})"
            candidate = base[:_MAX_SHEET_TITLE - len(suffix)] + suffix
            n += 1
        self._titles.add(candidate.lower())
        return candidate

    def add_sheet(self, title: str) -> Worksheet:
        title = self._sheet_title(title)
        # The workbook starts with one blank sheet; the first title renames it
        if len(self._titles) == 1:
            self.wb.active.title = title
            return self.wb.active
        return self.wb.create_sheet(title=title)

    def write_title(self, ws: Worksheet, title: str, subtitle: str = "") -> int:
        """Title and optional subtitle in column A. Returns the next free row."""
        for row, (text, font) in enumerate([(title, TITLE_FONT), (subtitle, SUBTITLE_FONT)], 1):
            if text:
                ws.cell(row=row, column=1, value=text).font = font
        return 4

    def write_kpi_row(self, ws: Worksheet, row: int, kpis: list[tuple], start_col: int = 1, col_spacing: int = 2) -> int:
        """kpis: [(value, label, format_type)]. Returns the next free row."""
        for i, (value, label, fmt) in enumerate(kpis):
            add_kpi_card(ws, row, start_col + i * col_spacing, value, label, fmt)
        return row + 3

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: list[ColSpec],
        rows: list[tuple],
        highlight_fn=None,
        freeze: bool = True,
    ) -> int:
        """Header row at start_row, data below.

        highlight_fn(row_idx, values) returns a HIGHLIGHT_FILLS key or None.
        Returns the row after the last data row.
        """
        for col_num, (label, _) in enumerate(columns, 1):
            ws.cell(row=start_row, column=col_num, value=label)
        format_header_row(ws, start_row, len(columns))

        for offset, values in enumerate(rows, 1):
            hl = highlight_fn(offset - 1, values) if highlight_fn else None
            for col_num, ((_, col_type), val) in enumerate(zip(columns, values), 1):
                format_data_cell(ws, start_row + offset, col_num, val, col_type, highlight=hl)

        auto_column_width(ws)
        if freeze:
            ws.freeze_panes = ws.cell(row=start_row + 1, column=1)
        return start_row + len(rows) + 1

    def save(self, path: str | Path) -> Path:
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(out)
        return out
