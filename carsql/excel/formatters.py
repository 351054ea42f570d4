"""
Cell styling for result-set sheets: header row, data cells, KPI cards, widths.
"""
from __future__ import annotations

from openpyxl.cell.cell import Cell
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from carsql.excel.styles import (
    HEADER_FONT, HEADER_FILL, HEADER_BORDER,
    DATA_FONT, NULL_FONT,
    THIN_BORDER, ALTERNATE_FILL,
    KPI_VALUE_FONT, KPI_LABEL_FONT,
    CENTER, LEFT, RIGHT,
    HIGHLIGHT_FILLS,
)
from carsql.reports.common import is_null

NUMBER_FORMATS = {
    "currency": '"$"#,##0.00',
    "number": "#,##0",
    "decimal": "#,##0.00",
}


def _style(cell: Cell, font=None, fill=None, alignment=None, border=None, number_format=None) -> Cell:
    if font is not None:
        cell.font = font
    if fill is not None:
        cell.fill = fill
    if alignment is not None:
        cell.alignment = alignment
    if border is not None:
        cell.border = border
    if number_format is not None:
        cell.number_format = number_format
    return cell


def format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    for cell in ws[row_num][:num_cols]:
        _style(cell, HEADER_FONT, HEADER_FILL, CENTER, HEADER_BORDER)


def format_data_cell(
    ws: Worksheet,
    row_num: int,
    col_num: int,
    value,
    col_type: str = "text",
    highlight: str | None = None,
) -> None:
    """Write one result value. NULL becomes an empty italic cell."""
    null = is_null(value)
    numeric = col_type in NUMBER_FORMATS
    if highlight in HIGHLIGHT_FILLS:
        fill = HIGHLIGHT_FILLS[highlight]
    else:
        fill = ALTERNATE_FILL if row_num % 2 == 0 else None

    cell = ws.cell(row=row_num, column=col_num, value=None if null else value)
    _style(
        cell,
        font=NULL_FONT if null else DATA_FONT,
        fill=fill,
        alignment=RIGHT if numeric else LEFT,
        border=THIN_BORDER,
        number_format=NUMBER_FORMATS.get(col_type),
    )


def auto_column_width(ws: Worksheet, min_width: int = 10, max_width: int = 60) -> None:
    for idx, column in enumerate(ws.iter_cols(), 1):
        longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        ws.column_dimensions[get_column_letter(idx)].width = min(max(longest + 2, min_width), max_width)


def add_kpi_card(ws: Worksheet, row: int, col: int, value, label: str, format_type: str = "number") -> None:
    """Big number with a caption underneath."""
    _style(
        ws.cell(row=row, column=col, value=value),
        font=KPI_VALUE_FONT, alignment=CENTER, number_format=NUMBER_FORMATS.get(format_type),
    )
    _style(ws.cell(row=row + 1, column=col, value=label), font=KPI_LABEL_FONT, alignment=CENTER)
