"""
Workbook palette: colors, fonts, fills, borders, alignments.
"""
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
NAVY = "1F3A5F"
STEEL = "3C6E91"
ROW_TINT = "F3F6F9"
GRID = "D0D7DE"
MUTED = "5F6B7A"
INK = "1B1F23"
PAPER = "FFFFFF"
FAILED_TINT = "FDE2E1"
SKIPPED_TINT = "FFF4D6"


def _font(size: int, color: str, **kwargs) -> Font:
    return Font(name="Calibri", size=size, color=color, **kwargs)


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _box(color: str, bottom: str = "thin") -> Border:
    edge = Side(style="thin", color=color)
    return Border(left=edge, right=edge, top=edge, bottom=Side(style=bottom, color=color))


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = _font(18, NAVY, bold=True)
SUBTITLE_FONT = _font(11, MUTED, italic=True)
HEADER_FONT = _font(11, PAPER, bold=True)
DATA_FONT = _font(10, INK)
NULL_FONT = _font(10, MUTED, italic=True)
KPI_VALUE_FONT = _font(22, STEEL, bold=True)
KPI_LABEL_FONT = _font(10, MUTED)

# ---------------------------------------------------------------------------
# Fills, borders, alignments
# ---------------------------------------------------------------------------
HEADER_FILL = _solid(NAVY)
ALTERNATE_FILL = _solid(ROW_TINT)

THIN_BORDER = _box(GRID)
HEADER_BORDER = _box(NAVY, bottom="medium")

CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")

# Row highlight name (see ExcelWriter.write_table) → fill
HIGHLIGHT_FILLS = {
    "failed": _solid(FAILED_TINT),
    "skipped": _solid(SKIPPED_TINT),
}
