"""Result-set rendering: aligned text tables, run status lists, Excel export."""
from .text_table import format_table, format_status, format_value
