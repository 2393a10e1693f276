"""Spreadsheet grid -> NCT hierarchy parser."""

from .hierarchy import DEFAULT_QUARTER, parse_nct_grid, parse_nct_rows
from .kr_number import parse_kr_number
from .sections import cell, col_index, find_header_row, find_section_index

__all__ = [
    "DEFAULT_QUARTER",
    "parse_nct_rows",
    "parse_nct_grid",
    "parse_kr_number",
    "find_section_index",
    "find_header_row",
    "col_index",
    "cell",
]
