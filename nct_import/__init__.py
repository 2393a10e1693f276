"""NCT planning spreadsheet importer.

Parses Objectives / Narratives / Commitments / Tasks spreadsheets into a
hierarchy payload for the planning app.
"""

from .parser import parse_kr_number, parse_nct_grid, parse_nct_rows

__version__ = "0.1.0"

__all__ = [
    "parse_nct_rows",
    "parse_nct_grid",
    "parse_kr_number",
]
