from __future__ import annotations

from collections.abc import Sequence

"""Section and header helpers for the NCT grid parser.

The spreadsheet is one flat table split into sections by marker rows
("O", "Narratives", "Commitments", "Tasks"). Each section (except
Objectives) carries its own header row shortly after the marker.

All helpers are pure and never raise on ragged rows or missing sections;
not-found is reported as None (row indices) or -1 (column indices).
"""

__all__ = [
    "Row",
    "Grid",
    "HEADER_LOOKAHEAD",
    "find_section_index",
    "find_header_row",
    "col_index",
    "cell",
]

Row = Sequence[str]
Grid = Sequence[Row]

# マーカー行とヘッダ行の間にタイトル行/空行があっても許容する範囲
HEADER_LOOKAHEAD = 5


def find_section_index(grid: Grid, marker: str) -> int | None:
    """Return the index of the first row holding a cell equal to marker.

    Comparison is on trimmed, lower-cased text and must be exact
    (a "Narratives overview" cell is not a Narratives marker).
    """
    wanted = marker.strip().lower()
    for idx, row in enumerate(grid):
        if any(c.strip().lower() == wanted for c in row):
            return idx
    return None


def find_header_row(grid: Grid, start: int, required: Sequence[str]) -> int | None:
    """Find a header row within HEADER_LOOKAHEAD rows starting at start.

    A row qualifies when every required substring is contained in at least
    one of its cells (case-insensitive).
    """
    wanted = [r.lower() for r in required]
    end = min(start + HEADER_LOOKAHEAD, len(grid))
    for idx in range(max(start, 0), end):
        lower = [c.strip().lower() for c in grid[idx]]
        if all(any(w in c for c in lower) for w in wanted):
            return idx
    return None


def col_index(header_row: Row, *candidates: str) -> int:
    """Map a column name to its position in header_row.

    Candidates are tried in priority order; for each, the first header cell
    equal to or containing it wins. Returns -1 when no candidate matches.
    """
    lower = [c.strip().lower() for c in header_row]
    for cand in candidates:
        cand = cand.lower()
        for idx, c in enumerate(lower):
            if c == cand or cand in c:
                return idx
    return -1


def cell(row: Row, idx: int) -> str:
    """Trimmed cell text, "" for a missing column (-1) or a short row."""
    if 0 <= idx < len(row):
        return row[idx].strip()
    return ""
