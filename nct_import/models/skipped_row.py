from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""SkippedRow model for parse diagnostics.

The hierarchy parser never raises on malformed spreadsheets; rows it cannot
place (orphaned commitments, tasks before any commitment) are dropped from the
parsed output. Each dropped row is described by a SkippedRow so callers can
log it or write it to the skip log.
"""

__all__ = [
    "SkippedRow",
    "SkipLogEntry",
    "REASON_UNKNOWN_NARRATIVE",
    "REASON_NO_NARRATIVE",
    "REASON_NO_COMMITMENT",
]

# reason 値 (UPPER_SNAKE)
REASON_UNKNOWN_NARRATIVE = "UNKNOWN_NARRATIVE"
REASON_NO_NARRATIVE = "NO_NARRATIVE"
REASON_NO_COMMITMENT = "NO_COMMITMENT"


@dataclass(frozen=True)
class SkippedRow:
    """A grid row the parser dropped.

    Attributes:
        section: Section the row belongs to ("Commitments" or "Tasks")
        row: 0-based index into the grid
        reason: Classification in UPPER_SNAKE_CASE format
        text: Non-blank cells of the row joined with " | " (for humans)
    """
    section: str
    row: int
    reason: str
    text: str


@dataclass(frozen=True)
class SkipLogEntry:
    """JSON Lines record written to the skip log.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: Input the row came from (file name or sheet URL)
        section: Section name
        row: 0-based grid row index
        reason: UPPER_SNAKE_CASE reason
        text: Row text
    """
    timestamp: str  # ISO8601 UTC
    source: str
    section: str
    row: int
    reason: str
    text: str

    @staticmethod
    def create(source: str, skipped: SkippedRow) -> SkipLogEntry:
        """Create a log entry for a skipped row stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return SkipLogEntry(
            timestamp=ts,
            source=source,
            section=skipped.section,
            row=skipped.row,
            reason=skipped.reason,
            text=skipped.text,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
