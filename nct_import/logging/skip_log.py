from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.skipped_row import SkipLogEntry, SkippedRow

"""Skipped-row log buffering.

- JSON Lines with a fixed key set (no extra keys)
- One `logs/skipped-YYYYMMDD-HHMMSS.log` (UTC) per run, created on first flush
  that has records
- Records are buffered and written in one go at the end of the run
"""

__all__ = [
    "SkipLogEntry",
    "SkipLogBuffer",
    "LOGS_DIR",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class SkipLogBuffer:
    """In-memory buffer for skipped rows. flush() appends JSON Lines.

    Serial use only; the importer handles one input at a time.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[SkipLogEntry] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"skipped-{stamp}.log"
        return self._file_path

    def append(self, entry: SkipLogEntry) -> None:
        self._records.append(entry)

    def extend(self, source: str, skipped: list[SkippedRow]) -> None:
        """Buffer every skipped row of one input."""
        for row in skipped:
            self._records.append(SkipLogEntry.create(source, row))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None if nothing was written."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
