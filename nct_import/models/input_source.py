from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

"""InputSource domain model and its enums.

An InputSource is one spreadsheet the importer reads: a local .csv/.xlsx file
or a Google Sheet URL. It tracks the processing outcome through the run.

State transitions: pending -> (success | empty | failed)
"""

__all__ = [
    "InputKind",
    "InputStatus",
    "InputSource",
]


class InputKind(Enum):
    CSV = "csv"
    XLSX = "xlsx"
    SHEETS = "sheets"


class InputStatus(Enum):
    """Outcome of processing one input.

    - PENDING: Not processed yet
    - SUCCESS: Parsed with at least one narrative
    - EMPTY: Parsed, but no narratives were found
    - FAILED: Could not be read or fetched
    """
    PENDING = "pending"
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class InputSource:
    """One spreadsheet to import."""
    kind: InputKind
    location: str  # file path or sheet URL
    status: InputStatus = InputStatus.PENDING
    error: str | None = None

    @property
    def name(self) -> str:
        """Short display name (file name, or "sheets" for a Google Sheet)."""
        if self.kind is InputKind.SHEETS:
            return "sheets"
        return Path(self.location).name

    @property
    def stem(self) -> str:
        """Base name used for the JSON output file."""
        if self.kind is InputKind.SHEETS:
            return "sheets"
        return Path(self.location).stem

    @staticmethod
    def from_path(path: Path) -> InputSource:
        """Classify a local file by extension.

        Raises:
            ValueError: If the extension is neither .csv nor .xlsx
        """
        suffix = path.suffix.lower()
        if suffix == ".csv":
            return InputSource(kind=InputKind.CSV, location=str(path))
        if suffix == ".xlsx":
            return InputSource(kind=InputKind.XLSX, location=str(path))
        raise ValueError(f"unsupported input type: {path.name} (expected .csv or .xlsx)")
