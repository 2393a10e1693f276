"""Domain models for the NCT spreadsheet importer.

Parsed hierarchy records, parse diagnostics, configuration, input sources and
run results.
"""

from .config_models import ImportConfig, PushConfig, SheetsConfig
from .input_source import InputKind, InputSource, InputStatus
from .parsed_nct import (
    ParsedCommitment,
    ParsedNarrative,
    ParsedNctData,
    ParsedTask,
    ParseResult,
)
from .processing_result import InputStat, ProcessingResult
from .skipped_row import SkipLogEntry, SkippedRow

__all__ = [
    # Parsed hierarchy
    "ParsedTask",
    "ParsedCommitment",
    "ParsedNarrative",
    "ParsedNctData",
    "ParseResult",
    "SkippedRow",
    "SkipLogEntry",
    # Configuration models
    "ImportConfig",
    "PushConfig",
    "SheetsConfig",
    # Processing models
    "InputKind",
    "InputSource",
    "InputStatus",
    "InputStat",
    "ProcessingResult",
]
