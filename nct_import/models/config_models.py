from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the NCT spreadsheet importer.

Built by nct_import.config.loader after YAML parsing,
JSON schema validation and environment overrides.
"""

DEFAULT_QUARTER = "Q1 2026"
DEFAULT_OUTPUT_DIRECTORY = "./out"
DEFAULT_PUSH_TIMEOUT = 30.0


@dataclass(frozen=True)
class SheetsConfig:
    """Google Sheets source.

    api_key may be None for sheets that are readable without a key; the
    Sheets API usually rejects such requests, so the client reports it.
    """
    url: str | None
    api_key: str | None


@dataclass(frozen=True)
class PushConfig:
    """Creation endpoint that accepts the hierarchy payload."""
    url: str | None
    timeout_seconds: float = DEFAULT_PUSH_TIMEOUT


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import run."""
    default_quarter: str
    output_directory: str
    sheets: SheetsConfig
    push: PushConfig
    excel_sheet: str | None = None  # .xlsx 入力で読むシート名 (None = 先頭シート)
