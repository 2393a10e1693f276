from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_OUTPUT_DIRECTORY,
    DEFAULT_PUSH_TIMEOUT,
    DEFAULT_QUARTER,
    ImportConfig,
    PushConfig,
    SheetsConfig,
)

"""Config loader.

Responsibilities:
- Load the YAML config (default config/nct_import.yml)
- Validate it against the bundled JSON schema (config_schema.json)
- Apply defaults (default_quarter, output_directory, push timeout)
- Apply environment overrides (GOOGLE_SHEETS_URL, GOOGLE_API_KEY,
  NCT_PUSH_URL, NCT_DEFAULT_QUARTER); the CLI loads .env before calling here
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/nct_import.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

ENV_SHEETS_URL = "GOOGLE_SHEETS_URL"
ENV_API_KEY = "GOOGLE_API_KEY"
ENV_PUSH_URL = "NCT_PUSH_URL"
ENV_DEFAULT_QUARTER = "NCT_DEFAULT_QUARTER"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            data fails validation (unknown keys, wrong types, ...)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def load_config(path: Path | None = None, *, must_exist: bool = True) -> ImportConfig:
    """Load, validate and resolve the importer configuration.

    Args:
        path: YAML file (None -> DEFAULT_CONFIG_PATH)
        must_exist: When False a missing file means "all defaults"

    Raises:
        ConfigError: Missing file (when must_exist), invalid YAML, schema failure
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"config root must be a mapping: {path}")
        data = loaded
    elif must_exist:
        raise ConfigError(f"config file not found: {path}")

    _validate_config_schema(data)

    sheets_raw = data.get("sheets") or {}
    push_raw = data.get("push") or {}

    # 環境変数 (.env 含む) が YAML より優先
    sheets = SheetsConfig(
        url=_env(ENV_SHEETS_URL) or sheets_raw.get("url"),
        api_key=_env(ENV_API_KEY) or sheets_raw.get("api_key"),
    )
    push = PushConfig(
        url=_env(ENV_PUSH_URL) or push_raw.get("url"),
        timeout_seconds=float(push_raw.get("timeout_seconds", DEFAULT_PUSH_TIMEOUT)),
    )
    return ImportConfig(
        default_quarter=_env(ENV_DEFAULT_QUARTER) or data.get("default_quarter", DEFAULT_QUARTER),
        output_directory=data.get("output_directory", DEFAULT_OUTPUT_DIRECTORY),
        sheets=sheets,
        push=push,
        excel_sheet=data.get("excel_sheet"),
    )
