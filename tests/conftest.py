# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import pytest

from nct_import.logging.init import reset_logging

_ENV_KEYS = ("GOOGLE_SHEETS_URL", "GOOGLE_API_KEY", "NCT_PUSH_URL", "NCT_DEFAULT_QUARTER")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # 実環境の .env / 環境変数がテストへ漏れないようにする
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """default_quarter: Q2 2026
output_directory: ./out
sheets:
  url: https://docs.google.com/spreadsheets/d/abc123_XYZ/edit#gid=42
  api_key: test-key
push:
  url: http://localhost:3000/api/ncts
  timeout_seconds: 5
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "nct_import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_grid() -> list[list[str]]:
    return [
        ["O"],
        ["Grow to 2000 signups"],
        ["Narratives"],
        ["Name", "Description", "KR"],
        ["Signups", "Increase sign-ups", "2000 users"],
        ["Commitments"],
        ["Narrative", "Name", "Type", "Description", "DRI"],
        ["Signups", "Run referral campaign", "Build-It", "", "Dana"],
        ["Tasks"],
        ["Commitment", "Task 1", "Task 2", "Done"],
        ["Run referral campaign", "Design banner", "Write copy", "yes"],
    ]


@pytest.fixture()
def sample_csv_text() -> str:
    return "\n".join([
        "O,,,,",
        '"Grow to 2,000 signups",,,,',
        "Narratives,,,,",
        "Name,Description,KR,,",
        'Signups,"Increase sign-ups, mostly organic",2000 users,,',
        'Revenue,"Grow ""self-serve"" ARR",$1.5M ARR,,',
        "Commitments,,,,",
        "Narrative,Name,Type,Description,DRI",
        "Signups,Run referral campaign,Build-It,,Dana",
        ",Landing page refresh,,New hero copy,Sam",
        "Revenue,Annual plan discount,,,Lee",
        "Tasks,,,,",
        "Commitment,Task 1,Task 2,Task 3,Done",
        "Run referral campaign,Design banner,Write copy,,yes",
        "Annual plan discount,Update pricing page,,,",
        "",
    ])


@pytest.fixture()
def write_csv(temp_workdir: Path, sample_csv_text: str) -> Path:
    p = temp_workdir / "data" / "ncts.csv"
    p.write_text(sample_csv_text, encoding="utf-8")
    return p
