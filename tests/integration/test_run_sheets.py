from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

from nct_import.cli import main as cli_main
from nct_import.sheets.client import SheetsClient

"""Integration test: Google Sheets input with a mocked HTTP session."""


def _response(payload: dict, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    resp.json.return_value = payload
    return resp


def test_run_from_configured_sheet(write_config, temp_workdir: Path, sample_grid, capsys):
    session = MagicMock()
    session.get.side_effect = [
        _response({"sheets": [{"properties": {"sheetId": 42, "title": "Q2 NCTs"}}]}),
        _response({"values": sample_grid}),
    ]
    client = SheetsClient("test-key", session=session)

    with patch("nct_import.services.orchestrator.SheetsClient", return_value=client) as mock_cls:
        code = cli_main([])
    out = capsys.readouterr().out

    assert code == 0
    mock_cls.assert_called_once_with("test-key")
    assert "SUMMARY inputs=1/1 failed=0 objectives=1 narratives=1 commitments=1 tasks=2" in out
    payload = json.loads((temp_workdir / "out" / "sheets.json").read_text(encoding="utf-8"))
    assert payload["data"]["quarter"] == "Q2 2026"
    assert payload["data"]["narratives"][0]["commitments"][0]["type"] == "Build-It"


def test_run_sheet_api_error_is_partial_failure(write_config, temp_workdir: Path, capsys):
    session = MagicMock()
    session.get.return_value = _response(
        {"error": {"code": 403, "message": "Google Sheets API has not been used in project 1 before or it is disabled."}},
        status=403,
    )
    client = SheetsClient("test-key", session=session)

    with patch("nct_import.services.orchestrator.SheetsClient", return_value=client):
        code = cli_main([])
    out = capsys.readouterr().out

    assert code == 2
    assert "ERROR sheets:" in out
    assert "SUMMARY inputs=0/1 failed=1" in out
