from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from nct_import.cli import main as cli_main
from nct_import.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL
from nct_import.services.payload import PushError

"""Exit code contract: 0 all inputs succeeded, 2 some input failed, 1 fatal startup error."""


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PARTIAL_FAILURE) == (0, 1, 2)


def test_exit_code_fatal_startup(temp_workdir: Path, capsys):
    # config 無し, 入力無し, Sheets URL 無し -> exit 1
    code = cli_main([])
    assert code == EXIT_FATAL
    assert "ERROR inputs:" in capsys.readouterr().out


def test_exit_code_fatal_broken_config(temp_workdir: Path, capsys):
    (temp_workdir / "config" / "nct_import.yml").write_text("sheets: [unclosed\n", encoding="utf-8")
    code = cli_main(["a.csv"])
    assert code == EXIT_FATAL
    assert "ERROR config: invalid yaml" in capsys.readouterr().out


def test_exit_code_all_success(write_config, write_csv: Path, capsys):
    assert cli_main([str(write_csv)]) == EXIT_SUCCESS_ALL


def test_exit_code_input_without_narratives(write_config, temp_workdir: Path, capsys):
    empty = temp_workdir / "data" / "empty.csv"
    empty.write_text("Commitments\nNarrative,Name\nX,Y\n", encoding="utf-8")
    code = cli_main([str(empty)])
    out = capsys.readouterr().out
    assert code == EXIT_PARTIAL_FAILURE
    assert "WARN empty.csv: no narratives found" in out


def test_exit_code_push_failure(write_config, write_csv: Path, capsys):
    with patch("nct_import.services.orchestrator.push_payload", side_effect=PushError("push to x failed")):
        code = cli_main([str(write_csv), "--push"])
    assert code == EXIT_PARTIAL_FAILURE
    assert "ERROR ncts.csv: push to x failed" in capsys.readouterr().out


def test_exit_code_output_write_failure(write_config, write_csv: Path, temp_workdir: Path, capsys):
    (temp_workdir / "outfile").write_text("x", encoding="utf-8")
    code = cli_main([str(write_csv), "--output-dir", "outfile"])
    out = capsys.readouterr().out
    assert code == EXIT_PARTIAL_FAILURE
    assert "ERROR ncts.csv: cannot write output:" in out
    assert "SUMMARY inputs=0/1 failed=1" in out
