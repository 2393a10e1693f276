from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from pathlib import Path

import pytest

from nct_import.models import (
    InputKind,
    InputSource,
    InputStat,
    InputStatus,
    ParsedCommitment,
    ParsedNarrative,
    ParsedNctData,
    ParsedTask,
    ProcessingResult,
)


class TestInputSource:
    def test_from_path_csv(self):
        source = InputSource.from_path(Path("data/Q1 NCTs.CSV"))
        assert source.kind is InputKind.CSV
        assert source.status is InputStatus.PENDING
        assert source.name == "Q1 NCTs.CSV"
        assert source.stem == "Q1 NCTs"

    def test_from_path_xlsx(self):
        assert InputSource.from_path(Path("ncts.xlsx")).kind is InputKind.XLSX

    def test_from_path_unsupported(self):
        with pytest.raises(ValueError, match="unsupported input type"):
            InputSource.from_path(Path("ncts.xls"))

    def test_sheets_names(self):
        source = InputSource(kind=InputKind.SHEETS, location="https://docs.google.com/spreadsheets/d/x/edit")
        assert source.name == "sheets"
        assert source.stem == "sheets"

    def test_immutable(self):
        source = InputSource.from_path(Path("a.csv"))
        with pytest.raises(FrozenInstanceError):
            source.status = InputStatus.SUCCESS  # type: ignore[misc]


def test_parsed_data_counts():
    data = ParsedNctData(
        objectives=["o"],
        narratives=[
            ParsedNarrative("A", "", "10", 10, "10", 0, [
                ParsedCommitment("c1", "Quantitative", "", "", 0, [
                    ParsedTask("t1", True, 0),
                    ParsedTask("t2", False, 1),
                ]),
                ParsedCommitment("c2", "Quantitative", "", "", 1, []),
            ]),
            ParsedNarrative("B", "", "", 1, "B", 1, []),
        ],
        quarter="Q1 2026",
    )
    assert data.commitment_count == 2
    assert data.task_count == 2
    assert data.done_task_count == 1


def test_processing_result_totals():
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    result = ProcessingResult(
        success_inputs=1,
        failed_inputs=1,
        start_time=start,
        end_time=start,
        elapsed_seconds=0.0,
        input_stats=[
            InputStat(name="a", status="success", narratives=2, tasks=4, skipped_rows=1),
            InputStat(name="b", status="empty", skipped_rows=2),
        ],
    )
    assert result.total_inputs == 2
    assert result.total_narratives == 2
    assert result.total_tasks == 4
    assert result.total_skipped_rows == 3
