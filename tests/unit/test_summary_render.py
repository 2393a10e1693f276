from __future__ import annotations

import re
from datetime import datetime, timezone

from nct_import.models.processing_result import InputStat, ProcessingResult
from nct_import.services.summary import render_summary_line

SUMMARY_RE = re.compile(
    r"^SUMMARY inputs=\d+/\d+ failed=\d+ objectives=\d+ narratives=\d+ commitments=\d+ "
    r"tasks=\d+ done_tasks=\d+ skipped_rows=\d+ elapsed_sec=[0-9.]+$"
)


def _result(elapsed: float, stats: list[InputStat], success: int, failed: int) -> ProcessingResult:
    start = datetime(2026, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    return ProcessingResult(
        success_inputs=success,
        failed_inputs=failed,
        start_time=start,
        end_time=start,
        elapsed_seconds=elapsed,
        input_stats=stats,
    )


def test_render_summary_totals_across_inputs():
    stats = [
        InputStat(name="a.csv", status="success", objectives=1, narratives=2, commitments=3,
                  tasks=5, done_tasks=2, skipped_rows=1),
        InputStat(name="b.xlsx", status="success", objectives=2, narratives=1, commitments=1,
                  tasks=1, done_tasks=1),
        InputStat(name="c.csv", status="failed", error="file not found"),
    ]
    line = render_summary_line(_result(1.5, stats, success=2, failed=1))
    assert line == (
        "SUMMARY inputs=2/3 failed=1 objectives=3 narratives=3 commitments=4 "
        "tasks=6 done_tasks=3 skipped_rows=1 elapsed_sec=1.5"
    )
    assert SUMMARY_RE.match(line)


def test_render_summary_empty_run():
    line = render_summary_line(_result(0, [], success=0, failed=0))
    assert line == (
        "SUMMARY inputs=0/0 failed=0 objectives=0 narratives=0 commitments=0 "
        "tasks=0 done_tasks=0 skipped_rows=0 elapsed_sec=0"
    )


def test_render_summary_elapsed_formatting():
    assert render_summary_line(_result(2.0, [], 1, 0)).endswith("elapsed_sec=2")
    assert render_summary_line(_result(0.000123, [], 1, 0)).endswith("elapsed_sec=0.000123")
    assert render_summary_line(_result(0.123456, [], 1, 0)).endswith("elapsed_sec=0.123")
    assert SUMMARY_RE.match(render_summary_line(_result(0.0000001, [], 1, 0)))


def test_render_summary_none_stats():
    result = _result(1.0, None, 0, 0)
    assert "narratives=0" in render_summary_line(result)
