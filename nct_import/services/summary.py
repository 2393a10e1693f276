from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary line rendering service.

Format:
SUMMARY inputs={ok}/{total} failed={failed} objectives={n} narratives={n}
commitments={n} tasks={n} done_tasks={n} skipped_rows={n} elapsed_sec={sec}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # 指数表記を避ける
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2026, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2026, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_inputs=1, failed_inputs=0, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, input_stats=[],
        ... )
        >>> render_summary_line(result)  # doctest: +ELLIPSIS
        'SUMMARY inputs=1/1 failed=0 objectives=0 narratives=0 ... elapsed_sec=2'
    """
    return (
        f"SUMMARY inputs={result.success_inputs}/{result.total_inputs} "
        f"failed={result.failed_inputs} "
        f"objectives={result.total_objectives} "
        f"narratives={result.total_narratives} "
        f"commitments={result.total_commitments} "
        f"tasks={result.total_tasks} "
        f"done_tasks={result.total_done_tasks} "
        f"skipped_rows={result.total_skipped_rows} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
