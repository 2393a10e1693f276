from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

from ..grid.reader import GridReadError, read_grid
from ..logging.skip_log import SkipLogBuffer
from ..models.config_models import ImportConfig
from ..models.input_source import InputKind, InputSource, InputStatus
from ..models.processing_result import InputStat, ProcessingResult
from ..parser.hierarchy import (
    MARKER_COMMITMENTS,
    MARKER_NARRATIVES,
    MARKER_OBJECTIVES,
    MARKER_TASKS,
    find_task_header_row,
    parse_nct_grid,
)
from ..parser.sections import Grid, find_header_row, find_section_index
from ..sheets.client import SheetsClient, SheetsError
from .payload import PushError, push_payload, to_payload, write_payload
from .progress import ProgressTracker

"""Service orchestration for the NCT spreadsheet importer.

For each input spreadsheet:
1. Read it into a grid (local .csv/.xlsx, or a Google Sheet)
2. Parse the grid into the NCT hierarchy
3. Buffer skipped rows for the skip log
4. Write the creation payload as JSON and optionally push it

Inputs are independent: a failing input is recorded and the run continues.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ProcessingError",
    "resolve_inputs",
    "load_grid",
    "process_inputs",
    "describe_grid",
]

# ヘッダ検出に使う必須列 (パーサと同じ)
_SECTION_HEADERS = {
    MARKER_NARRATIVES: ["name"],
    MARKER_COMMITMENTS: ["name"],
}


class ProcessingError(Exception):
    """Fatal error that prevents a run from starting."""


def resolve_inputs(paths: list[Path], sheets_url: str | None) -> list[InputSource]:
    """Build the input list from CLI paths, or the Google Sheet when no path is given.

    Raises:
        ProcessingError: Unsupported file type, or neither paths nor a sheet URL
    """
    if paths:
        sources: list[InputSource] = []
        for p in paths:
            try:
                sources.append(InputSource.from_path(p))
            except ValueError as e:
                raise ProcessingError(str(e)) from e
        return sources
    if sheets_url:
        return [InputSource(kind=InputKind.SHEETS, location=sheets_url)]
    raise ProcessingError("no inputs: pass .csv/.xlsx files or configure a Google Sheets URL")


def load_grid(
    source: InputSource,
    config: ImportConfig,
    sheets_client: SheetsClient | None = None,
) -> Grid:
    """Read one input into a grid.

    Raises:
        GridReadError: Local file problems
        SheetsError: Google Sheets problems
    """
    if source.kind is InputKind.SHEETS:
        client = sheets_client or SheetsClient(config.sheets.api_key)
        return client.fetch_grid(source.location)
    return read_grid(Path(source.location), sheet=config.excel_sheet)


def describe_grid(grid: Grid) -> list[str]:
    """Describe section markers and header rows found in a grid (for --inspect-data)."""
    lines = [f"rows={len(grid)}"]
    for marker in (MARKER_OBJECTIVES, MARKER_NARRATIVES, MARKER_COMMITMENTS, MARKER_TASKS):
        idx = find_section_index(grid, marker)
        if idx is None:
            lines.append(f"{marker}: not found")
            continue
        if marker == MARKER_OBJECTIVES:
            lines.append(f"{marker}: row={idx}")
            continue
        if marker == MARKER_TASKS:
            header_idx = find_task_header_row(grid, idx + 1)
        else:
            header_idx = find_header_row(grid, idx + 1, _SECTION_HEADERS[marker])
        if header_idx is None:
            lines.append(f"{marker}: row={idx} header=not found")
        else:
            header = [c.strip() for c in grid[header_idx] if c.strip()]
            lines.append(f"{marker}: row={idx} header_row={header_idx} columns={header}")
    return lines


def _output_path(output_dir: Path, stem: str, claimed: set[Path]) -> Path:
    """Pick the JSON output path for an input, unique within the run.

    The first input with a given stem gets <stem>.json, later ones
    <stem>-2.json, <stem>-3.json, ...
    """
    path = output_dir / f"{stem}.json"
    n = 2
    while path in claimed:
        path = output_dir / f"{stem}-{n}.json"
        n += 1
    claimed.add(path)
    return path


def _process_single_input(
    source: InputSource,
    config: ImportConfig,
    *,
    quarter: str,
    output_dir: Path,
    claimed: set[Path],
    push: bool,
    skip_log: SkipLogBuffer,
    sheets_client: SheetsClient | None,
) -> tuple[InputSource, InputStat]:
    try:
        grid = load_grid(source, config, sheets_client)
    except (GridReadError, SheetsError) as e:
        logger.error(f"{source.name}: {e}")
        failed = replace(source, status=InputStatus.FAILED, error=str(e))
        return failed, InputStat(name=source.name, status=failed.status.value, error=str(e))

    result = parse_nct_grid(grid, quarter)
    data = result.data
    skip_log.extend(source.location, result.skipped)
    if result.skipped:
        logger.warning(f"{source.name}: {len(result.skipped)} row(s) could not be linked and were skipped")

    stat_counts = dict(
        objectives=len(data.objectives),
        narratives=len(data.narratives),
        commitments=data.commitment_count,
        tasks=data.task_count,
        done_tasks=data.done_task_count,
        skipped_rows=len(result.skipped),
    )

    if not data.narratives:
        msg = "no narratives found"
        logger.warning(f"{source.name}: {msg}")
        empty = replace(source, status=InputStatus.EMPTY, error=msg)
        return empty, InputStat(name=source.name, status=empty.status.value, error=msg, **stat_counts)

    payload = to_payload(data)
    try:
        out_path = write_payload(payload, _output_path(output_dir, source.stem, claimed))
    except OSError as e:
        msg = f"cannot write output: {e}"
        logger.error(f"{source.name}: {msg}")
        failed = replace(source, status=InputStatus.FAILED, error=msg)
        return failed, InputStat(name=source.name, status=failed.status.value, error=msg, **stat_counts)
    logger.info(
        f"{source.name}: narratives={stat_counts['narratives']} "
        f"commitments={stat_counts['commitments']} tasks={stat_counts['tasks']} -> {out_path}"
    )

    pushed = False
    if push:
        if not config.push.url:
            msg = "push requested but no push url configured"
            logger.error(f"{source.name}: {msg}")
            failed = replace(source, status=InputStatus.FAILED, error=msg)
            return failed, InputStat(
                name=source.name, status=failed.status.value, output_path=str(out_path),
                error=msg, **stat_counts,
            )
        try:
            push_payload(config.push.url, payload, timeout=config.push.timeout_seconds)
        except PushError as e:
            logger.error(f"{source.name}: {e}")
            failed = replace(source, status=InputStatus.FAILED, error=str(e))
            return failed, InputStat(
                name=source.name, status=failed.status.value, output_path=str(out_path),
                error=str(e), **stat_counts,
            )
        pushed = True
        logger.info(f"{source.name}: pushed to {config.push.url}")

    done = replace(source, status=InputStatus.SUCCESS)
    return done, InputStat(
        name=source.name, status=done.status.value, output_path=str(out_path),
        pushed=pushed, **stat_counts,
    )


def process_inputs(
    sources: list[InputSource],
    config: ImportConfig,
    *,
    quarter: str | None = None,
    output_dir: Path | None = None,
    push: bool = False,
    sheets_client: SheetsClient | None = None,
    skip_log: SkipLogBuffer | None = None,
) -> ProcessingResult:
    """Parse every input and aggregate the run result.

    Args:
        sources: Inputs from resolve_inputs()
        config: Loaded configuration
        quarter: Quarter label for the parsed data (None -> config.default_quarter)
        output_dir: Where JSON payloads go (None -> config.output_directory)
        push: POST each payload to config.push.url
        sheets_client: Injected client (tests); created lazily otherwise
        skip_log: Injected buffer (tests); flushed at the end of the run

    Returns:
        ProcessingResult with one InputStat per input
    """
    start_time = datetime.now(UTC)
    quarter = quarter or config.default_quarter
    output_dir = output_dir or Path(config.output_directory)
    skip_log = skip_log if skip_log is not None else SkipLogBuffer()

    stats: list[InputStat] = []
    claimed: set[Path] = set()
    success_count = 0
    failed_count = 0

    with ProgressTracker(len(sources), description="Parsing inputs") as progress:
        for source in sources:
            progress.start_input(source.name)
            outcome, stat = _process_single_input(
                source,
                config,
                quarter=quarter,
                output_dir=output_dir,
                claimed=claimed,
                push=push,
                skip_log=skip_log,
                sheets_client=sheets_client,
            )
            if outcome.status is InputStatus.SUCCESS:
                success_count += 1
            else:
                failed_count += 1
            stats.append(stat)
            progress.set_postfix(success=success_count, failed=failed_count)
            progress.finish_input()

    try:
        log_path = skip_log.flush()
    except OSError as e:
        # スキップログ書き込み失敗で全体を失敗させない
        logger.warning(f"failed to write skip log: {e}")
    else:
        if log_path is not None:
            logger.info(f"skipped rows written to {log_path}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_inputs=success_count,
        failed_inputs=failed_count,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        input_stats=stats,
    )
