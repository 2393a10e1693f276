from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..grid.reader import GridReadError
from ..logging.init import enable_debug, log_summary, setup_logging
from ..services.orchestrator import (
    ProcessingError,
    describe_grid,
    load_grid,
    process_inputs,
    resolve_inputs,
)
from ..services.summary import render_summary_line
from ..sheets.client import SheetsError

"""CLI entrypoint.

Flow:
- Load .env (overrides process environment), then the YAML config
- Resolve inputs: CLI paths, else the configured Google Sheet
- Parse each input, write JSON payloads, optionally push them
- Print the SUMMARY line and exit with the contract exit code
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; a broken file only produces a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="nct-import",
        description="Parse NCT planning spreadsheets (CSV / XLSX / Google Sheets) into hierarchy payloads",
    )
    p.add_argument("inputs", nargs="*", type=Path, help=".csv or .xlsx files (default: configured Google Sheet)")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--quarter", default=None, help="Quarter label for parsed narratives")
    p.add_argument("--sheet", default=None, help="Sheet name for .xlsx inputs (default: first sheet)")
    p.add_argument("--sheets-url", default=None, help="Google Sheets URL (overrides config)")
    p.add_argument("--output-dir", type=Path, default=None, help="Directory for JSON payloads")
    p.add_argument("--push", action="store_true", help="POST each payload to the configured push url")
    p.add_argument("--inspect-data", action="store_true", help="Print section markers & header rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _inspect_data(sources, cfg) -> int:
    for source in sources:
        print(f"INPUT: {source.name}")
        try:
            grid = load_grid(source, cfg)
        except (GridReadError, SheetsError) as e:
            print(f"  read_error: {e}")
            continue
        for line in describe_grid(grid):
            print(f"  {line}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # NOTE: 空リスト [] は sys.argv[1:] で置き換えない
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config, must_exist=args.config is not None)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.sheet:
        cfg = replace(cfg, excel_sheet=args.sheet)

    sheets_url = args.sheets_url or cfg.sheets.url
    try:
        sources = resolve_inputs(list(args.inputs), sheets_url)
    except ProcessingError as e:
        logger.error(f"inputs: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(sources, cfg)

    logger.info(f"Parsing {len(sources)} input(s)")
    result = process_inputs(
        sources,
        cfg,
        quarter=args.quarter,
        output_dir=args.output_dir,
        push=args.push,
    )

    summary_line = render_summary_line(result)
    # log_summary が "SUMMARY " を付けるので除去
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_inputs > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
