from __future__ import annotations

import logging
import re

from ..models.config_models import DEFAULT_QUARTER
from ..models.parsed_nct import (
    DEFAULT_COMMITMENT_TYPE,
    ParsedCommitment,
    ParsedNarrative,
    ParsedNctData,
    ParsedTask,
    ParseResult,
)
from ..models.skipped_row import (
    REASON_NO_COMMITMENT,
    REASON_NO_NARRATIVE,
    REASON_UNKNOWN_NARRATIVE,
    SkippedRow,
)
from .kr_number import parse_kr_number
from .sections import HEADER_LOOKAHEAD, Grid, Row, cell, col_index, find_header_row, find_section_index

"""NCT hierarchy builder.

Expected layout (one flat table, sections separated by marker rows):

    O
    <objective rows>
    Narratives
    Name | Description | ... | KR
    <narrative rows>
    Commitments
    Narrative | Name | Type | Description | DRI
    <commitment rows>
    Tasks
    Commitment | Task 1 | Task 2 | ... | Task 7 | Done
    <task rows>

Sections are parsed in that order, each once, because commitments link to
narratives and tasks link to commitments by (case-insensitive) name. A row
that leaves its parent cell blank belongs to the most recently named parent.

Parsing is best effort: missing sections or headers yield empty tiers, rows
without a name are ignored and rows that cannot be linked are dropped. Dropped
rows are reported through ParseResult.skipped; the parsed data is the same
either way.
"""

__all__ = [
    "DEFAULT_QUARTER",
    "parse_nct_rows",
    "parse_nct_grid",
    "find_task_header_row",
]

logger = logging.getLogger(__name__)

MARKER_OBJECTIVES = "O"
MARKER_NARRATIVES = "Narratives"
MARKER_COMMITMENTS = "Commitments"
MARKER_TASKS = "Tasks"

DONE_VALUES = frozenset({"true", "yes", "1", "x"})
_TASK_COLUMN_RE = re.compile(r"^task\s*\d", re.IGNORECASE)


def parse_nct_rows(grid: Grid, quarter: str = DEFAULT_QUARTER) -> ParsedNctData:
    """Parse a spreadsheet grid into the Objectives/Narratives/Commitments/Tasks tree.

    Never raises for malformed input; always returns a (possibly empty) result.
    """
    return parse_nct_grid(grid, quarter).data


def parse_nct_grid(grid: Grid, quarter: str = DEFAULT_QUARTER) -> ParseResult:
    """Same as parse_nct_rows(), plus the list of rows that were dropped."""
    objectives_idx = find_section_index(grid, MARKER_OBJECTIVES)
    narratives_idx = find_section_index(grid, MARKER_NARRATIVES)
    commitments_idx = find_section_index(grid, MARKER_COMMITMENTS)
    tasks_idx = find_section_index(grid, MARKER_TASKS)
    logger.debug(
        "sections: objectives=%s narratives=%s commitments=%s tasks=%s",
        objectives_idx, narratives_idx, commitments_idx, tasks_idx,
    )

    skipped: list[SkippedRow] = []

    objectives: list[str] = []
    if objectives_idx is not None:
        following = [
            i for i in (narratives_idx, commitments_idx, tasks_idx)
            if i is not None and i > objectives_idx
        ]
        end = min(following) if following else len(grid)
        objectives = _parse_objectives(grid, objectives_idx + 1, end)

    narratives: list[ParsedNarrative] = []
    if narratives_idx is not None:
        if commitments_idx is not None:
            end = commitments_idx
        elif tasks_idx is not None:
            end = tasks_idx
        else:
            end = len(grid)
        narratives = _parse_narratives(grid, narratives_idx + 1, end)

    if commitments_idx is not None:
        end = tasks_idx if tasks_idx is not None else len(grid)
        _parse_commitments(grid, commitments_idx + 1, end, narratives, skipped)

    if tasks_idx is not None:
        _parse_tasks(grid, tasks_idx + 1, narratives, skipped)

    data = ParsedNctData(objectives=objectives, narratives=narratives, quarter=quarter)
    return ParseResult(data=data, skipped=skipped)


def _row_text(row: Row) -> str:
    return " | ".join(c.strip() for c in row if c.strip())


def _parse_objectives(grid: Grid, start: int, end: int) -> list[str]:
    objectives: list[str] = []
    for i in range(start, end):
        text = " ".join(c for c in grid[i] if c.strip()).strip()
        if text and text.lower() != MARKER_OBJECTIVES.lower():
            objectives.append(text)
    return objectives


def _parse_narratives(grid: Grid, start: int, end: int) -> list[ParsedNarrative]:
    header_idx = find_header_row(grid, start, ["name"])
    if header_idx is None:
        logger.debug("narratives: header row not found")
        return []
    hdr = grid[header_idx]
    name_i = col_index(hdr, "name")
    desc_i = col_index(hdr, "description")
    kr_i = col_index(hdr, "kr")

    narratives: list[ParsedNarrative] = []
    for i in range(header_idx + 1, end):
        row = grid[i]
        name = cell(row, name_i)
        if not name:
            continue
        # マーカーが独立行でない場合の保険
        if name.lower() in ("commitments", "tasks"):
            break

        kr = cell(row, kr_i)
        target = parse_kr_number(kr)
        narratives.append(
            ParsedNarrative(
                name=name,
                description=cell(row, desc_i),
                kr=kr,
                target=target if target is not None else 1,
                metric=kr or name,
                sort_order=len(narratives),
                commitments=[],
            )
        )
    return narratives


def _find_narrative(narratives: list[ParsedNarrative], name: str) -> ParsedNarrative | None:
    wanted = name.lower()
    for narrative in narratives:
        if narrative.name.lower() == wanted:
            return narrative
    return None


def _parse_commitments(
    grid: Grid,
    start: int,
    end: int,
    narratives: list[ParsedNarrative],
    skipped: list[SkippedRow],
) -> None:
    header_idx = find_header_row(grid, start, ["name"])
    if header_idx is None:
        logger.debug("commitments: header row not found")
        return
    hdr = grid[header_idx]
    narr_i = col_index(hdr, "narrative")
    name_i = col_index(hdr, "name")
    type_i = col_index(hdr, "type")
    desc_i = col_index(hdr, "description")
    dri_i = col_index(hdr, "dri")

    current: ParsedNarrative | None = None
    sort = 0
    for i in range(header_idx + 1, end):
        row = grid[i]
        name = cell(row, name_i)
        if not name:
            continue
        if name.lower() == "tasks":
            break

        narr_name = cell(row, narr_i)
        unknown = False
        if narr_name:
            found = _find_narrative(narratives, narr_name)
            if found is not None:
                current = found
            else:
                # 一致なし: 直前のポインタを維持する
                unknown = True

        if current is None:
            skipped.append(
                SkippedRow(
                    section=MARKER_COMMITMENTS,
                    row=i,
                    reason=REASON_UNKNOWN_NARRATIVE if unknown else REASON_NO_NARRATIVE,
                    text=_row_text(row),
                )
            )
            continue

        if unknown:
            logger.debug(
                "commitments: row %d names unknown narrative %r, attached to %r",
                i, narr_name, current.name,
            )
        current.commitments.append(
            ParsedCommitment(
                name=name,
                type=cell(row, type_i) or DEFAULT_COMMITMENT_TYPE,
                description=cell(row, desc_i),
                dri=cell(row, dri_i),
                sort_order=sort,
                tasks=[],
            )
        )
        sort += 1


def _find_commitment(narratives: list[ParsedNarrative], name: str) -> ParsedCommitment | None:
    wanted = name.lower()
    for narrative in narratives:
        for commitment in narrative.commitments:
            if commitment.name.lower() == wanted:
                return commitment
    return None


def find_task_header_row(grid: Grid, start: int) -> int | None:
    """Find the Tasks header: a row with a "Task <n>" cell within HEADER_LOOKAHEAD rows.

    A title row such as "Task tracker" mentions "task" but is not the header.
    """
    end = min(start + HEADER_LOOKAHEAD, len(grid))
    for idx in range(max(start, 0), end):
        if any(_TASK_COLUMN_RE.match(c.strip()) for c in grid[idx]):
            return idx
    return None


def _parse_tasks(
    grid: Grid,
    start: int,
    narratives: list[ParsedNarrative],
    skipped: list[SkippedRow],
) -> None:
    header_idx = find_task_header_row(grid, start)
    if header_idx is None:
        logger.debug("tasks: header row not found")
        return
    hdr = grid[header_idx]
    commit_i = col_index(hdr, "commitment")
    done_i = col_index(hdr, "done")
    task_cols = [idx for idx, c in enumerate(hdr) if _TASK_COLUMN_RE.match(c.strip())]

    current: ParsedCommitment | None = None
    for i in range(header_idx + 1, len(grid)):
        row = grid[i]

        commit_name = cell(row, commit_i)
        if commit_name:
            found = _find_commitment(narratives, commit_name)
            if found is not None:
                current = found

        if current is None:
            if any(c.strip() for c in row):
                skipped.append(
                    SkippedRow(
                        section=MARKER_TASKS,
                        row=i,
                        reason=REASON_NO_COMMITMENT,
                        text=_row_text(row),
                    )
                )
            continue

        done = cell(row, done_i).lower() in DONE_VALUES

        # sort_order は行ごとに 0 から振り直す
        sort = 0
        for col in task_cols:
            text = cell(row, col)
            if text:
                current.tasks.append(ParsedTask(text=text, is_done=done, sort_order=sort))
                sort += 1
