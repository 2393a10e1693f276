from __future__ import annotations

from dataclasses import dataclass, field

from .skipped_row import SkippedRow

"""Parsed NCT hierarchy models.

Value records produced by the hierarchy parser:
Objectives (plain strings) -> ParsedNarrative -> ParsedCommitment -> ParsedTask.

The parser appends children while it scans, so these dataclasses are mutable
during a parse call. Once parse_nct_rows() returns, callers treat the result
as a read-only value (serialize it, then discard it).
"""

__all__ = [
    "ParsedTask",
    "ParsedCommitment",
    "ParsedNarrative",
    "ParsedNctData",
    "ParseResult",
    "DEFAULT_COMMITMENT_TYPE",
]

DEFAULT_COMMITMENT_TYPE = "Quantitative"


@dataclass
class ParsedTask:
    """Single task cell from the Tasks section.

    sort_order is the position among the non-empty task cells of the row the
    task came from, so it restarts at 0 for every task row.
    """
    text: str
    is_done: bool
    sort_order: int


@dataclass
class ParsedCommitment:
    name: str
    type: str
    description: str
    dri: str  # directly responsible individual
    sort_order: int
    tasks: list[ParsedTask] = field(default_factory=list)


@dataclass
class ParsedNarrative:
    """Narrative row with its key result.

    target is the number extracted from kr (1 when kr has no number);
    metric is the raw kr text, or the name when kr is empty.
    """
    name: str
    description: str
    kr: str
    target: float
    metric: str
    sort_order: int
    commitments: list[ParsedCommitment] = field(default_factory=list)


@dataclass
class ParsedNctData:
    """Root of a parsed spreadsheet."""
    objectives: list[str]
    narratives: list[ParsedNarrative]
    quarter: str

    @property
    def commitment_count(self) -> int:
        return sum(len(n.commitments) for n in self.narratives)

    @property
    def task_count(self) -> int:
        return sum(len(c.tasks) for n in self.narratives for c in n.commitments)

    @property
    def done_task_count(self) -> int:
        return sum(
            1
            for n in self.narratives
            for c in n.commitments
            for t in c.tasks
            if t.is_done
        )


@dataclass
class ParseResult:
    """Parsed data plus the rows the parser dropped along the way."""
    data: ParsedNctData
    skipped: list[SkippedRow] = field(default_factory=list)
