from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for the NCT spreadsheet importer.

Aggregates per-input parse counts into the totals rendered on the SUMMARY line.
"""


@dataclass(frozen=True)
class InputStat:
    """Per-input statistics (internal helper for ProcessingResult)."""
    name: str  # 入力名
    status: str  # success/empty/failed
    objectives: int = 0
    narratives: int = 0
    commitments: int = 0
    tasks: int = 0
    done_tasks: int = 0
    skipped_rows: int = 0
    output_path: str | None = None  # JSON 出力先 (失敗時 None)
    pushed: bool = False
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one importer run."""
    success_inputs: int
    failed_inputs: int  # 読込失敗 + ナラティブ 0 件
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    input_stats: list[InputStat] | None = None

    @property
    def total_inputs(self) -> int:
        return self.success_inputs + self.failed_inputs

    def _total(self, attr: str) -> int:
        return sum(getattr(s, attr) for s in (self.input_stats or []))

    @property
    def total_objectives(self) -> int:
        return self._total("objectives")

    @property
    def total_narratives(self) -> int:
        return self._total("narratives")

    @property
    def total_commitments(self) -> int:
        return self._total("commitments")

    @property
    def total_tasks(self) -> int:
        return self._total("tasks")

    @property
    def total_done_tasks(self) -> int:
        return self._total("done_tasks")

    @property
    def total_skipped_rows(self) -> int:
        return self._total("skipped_rows")
