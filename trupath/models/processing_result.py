from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Processing result models for the scoring driver.

RowOutcome records what happened to one response row; ProcessingResult
aggregates a whole tool run for the SUMMARY line and the exit code.
"""


class RowStatus(Enum):
    """Row lifecycle: pending -> (scored | failed)."""
    PENDING = "pending"
    SCORED = "scored"
    FAILED = "failed"


@dataclass(frozen=True)
class RowOutcome:
    row_number: int  # 1-based sheet row
    status: RowStatus
    focus_domain: str | None = None
    error: str | None = None  # failure reason summary


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one tool run."""
    tool: str
    total_rows: int  # data rows in the sheet (cohort size)
    new_rows: int  # rows without the processed marker
    scored_rows: int
    failed_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    outcomes: list[RowOutcome] | None = None
    dry_run: bool = False

    @property
    def has_failures(self) -> bool:
        return self.failed_rows > 0
