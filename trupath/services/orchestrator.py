from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from ..excel.normalize import apply_normalization
from ..excel.reader import (
    MissingColumnError,
    SheetHeaderError,
    SheetNotFoundError,
    fetch_new_responses,
    read_response_sheet,
)
from ..excel.writer import apply_metrics, save_response_sheet
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import AppConfig, ToolConfig
from ..models.metrics import ParticipantMetrics
from ..models.processing_result import ProcessingResult, RowOutcome, RowStatus
from ..scoring.errors import ScoringError
from ..scoring.pipeline import compute_participant_metrics
from .lock import LockTimeoutError, ProcessingLock
from .progress import ProgressTracker

"""Per-row scoring driver.

For one tool:
1. Read the response sheet and apply normalization rules
2. Take a snapshot of the grid (cohort statistics use it for every row)
3. Score each row without the processed marker
4. Write metrics + processed marker back, then save the workbook once

A ScoringError fails only its own row (WARN log + error record); sheet level
problems raise ProcessingError and leave a TOOL_FATAL record (row -1) in the
error log. All of it runs under the processing lock.
"""

__all__ = [
    "ProcessingError",
    "load_tool_dataset",
    "process_tool",
    "process_all",
    "score_row",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that prevents a tool run."""
    pass


def _utc_now_naive() -> datetime:
    # Excel cells cannot hold tz-aware datetimes
    return datetime.now(UTC).replace(tzinfo=None)


def load_tool_dataset(tool: ToolConfig) -> list[list[Any]]:
    """Read the tool's response sheet and normalize rows not yet normalized.

    Raises:
        ProcessingError: workbook missing or unreadable, sheet or header missing
    """
    if not tool.workbook.exists():
        raise ProcessingError(f"workbook not found: {tool.workbook}")
    try:
        dataset = read_response_sheet(tool.workbook, tool.sheet_name)
    except (SheetNotFoundError, SheetHeaderError) as e:
        raise ProcessingError(str(e)) from e
    except (OSError, ValueError) as e:
        raise ProcessingError(f"cannot read workbook {tool.workbook}: {e}") from e

    changed = apply_normalization(dataset, tool.normalization)
    if changed:
        logger.info("tool=%s normalized %d cell(s)", tool.name, changed)
    return dataset


def score_row(tool: ToolConfig, row_number: int) -> ParticipantMetrics:
    """Score one sheet row without writing anything back."""
    dataset = load_tool_dataset(tool)
    return compute_participant_metrics(dataset, tool.profile, row_number)


def process_tool(
    tool: ToolConfig,
    *,
    dry_run: bool = False,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Score every unprocessed row of one tool's response sheet.

    The caller is expected to hold the processing lock (see process_all).

    Raises:
        ProcessingError: workbook unreadable, marker column missing, save failure
    """
    start_time = datetime.now(UTC)
    errors = error_log if error_log is not None else ErrorLogBuffer()

    dataset = load_tool_dataset(tool)
    snapshot = [list(r) for r in dataset]
    try:
        records = fetch_new_responses(dataset, tool.processed_column)
    except (MissingColumnError, SheetHeaderError) as e:
        raise ProcessingError(f"tool '{tool.name}': {e}") from e

    total_rows = len(dataset) - 1
    logger.info("tool=%s new=%d of %d row(s)", tool.name, len(records), total_rows)

    outcomes: list[RowOutcome] = []
    with ProgressTracker(len(records), description=f"Scoring {tool.name}") as progress:
        for rec in records:
            progress.start_row(rec.row_number)
            try:
                metrics = compute_participant_metrics(snapshot, tool.profile, rec.row_number)
            except ScoringError as e:
                logger.warning("tool=%s row=%d scoring failed: %s", tool.name, rec.row_number, e)
                errors.append(ErrorRecord.for_row(tool.name, tool.sheet_name, rec.row_number, str(e)))
                outcomes.append(RowOutcome(rec.row_number, RowStatus.FAILED, error=str(e)))
                progress.finish_row(success=False)
                continue

            if not dry_run:
                apply_metrics(dataset, metrics, tool.processed_column, _utc_now_naive())
            logger.debug(
                "tool=%s row=%d focus=%s high=%s",
                tool.name,
                rec.row_number,
                metrics.focus_domain.value,
                ",".join(d.value for d in metrics.priority.high),
            )
            outcomes.append(RowOutcome(rec.row_number, RowStatus.SCORED, focus_domain=metrics.focus_domain.value))
            progress.finish_row(success=True)
        scored, failed = progress.scored, progress.failed

    if scored and not dry_run:
        try:
            save_response_sheet(tool.workbook, tool.sheet_name, dataset)
        except (OSError, ValueError) as e:
            raise ProcessingError(f"cannot save workbook {tool.workbook}: {e}") from e

    if error_log is None:
        errors.flush()

    end_time = datetime.now(UTC)
    return ProcessingResult(
        tool=tool.name,
        total_rows=total_rows,
        new_rows=len(records),
        scored_rows=scored,
        failed_rows=failed,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        outcomes=outcomes,
        dry_run=dry_run,
    )


def process_all(
    config: AppConfig,
    tool_names: Iterable[str] | None = None,
    *,
    dry_run: bool = False,
) -> list[ProcessingResult]:
    """Run every selected tool under one processing lock.

    Raises:
        ProcessingError: unknown tool, lock timeout or a fatal tool error
    """
    names = list(tool_names) if tool_names is not None else list(config.tools)
    unknown = [n for n in names if n not in config.tools]
    if unknown:
        raise ProcessingError(f"unknown tool(s): {', '.join(unknown)}")

    error_log = ErrorLogBuffer()
    results: list[ProcessingResult] = []
    lock = ProcessingLock(config.lock.path, config.lock.timeout_seconds)
    try:
        with lock:
            for name in names:
                tool = config.tools[name]
                try:
                    results.append(process_tool(tool, dry_run=dry_run, error_log=error_log))
                except ProcessingError as e:
                    error_log.append(ErrorRecord.for_sheet(name, tool.sheet_name, str(e)))
                    raise
    except LockTimeoutError as e:
        raise ProcessingError(str(e)) from e
    finally:
        path = error_log.flush()
        if path is not None:
            counts = ", ".join(f"{k}={v}" for k, v in sorted(error_log.counts.items()))
            logger.info("error log written: %s (%s)", path, counts)
    return results
