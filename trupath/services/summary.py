from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format:
SUMMARY tool={name} rows={total} new={new} scored={scored} failed={failed} elapsed_sec={elapsed}
(``dry_run=1`` is appended for dry runs)
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for one tool run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     tool="financial_clarity", total_rows=10, new_rows=3, scored_rows=3,
        ...     failed_rows=0, start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY tool=financial_clarity rows=10 new=3 scored=3 failed=0 elapsed_sec=2'
    """
    line = (
        f"SUMMARY tool={result.tool} "
        f"rows={result.total_rows} "
        f"new={result.new_rows} "
        f"scored={result.scored_rows} "
        f"failed={result.failed_rows} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
    if result.dry_run:
        line += " dry_run=1"
    return line
