from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""One line of the JSON Lines error log.

Row-level failures carry the 1-based sheet row. Failures that stop a whole
tool (unreadable workbook, missing marker column) use SHEET_ROW (-1).
"""

__all__ = [
    "SHEET_ROW",
    "ErrorRecord",
]

SHEET_ROW = -1


def _utc_stamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    timestamp: str  # ISO8601 UTC, 'Z' suffix
    tool: str
    sheet: str
    row: int  # sheet row, SHEET_ROW when not tied to a row
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(tool: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        return ErrorRecord(_utc_stamp(), tool, sheet, row, error_type, message)

    @classmethod
    def for_row(cls, tool: str, sheet: str, row: int, message: str,
                error_type: str = "SCORING_ERROR") -> ErrorRecord:
        """Record for a single response row that could not be scored."""
        return cls.create(tool, sheet, row, error_type, message)

    @classmethod
    def for_sheet(cls, tool: str, sheet: str, message: str,
                  error_type: str = "TOOL_FATAL") -> ErrorRecord:
        """Record for a failure that aborted the whole tool run."""
        return cls.create(tool, sheet, SHEET_ROW, error_type, message)

    def to_json_line(self) -> str:
        # key set is fixed by the dataclass fields
        return json.dumps(asdict(self), ensure_ascii=False, default=str)
