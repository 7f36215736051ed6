from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""Per-run error log.

Records are collected while tools run and appended to
``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC run start) on flush(). The file is
only created once there is something to write.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Buffered JSON Lines writer; one instance per run, used serially."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._logs_dir = logs_dir or LOGS_DIR
        self._started = datetime.now(UTC)
        self._counts: Counter[str] = Counter()

    @property
    def file_path(self) -> Path:
        return self._logs_dir / f"errors-{self._started.strftime(TIMESTAMP_FMT)}.log"

    @property
    def counts(self) -> dict[str, int]:
        """error_type -> records seen this run (flushed or not)."""
        return dict(self._counts)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)
        self._counts[record.error_type] += 1

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Append pending records; returns the log path, or None if nothing was pending."""
        if not self._records:
            return None
        self._logs_dir.mkdir(parents=True, exist_ok=True)
        lines = "".join(r.to_json_line() + "\n" for r in self._records)
        with self.file_path.open("a", encoding="utf-8") as f:
            f.write(lines)
        self._records.clear()
        return self.file_path
