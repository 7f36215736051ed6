from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress bar (tqdm, TTY only).

One bar per tool run, advanced once per response row with running
scored/failed counts as postfix. Without a terminal on stdout the tracker
only counts, so CI logs stay free of control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    def __init__(self, total_rows: int, *, description: str = "Scoring rows") -> None:
        self.total_rows = total_rows
        self.description = description
        self.scored = 0
        self.failed = 0
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=True,
                ncols=80,
                ascii=True,
            )

    @property
    def done(self) -> int:
        return self.scored + self.failed

    def start_row(self, row_number: int) -> None:
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} (row {row_number})", refresh=False)

    def finish_row(self, success: bool = True) -> None:
        if success:
            self.scored += 1
        else:
            self.failed += 1
        if self.pbar is not None:
            self.pbar.set_description(self.description, refresh=False)
            self.pbar.set_postfix(scored=self.scored, failed=self.failed, refresh=False)
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
