from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""ResponseRecord model.

A single unprocessed form response as handed out by the record source.
"""

__all__ = [
    "ResponseRecord",
]


@dataclass(frozen=True)
class ResponseRecord:
    """One response row awaiting scoring.

    The row_number refers to the sheet row (header = row 1, so the first
    data row is 2).
    """
    row_number: int  # 1-based sheet row
    values: dict[str, Any]  # Header name -> cell value
