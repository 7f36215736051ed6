from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..models.row_data import ResponseRecord

"""Response sheet reader and record source.

Row 1 is the header, rows 2.. are responses. Cells are kept positional
(list of lists) because the scoring engine addresses answers by column
number; header names are only used to find flag/output columns.
"""

__all__ = [
    "SheetHeaderError",
    "SheetNotFoundError",
    "MissingColumnError",
    "read_response_sheet",
    "find_column",
    "fetch_new_responses",
    "is_blank_row",
    "is_marked",
]


class SheetHeaderError(Exception):
    """Raised when the header row is missing."""

class SheetNotFoundError(Exception):
    """Raised when the workbook has no sheet with the requested name."""

class MissingColumnError(Exception):
    """Raised when a required header is absent from row 1."""


def _clean(value: Any) -> Any:
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def read_response_sheet(path: Path, sheet_name: str) -> list[list[Any]]:
    """Read one sheet into a header + rows grid.

    Blank cells become None. Header cells are stripped strings.
    """
    with pd.ExcelFile(path) as xls:
        if sheet_name not in [str(n) for n in xls.sheet_names]:
            raise SheetNotFoundError(f"sheet '{sheet_name}' not found in {path.name}")
        df = xls.parse(sheet_name, header=None)
    if df.shape[0] < 1:
        raise SheetHeaderError(f"sheet '{sheet_name}' has no header row")

    dataset: list[list[Any]] = []
    for i, raw in enumerate(df.itertuples(index=False, name=None)):
        row = [_clean(v) for v in raw]
        if i == 0:
            row = ["" if v is None else str(v).strip() for v in row]
        dataset.append(row)
    return dataset


def find_column(header: list[Any], name: str) -> int:
    """Return the 1-based column number of ``name`` in the header row."""
    for i, h in enumerate(header):
        if h == name:
            return i + 1
    raise MissingColumnError(f"column '{name}' not found in header")


def is_blank_row(row: list[Any]) -> bool:
    return all(
        v is None or (isinstance(v, float) and math.isnan(v)) or (isinstance(v, str) and v.strip() == "")
        for v in row
    )


def is_marked(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return bool(value)


def fetch_new_responses(dataset: list[list[Any]], processed_column: str = "Processed") -> list[ResponseRecord]:
    """Return rows whose processed marker is empty/falsy.

    Each record carries its sheet row number (header = 1). No side effects.

    Rows where every cell is empty (None, NaN or whitespace) are never
    returned, even though their marker is empty too. Form exports leave
    trailing blank rows and cleared entries behind; scoring them would write
    all-zero metrics onto a row with no participant and mark it processed.
    Such rows stay unmarked, so a row filled in later is picked up by the
    next run.

    Args:
        dataset: Header row followed by data rows
        processed_column: Header of the processed marker column

    Returns:
        One ResponseRecord per pending non-blank row, in sheet order

    Raises:
        SheetHeaderError: dataset has no header row
        MissingColumnError: processed marker column is absent
    """
    if not dataset:
        raise SheetHeaderError("dataset has no header row")
    header = dataset[0]
    marker_idx = find_column(header, processed_column) - 1

    records: list[ResponseRecord] = []
    for offset, row in enumerate(dataset[1:]):
        if is_blank_row(row):
            continue
        marker = row[marker_idx] if marker_idx < len(row) else None
        if is_marked(marker):
            continue
        values = {str(h): (row[i] if i < len(row) else None) for i, h in enumerate(header)}
        records.append(ResponseRecord(row_number=offset + 2, values=values))
    return records
