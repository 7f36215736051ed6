from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.metrics import ParticipantMetrics
from .reader import SheetHeaderError

"""Metrics writer.

Flattens ParticipantMetrics into the response grid by header name
(Score_<Domain>, Mean_<Domain>, ..., FocusDomain, MetricsUpdated) and sets
the processed marker. Output columns missing from the header are appended
on the right. The grid is saved back with pandas/openpyxl, replacing only
the response sheet so other sheets in the workbook survive.
"""

__all__ = [
    "ensure_columns",
    "apply_metrics",
    "save_response_sheet",
]


def _pad(row: list[Any], width: int) -> None:
    if len(row) < width:
        row.extend([None] * (width - len(row)))


def ensure_columns(dataset: list[list[Any]], names: Iterable[str]) -> dict[str, int]:
    """Resolve header names to 0-based positions, appending missing headers.

    A name that appears more than once resolves to its first occurrence, the
    same column find_column() reports. Data rows are padded to the new width.

    Args:
        dataset: Header row followed by data rows, modified in place
        names: Header names that must exist

    Returns:
        Mapping of every header name in the row (plus ``names``) to its index

    Raises:
        SheetHeaderError: dataset has no header row
    """
    if not dataset:
        raise SheetHeaderError("dataset has no header row")
    header = dataset[0]
    positions: dict[str, int] = {}
    for i, h in enumerate(header):
        if h not in (None, ""):
            positions.setdefault(str(h), i)
    for name in names:
        if name not in positions:
            header.append(name)
            positions[name] = len(header) - 1
    width = len(header)
    for row in dataset[1:]:
        _pad(row, width)
    return positions


def apply_metrics(
    dataset: list[list[Any]],
    metrics: ParticipantMetrics,
    processed_column: str,
    updated_at: datetime,
) -> None:
    """Write one participant's metrics into its row and mark it processed.

    Args:
        dataset: Header row followed by data rows, modified in place
        metrics: Scoring output; ``metrics.row_number`` selects the sheet row
        processed_column: Header of the processed marker, set to True
        updated_at: Value for the MetricsUpdated column (naive UTC)
    """
    record = metrics.as_record()
    record["MetricsUpdated"] = updated_at
    positions = ensure_columns(dataset, [*record, processed_column])
    row = dataset[metrics.row_number - 1]
    for name, value in record.items():
        row[positions[name]] = value
    row[positions[processed_column]] = True


def save_response_sheet(path: Path, sheet_name: str, dataset: list[list[Any]]) -> None:
    """Write the grid back as ``sheet_name``.

    An existing workbook is opened in append mode and only this sheet is
    replaced; otherwise a new workbook is created. Rows are padded to the
    widest row and written without pandas header or index.

    Raises:
        OSError: the file cannot be written
    """
    width = max((len(r) for r in dataset), default=0)
    rows = [list(r) + [None] * (width - len(r)) for r in dataset]
    df = pd.DataFrame(rows)
    mode = "a" if path.exists() else "w"
    kwargs: dict[str, Any] = {"if_sheet_exists": "replace"} if mode == "a" else {}
    with pd.ExcelWriter(path, engine="openpyxl", mode=mode, **kwargs) as writer:
        df.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
