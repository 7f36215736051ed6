from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from ..models.config_models import NormalizationRule
from .reader import MissingColumnError, find_column, is_blank_row, is_marked
from .writer import ensure_columns

"""Answer normalization applied before scoring.

Value maps are not idempotent (``2 -> 3`` then ``3 -> 4`` on the next pass),
so every rule owns a status column. Rows already marked there are never
rewritten again; rows rewritten now are marked in the same grid and the
mark is saved together with the new values.
"""

__all__ = [
    "normalize_value_key",
    "normalize_columns",
    "normalized_rows",
    "apply_normalization",
]

logger = logging.getLogger(__name__)


def normalize_value_key(value: Any) -> str | None:
    """Lookup key for a raw answer: integral floats drop their '.0'."""
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def normalize_columns(
    dataset: list[list[Any]],
    rule: NormalizationRule,
    rows: Iterable[int] | None = None,
) -> int:
    """Rewrite mapped answers in place.

    Args:
        dataset: Header row followed by data rows
        rule: Columns, value map and first sheet row to rewrite
        rows: Sheet row numbers to rewrite (header = 1). None means every row
            from ``rule.start_row``. Rows before ``start_row`` are never touched.

    Returns:
        Number of cells whose value changed
    """
    first = max(rule.start_row, 2)
    if rows is None:
        rows = range(first, len(dataset) + 1)
    changed = 0
    for row_number in rows:
        if row_number < first or row_number > len(dataset):
            continue
        row = dataset[row_number - 1]
        for col in rule.columns:
            idx = col - 1
            if idx >= len(row):
                continue
            key = normalize_value_key(row[idx])
            if key is None or key not in rule.value_map:
                continue
            new_value = rule.value_map[key]
            if row[idx] != new_value:
                row[idx] = new_value
                changed += 1
    logger.debug("normalized %d cell(s) in columns %s", changed, list(rule.columns))
    return changed


def normalized_rows(dataset: list[list[Any]], status_column: str) -> set[int]:
    """Sheet row numbers already marked in ``status_column`` (empty if the column is absent)."""
    if not dataset:
        return set()
    try:
        idx = find_column(dataset[0], status_column) - 1
    except MissingColumnError:
        return set()
    return {
        offset + 2
        for offset, row in enumerate(dataset[1:])
        if idx < len(row) and is_marked(row[idx])
    }


def apply_normalization(dataset: list[list[Any]], rules: Sequence[NormalizationRule]) -> int:
    """Apply every rule to rows not yet marked, then mark those rows.

    Marks are read once before any rule runs, so rules sharing a status
    column all see the same set of pending rows.

    Args:
        dataset: Header row followed by data rows, modified in place
        rules: Normalization rules in configured order

    Returns:
        Number of cells whose value changed
    """
    if not rules:
        return 0
    done = {col: normalized_rows(dataset, col) for col in {r.status_column for r in rules}}
    to_mark: dict[str, set[int]] = {}
    changed = 0
    for rule in rules:
        pending = [
            n for n in range(max(rule.start_row, 2), len(dataset) + 1)
            if n not in done[rule.status_column] and not is_blank_row(dataset[n - 1])
        ]
        changed += normalize_columns(dataset, rule, pending)
        to_mark.setdefault(rule.status_column, set()).update(pending)

    for column, row_numbers in to_mark.items():
        if not row_numbers:
            continue
        idx = ensure_columns(dataset, [column])[column]
        for n in row_numbers:
            dataset[n - 1][idx] = True
    return changed
