from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any

from ..models.domain import ColumnSpec
from .errors import ScoringError

"""Domain aggregator: per-row domain sums.

Cells are addressed by 1-based column position; rows are 0-based sequences
(the header has already been stripped or is simply another row).

Numeric coercion is an explicit policy function so callers (and tests) pick
it deliberately:

- coerce_missing_as_zero: empty / non-numeric -> 0 (original behaviour)
- strict_numeric: empty -> 0, anything else non-numeric raises ScoringError
"""

__all__ = [
    "CoercePolicy",
    "coerce_missing_as_zero",
    "strict_numeric",
    "domain_score",
]

CoercePolicy = Callable[[Any], float]


def _to_number(value: Any) -> float | None:
    """Return value as float, or None when it has no numeric reading."""
    if value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        f = float(value)
        return None if math.isnan(f) else f
    if isinstance(value, str):
        stripped = value.strip()
        if stripped == "":
            return 0.0
        try:
            f = float(stripped)
        except ValueError:
            return None
        return None if math.isnan(f) else f
    # numpy scalars and Decimals
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(f) else f


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def coerce_missing_as_zero(value: Any) -> float:
    """Default policy: anything without a numeric reading counts as 0."""
    number = _to_number(value)
    return 0.0 if number is None else number


def strict_numeric(value: Any) -> float:
    """Strict policy: blanks count as 0, other non-numeric cells raise."""
    if _is_blank(value):
        return 0.0
    number = _to_number(value)
    if number is None:
        raise ScoringError(f"non-numeric cell value: {value!r}")
    return number


def domain_score(
    row: Sequence[Any],
    spec: ColumnSpec,
    coerce: CoercePolicy = coerce_missing_as_zero,
) -> float:
    """Sum the cells of ``row`` addressed by ``spec``.

    Columns past the end of the row count as empty cells.
    """
    total = 0.0
    width = len(row)
    for col in spec.columns():
        idx = col - 1
        total += coerce(row[idx] if idx < width else None)
    return total
