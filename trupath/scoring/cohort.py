from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.config_models import ScoringProfile
from ..models.domain import ColumnSpec, Domain
from .aggregator import CoercePolicy, coerce_missing_as_zero, domain_score

"""Cohort statistics: per-domain population means.

Every data row takes part, processed or not. Nothing is cached; each call
recomputes from the rows it is given. An empty cohort yields NaN and it is
up to the caller to reject it.
"""

__all__ = [
    "cohort_mean",
    "cohort_means",
]


def cohort_mean(
    data_rows: Sequence[Sequence[Any]],
    spec: ColumnSpec,
    coerce: CoercePolicy = coerce_missing_as_zero,
) -> float:
    """Mean domain score over every data row.

    Args:
        data_rows: Data rows without the header
        spec: Answer columns of the domain
        coerce: Cell policy passed to domain_score()

    Returns:
        Arithmetic mean of the row scores, NaN for an empty cohort

    Raises:
        ScoringError: a cell is rejected by ``coerce`` (strict policy)
    """
    if not data_rows:
        return float("nan")
    total = sum(domain_score(row, spec, coerce) for row in data_rows)
    return total / len(data_rows)


def cohort_means(
    data_rows: Sequence[Sequence[Any]],
    profile: ScoringProfile,
    coerce: CoercePolicy = coerce_missing_as_zero,
) -> dict[Domain, float]:
    """Cohort mean for each domain of ``profile``.

    Args:
        data_rows: Data rows without the header
        profile: Supplies the domains and their answer columns
        coerce: Cell policy passed to domain_score()

    Returns:
        Mapping keyed in ``profile.domain_columns`` order

    Raises:
        ScoringError: a cell is rejected by ``coerce`` (strict policy)
    """
    return {
        domain: cohort_mean(data_rows, spec, coerce)
        for domain, spec in profile.domain_columns.items()
    }
