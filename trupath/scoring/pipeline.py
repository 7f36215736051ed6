from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..models.config_models import ScoringProfile
from ..models.metrics import ParticipantMetrics
from .aggregator import CoercePolicy, coerce_missing_as_zero, domain_score, strict_numeric
from .cohort import cohort_means
from .errors import ScoringError
from .gaps import compute_gaps, weight_gaps
from .prioritizer import focus_domain, prioritize

"""Scoring pipeline for one participant row.

aggregate -> cohort means -> gaps / weighted gaps -> priority buckets.

The function is pure: it reads the dataset snapshot it is given and keeps
no state between calls.
"""

__all__ = [
    "coerce_policy_for",
    "compute_participant_metrics",
]

logger = logging.getLogger(__name__)

HEADER_ROWS = 1


def coerce_policy_for(profile: ScoringProfile) -> CoercePolicy:
    return coerce_missing_as_zero if profile.coerce_missing_as_zero else strict_numeric


def compute_participant_metrics(
    dataset: Sequence[Sequence[Any]],
    profile: ScoringProfile,
    row_number: int,
) -> ParticipantMetrics:
    """Score the sheet row ``row_number`` against the whole cohort.

    Args:
        dataset: Header row followed by data rows
        profile: Domain columns, stress weights and priority split
        row_number: 1-based sheet row (2 = first data row)

    Raises:
        ScoringError: bad row number, empty cohort, missing stress weight
    """
    data_rows = dataset[HEADER_ROWS:]
    if not data_rows:
        raise ScoringError("cohort is empty: no data rows")
    idx = row_number - HEADER_ROWS - 1
    if idx < 0 or idx >= len(data_rows):
        raise ScoringError(
            f"row {row_number} out of range (data rows are {HEADER_ROWS + 1}..{HEADER_ROWS + len(data_rows)})"
        )
    missing = [d.value for d in profile.domain_columns if d not in profile.stress_weights]
    if missing:
        raise ScoringError(f"missing stress weight for domain(s): {', '.join(missing)}")

    coerce = coerce_policy_for(profile)
    row = data_rows[idx]
    scores = {d: domain_score(row, spec, coerce) for d, spec in profile.domain_columns.items()}
    means = cohort_means(data_rows, profile, coerce)
    gaps = compute_gaps(scores, means)
    weighted = weight_gaps(gaps, profile.stress_weights)
    buckets = prioritize(weighted, profile.priority_split)

    logger.debug("row=%s focus=%s cohort=%d", row_number, buckets.high[0].value, len(data_rows))
    return ParticipantMetrics(
        row_number=row_number,
        scores=scores,
        cohort_means=means,
        gaps=gaps,
        weighted_gaps=weighted,
        priority=buckets,
        focus_domain=focus_domain(buckets),
    )
