from __future__ import annotations

import math
from collections.abc import Mapping

from ..models.config_models import DEFAULT_PRIORITY_SPLIT
from ..models.domain import Domain
from ..models.metrics import PriorityBuckets
from .errors import ScoringError

"""Prioritizer: rank domains by weighted gap.

Most negative weighted gap (furthest below the cohort after weighting) comes
first. sorted() is stable, so equal weighted gaps keep the input mapping
order, which is the profile's domain order.
"""

__all__ = [
    "prioritize",
    "focus_domain",
]


def prioritize(
    weighted_gaps: Mapping[Domain, float],
    split: tuple[int, int] = DEFAULT_PRIORITY_SPLIT,
) -> PriorityBuckets:
    high_count, medium_count = split
    if high_count < 1 or medium_count < 0:
        raise ScoringError(f"invalid priority split: {split}")
    for domain, value in weighted_gaps.items():
        if math.isnan(value):
            raise ScoringError(f"weighted gap for {domain.value} is NaN")
    if len(weighted_gaps) < 1:
        raise ScoringError("no domains to prioritize")

    ranked = sorted(weighted_gaps, key=lambda d: weighted_gaps[d])
    return PriorityBuckets(
        high=tuple(ranked[:high_count]),
        medium=tuple(ranked[high_count:high_count + medium_count]),
        low=tuple(ranked[high_count + medium_count:]),
    )


def focus_domain(buckets: PriorityBuckets) -> Domain:
    return buckets.high[0]
