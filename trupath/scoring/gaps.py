from __future__ import annotations

from collections.abc import Mapping

from ..models.domain import Domain
from .errors import ScoringError

__all__ = [
    "compute_gaps",
    "weight_gaps",
]


def compute_gaps(scores: Mapping[Domain, float], means: Mapping[Domain, float]) -> dict[Domain, float]:
    """gap = participant score - cohort mean, per domain.

    Args:
        scores: Participant score per domain
        means: Cohort mean per domain; may hold extra domains

    Returns:
        Gap per domain, keyed like ``scores``

    Raises:
        ScoringError: a scored domain has no cohort mean
    """
    gaps: dict[Domain, float] = {}
    for domain, score in scores.items():
        if domain not in means:
            raise ScoringError(f"no cohort mean for domain {domain.value}")
        gaps[domain] = score - means[domain]
    return gaps


def weight_gaps(gaps: Mapping[Domain, float], stress_weights: Mapping[Domain, float]) -> dict[Domain, float]:
    """weighted gap = gap * stress weight, per domain.

    Args:
        gaps: Output of compute_gaps()
        stress_weights: Felt-stress multiplier per domain

    Returns:
        Weighted gap per domain, keyed like ``gaps``

    Raises:
        ScoringError: a domain has no stress weight
    """
    weighted: dict[Domain, float] = {}
    for domain, gap in gaps.items():
        if domain not in stress_weights:
            raise ScoringError(f"missing stress weight for domain {domain.value}")
        weighted[domain] = gap * stress_weights[domain]
    return weighted
