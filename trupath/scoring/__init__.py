"""Domain scoring core (pure, no I/O)."""

from .aggregator import coerce_missing_as_zero, domain_score, strict_numeric
from .cohort import cohort_mean, cohort_means
from .errors import ScoringError
from .gaps import compute_gaps, weight_gaps
from .pipeline import compute_participant_metrics
from .prioritizer import focus_domain, prioritize

__all__ = [
    "ScoringError",
    "coerce_missing_as_zero",
    "cohort_mean",
    "cohort_means",
    "compute_gaps",
    "compute_participant_metrics",
    "domain_score",
    "focus_domain",
    "prioritize",
    "strict_numeric",
    "weight_gaps",
]
