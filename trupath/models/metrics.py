from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .domain import Domain

"""ParticipantMetrics model.

Derived, ephemeral result of scoring one response row. It is only flattened
back into sheet columns by the metrics writer (``as_record``).
"""

__all__ = [
    "PriorityBuckets",
    "ParticipantMetrics",
    "metric_column_names",
]


@dataclass(frozen=True)
class PriorityBuckets:
    high: tuple[Domain, ...]
    medium: tuple[Domain, ...]
    low: tuple[Domain, ...]

    def ordered(self) -> tuple[Domain, ...]:
        return self.high + self.medium + self.low


@dataclass(frozen=True)
class ParticipantMetrics:
    """Per-domain scores, cohort means, gaps and priorities for one row."""
    row_number: int  # 1-based sheet row (header = 1)
    scores: dict[Domain, float]
    cohort_means: dict[Domain, float]
    gaps: dict[Domain, float]
    weighted_gaps: dict[Domain, float]
    priority: PriorityBuckets
    focus_domain: Domain

    def as_record(self) -> dict[str, Any]:
        """Flatten to output column name -> value (sheet header names)."""
        record: dict[str, Any] = {}
        for d in self.scores:
            record[f"Score_{d.value}"] = self.scores[d]
            record[f"Mean_{d.value}"] = self.cohort_means[d]
            record[f"Gap_{d.value}"] = self.gaps[d]
            record[f"Weighted_{d.value}"] = self.weighted_gaps[d]
        record["Priority_High"] = ", ".join(d.value for d in self.priority.high)
        record["Priority_Medium"] = ", ".join(d.value for d in self.priority.medium)
        record["Priority_Low"] = ", ".join(d.value for d in self.priority.low)
        record["FocusDomain"] = self.focus_domain.value
        return record

    def to_dict(self) -> dict[str, Any]:
        """JSON friendly nested form (CLI --row output)."""
        def _named(values: dict[Domain, float]) -> dict[str, float]:
            return {d.value: v for d, v in values.items()}

        return {
            "row": self.row_number,
            "scores": _named(self.scores),
            "cohortMeans": _named(self.cohort_means),
            "gaps": _named(self.gaps),
            "weightedGaps": _named(self.weighted_gaps),
            "priority": {
                "high": [d.value for d in self.priority.high],
                "medium": [d.value for d in self.priority.medium],
                "low": [d.value for d in self.priority.low],
            },
            "focusDomain": self.focus_domain.value,
        }


def metric_column_names(domains: list[Domain]) -> list[str]:
    """Output header names in write order (Score/Mean/Gap/Weighted per domain)."""
    names: list[str] = []
    for d in domains:
        names.extend([f"Score_{d.value}", f"Mean_{d.value}", f"Gap_{d.value}", f"Weighted_{d.value}"])
    names.extend(["Priority_High", "Priority_Medium", "Priority_Low", "FocusDomain", "MetricsUpdated"])
    return names
