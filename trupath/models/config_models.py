from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .domain import ColumnList, ColumnRange, ColumnSpec, Domain

"""Config dataclasses for the TruPath scoring tools.

These are the immutable structures injected into the scoring pipeline. Each
tool carries its own ScoringProfile so the domain map and stress weights can
vary per tool without redefining module globals.
"""

__all__ = [
    "DEFAULT_DOMAIN_COLUMNS",
    "DEFAULT_STRESS_WEIGHTS",
    "DEFAULT_PRIORITY_SPLIT",
    "ScoringProfile",
    "NormalizationRule",
    "ToolConfig",
    "LockConfig",
    "AppConfig",
]


# Financial clarity tool layout ("Form Responses 1")
DEFAULT_DOMAIN_COLUMNS: Mapping[Domain, ColumnSpec] = MappingProxyType({
    Domain.INCOME: ColumnList((6, 7, 8, 9, 55)),
    Domain.SPENDING: ColumnRange(12, 15),
    Domain.DEBT: ColumnList((21, 22, 23, 24, 56)),
    Domain.EMERGENCY_FUND: ColumnRange(28, 31),
    Domain.SAVINGS: ColumnRange(33, 36),
    Domain.INVESTMENTS: ColumnRange(38, 41),
    Domain.RETIREMENT: ColumnList((43, 44, 45, 46, 57)),
    Domain.INSURANCE: ColumnList((48, 51, 52, 53)),
})

# Felt-stress multipliers
DEFAULT_STRESS_WEIGHTS: Mapping[Domain, float] = MappingProxyType({
    Domain.INCOME: 2,
    Domain.SPENDING: 5,
    Domain.DEBT: 4,
    Domain.EMERGENCY_FUND: 3,
    Domain.SAVINGS: 2,
    Domain.INVESTMENTS: 1,
    Domain.RETIREMENT: 1,
    Domain.INSURANCE: 1,
})

DEFAULT_PRIORITY_SPLIT = (2, 3)  # high, medium (rest = low)


@dataclass(frozen=True)
class ScoringProfile:
    """Static scoring configuration for one tool.

    domain_columns decides which domains are scored and in which order they
    enter the prioritizer (ties keep this order).
    """
    domain_columns: Mapping[Domain, ColumnSpec] = field(default_factory=lambda: DEFAULT_DOMAIN_COLUMNS)
    stress_weights: Mapping[Domain, float] = field(default_factory=lambda: DEFAULT_STRESS_WEIGHTS)
    priority_split: tuple[int, int] = DEFAULT_PRIORITY_SPLIT
    coerce_missing_as_zero: bool = True  # False -> non-numeric cells raise

    def __post_init__(self) -> None:
        # freeze caller supplied dicts
        if not isinstance(self.domain_columns, MappingProxyType):
            object.__setattr__(self, "domain_columns", MappingProxyType(dict(self.domain_columns)))
        if not isinstance(self.stress_weights, MappingProxyType):
            object.__setattr__(self, "stress_weights", MappingProxyType(dict(self.stress_weights)))
        object.__setattr__(self, "priority_split", tuple(self.priority_split))

    @property
    def domains(self) -> list[Domain]:
        return list(self.domain_columns)


@dataclass(frozen=True)
class NormalizationRule:
    """Raw answer -> normalized value rewrite applied before scoring."""
    columns: tuple[int, ...]  # 1-based sheet columns
    value_map: Mapping[str, Any]  # keys are the raw values as strings
    start_row: int = 2  # first sheet row to rewrite (header = 1)
    status_column: str = "Normalized"  # marker header; marked rows are never rewritten again


@dataclass(frozen=True)
class ToolConfig:
    """One scoring tool bound to a response workbook."""
    name: str
    workbook: Path
    profile: ScoringProfile
    sheet_name: str = "Form Responses 1"
    processed_column: str = "Processed"
    normalization: tuple[NormalizationRule, ...] = ()


@dataclass(frozen=True)
class LockConfig:
    path: Path = Path("logs/trupath.lock")
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object (config/scoring.yml)."""
    tools: dict[str, ToolConfig]
    lock: LockConfig = field(default_factory=LockConfig)
