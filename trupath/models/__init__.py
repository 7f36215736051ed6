"""Domain models for the TruPath scoring tools.

This package contains the configuration, domain and result models used
throughout the application.
"""

from .config_models import AppConfig, LockConfig, NormalizationRule, ScoringProfile, ToolConfig
from .domain import ColumnList, ColumnRange, ColumnSpec, Domain
from .metrics import ParticipantMetrics, PriorityBuckets
from .row_data import ResponseRecord

__all__ = [
    # Configuration models
    "AppConfig",
    "LockConfig",
    "NormalizationRule",
    "ScoringProfile",
    "ToolConfig",
    # Domain
    "ColumnList",
    "ColumnRange",
    "ColumnSpec",
    "Domain",
    # Processing models
    "ParticipantMetrics",
    "PriorityBuckets",
    "ResponseRecord",
]
