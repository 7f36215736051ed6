from __future__ import annotations

__all__ = [
    "ScoringError",
]


class ScoringError(Exception):
    """Raised when one participant's metrics cannot be computed.

    Fatal for that row only; the per-row driver logs it and moves on.
    """
