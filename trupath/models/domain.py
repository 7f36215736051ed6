from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

"""Domain enumeration and column specifications for the scoring pipeline.

A domain's answers live in fixed, 1-based sheet columns. Two shapes exist:

- ColumnRange: inclusive contiguous interval [start, end]
- ColumnList: explicit (possibly non-contiguous) column indices

The legacy configuration format used bare lists and inferred the shape from
the list length (2 elements = range). ``column_spec_from_list`` keeps that
rule so existing tool definitions score identically.
"""

__all__ = [
    "Domain",
    "ColumnRange",
    "ColumnList",
    "ColumnSpec",
    "ColumnSpecError",
    "column_spec_from_list",
    "parse_column_spec",
]


class ColumnSpecError(ValueError):
    """Raised when a column specification is malformed."""


class Domain(Enum):
    """Fixed financial domain set (canonical order = declaration order)."""
    INCOME = "Income"
    SPENDING = "Spending"
    DEBT = "Debt"
    EMERGENCY_FUND = "EmergencyFund"
    SAVINGS = "Savings"
    INVESTMENTS = "Investments"
    RETIREMENT = "Retirement"
    INSURANCE = "Insurance"

    @classmethod
    def from_name(cls, name: str) -> Domain:
        for d in cls:
            if d.value == name:
                return d
        raise ValueError(f"unknown domain: {name!r}")


def _check_column(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ColumnSpecError(f"column index must be an integer: {value!r}")
    if value < 1:
        raise ColumnSpecError(f"column index must be >= 1: {value}")
    return value


@dataclass(frozen=True)
class ColumnRange:
    """Inclusive contiguous column interval (1-based)."""
    start: int
    end: int

    def __post_init__(self) -> None:
        _check_column(self.start)
        _check_column(self.end)
        if self.start > self.end:
            raise ColumnSpecError(f"range start {self.start} is after end {self.end}")

    def columns(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))


@dataclass(frozen=True)
class ColumnList:
    """Explicit column indices (1-based), summed exactly as listed."""
    indices: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.indices:
            raise ColumnSpecError("column list must not be empty")
        for c in self.indices:
            _check_column(c)

    def columns(self) -> Iterator[int]:
        return iter(self.indices)


ColumnSpec = Union[ColumnRange, ColumnList]


def column_spec_from_list(values: Sequence[int]) -> ColumnSpec:
    """Infer the spec shape from a bare list.

    Exactly two elements are read as an inclusive range, so ``[12, 15]`` covers
    columns 12, 13, 14 and 15. Use ``{"columns": [...]}`` for a genuine pair.
    """
    if len(values) == 2:
        return ColumnRange(values[0], values[1])
    return ColumnList(tuple(values))


def parse_column_spec(raw: Any) -> ColumnSpec:
    """Parse a config value into a ColumnSpec.

    Accepted forms: ``{"range": [start, end]}``, ``{"columns": [...]}`` and a
    bare list (legacy length rule).
    """
    if isinstance(raw, (ColumnRange, ColumnList)):
        return raw
    if isinstance(raw, dict):
        if set(raw) == {"range"}:
            bounds = list(raw["range"])
            if len(bounds) != 2:
                raise ColumnSpecError(f"range needs exactly 2 bounds: {bounds}")
            return ColumnRange(bounds[0], bounds[1])
        if set(raw) == {"columns"}:
            return ColumnList(tuple(raw["columns"]))
        raise ColumnSpecError(f"expected a 'range' or 'columns' key: {sorted(raw)}")
    if isinstance(raw, (list, tuple)):
        return column_spec_from_list(list(raw))
    raise ColumnSpecError(f"unsupported column spec: {raw!r}")
