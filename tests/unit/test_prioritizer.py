from __future__ import annotations

import pytest

from trupath.models.domain import Domain
from trupath.scoring.errors import ScoringError
from trupath.scoring.prioritizer import focus_domain, prioritize


def _weighted(values: list[float]) -> dict[Domain, float]:
    return dict(zip(list(Domain), values))


def test_partition_is_2_3_3_for_eight_domains():
    buckets = prioritize(_weighted([8, -20, -8, 0, 2, -1, 1, 0]))
    assert len(buckets.high) == 2
    assert len(buckets.medium) == 3
    assert len(buckets.low) == 3
    assert set(buckets.ordered()) == set(Domain)


def test_most_negative_first_and_focus_is_high_zero():
    buckets = prioritize(_weighted([8, -20, -8, 0, 2, -1, 1, 0]))
    assert buckets.high == (Domain.SPENDING, Domain.DEBT)
    assert buckets.medium == (Domain.INVESTMENTS, Domain.EMERGENCY_FUND, Domain.INSURANCE)
    assert buckets.low == (Domain.RETIREMENT, Domain.SAVINGS, Domain.INCOME)
    assert focus_domain(buckets) is buckets.high[0] is Domain.SPENDING


def test_ties_keep_input_order():
    buckets = prioritize(_weighted([0.0] * 8))
    assert buckets.ordered() == tuple(Domain)


def test_custom_split():
    buckets = prioritize(_weighted([1, 2, 3, 4, 5, 6, 7, 8]), split=(1, 1))
    assert buckets.high == (Domain.INCOME,)
    assert buckets.medium == (Domain.SPENDING,)
    assert len(buckets.low) == 6


def test_fewer_domains_than_buckets():
    buckets = prioritize({Domain.SPENDING: 83.3})
    assert buckets.high == (Domain.SPENDING,)
    assert buckets.medium == ()
    assert buckets.low == ()


def test_nan_weighted_gap_rejected():
    with pytest.raises(ScoringError, match="NaN"):
        prioritize({Domain.INCOME: float("nan"), Domain.DEBT: 1.0})


def test_empty_input_rejected():
    with pytest.raises(ScoringError):
        prioritize({})
