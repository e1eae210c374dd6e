"""Recency weighted average tests."""

from __future__ import annotations

import statistics
from typing import List

import pytest
from hypothesis import given, strategies as st

from footsim.weighting import recency_weighted_average, recency_weights

_alphas = st.floats(min_value=0.0, max_value=3.0, allow_nan=False, allow_infinity=False)
_histories = st.lists(st.integers(min_value=0, max_value=9), min_size=1, max_size=30)


@given(alpha=_alphas, goals=st.integers(min_value=0, max_value=12))
def test_single_match_history_is_returned_unchanged(alpha: float, goals: int) -> None:
    assert recency_weighted_average([goals], alpha) == pytest.approx(goals)


@given(scores=_histories)
def test_alpha_one_is_the_arithmetic_mean(scores: List[int]) -> None:
    assert recency_weighted_average(scores, 1.0) == pytest.approx(statistics.fmean(scores))


@given(alpha=_alphas, scores=_histories)
def test_average_stays_within_observed_range(alpha: float, scores: List[int]) -> None:
    value = recency_weighted_average(scores, alpha)
    assert min(scores) - 1e-9 <= value <= max(scores) + 1e-9


def test_empty_history_is_zero() -> None:
    assert recency_weighted_average([], 1.3) == 0.0


def test_most_recent_match_always_weighs_one() -> None:
    weights = recency_weights(4, 2.0)
    assert weights == [8.0, 4.0, 2.0, 1.0]


def test_alpha_above_one_favours_recent_matches() -> None:
    # oldest first: a recent scoring run pulls the average up
    assert recency_weighted_average([0, 0, 3], 2.0) > statistics.fmean([0, 0, 3])


def test_alpha_below_one_favours_older_matches() -> None:
    assert recency_weighted_average([3, 0, 0], 0.5) > statistics.fmean([3, 0, 0])


def test_alpha_zero_keeps_only_latest_match() -> None:
    assert recency_weighted_average([4, 4, 1], 0.0) == pytest.approx(1.0)


def test_known_value() -> None:
    # weights 1.69, 1.3, 1 for [2, 1, 3]
    expected = (2 * 1.69 + 1 * 1.3 + 3 * 1.0) / (1.69 + 1.3 + 1.0)
    assert recency_weighted_average([2, 1, 3], 1.3) == pytest.approx(expected)
