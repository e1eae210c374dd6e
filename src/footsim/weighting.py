"""Recency weighted expected-goals estimation."""

from __future__ import annotations

from typing import List, Sequence

DEFAULT_ALPHA = 1.3


def recency_weights(n: int, alpha: float) -> List[float]:
    """Return ``alpha ** (n - 1 - i)`` for each position, oldest first.

    The most recent entry always weighs 1. With ``alpha < 1`` older matches
    end up weighing more than recent ones; callers rely on that behaviour.
    """

    return [alpha ** (n - 1 - index) for index in range(n)]


def recency_weighted_average(scores: Sequence[float], alpha: float = DEFAULT_ALPHA) -> float:
    if not scores:
        return 0.0
    weights = recency_weights(len(scores), alpha)
    total_weight = sum(weights)
    if total_weight == 0:
        return sum(scores) / len(scores)
    weighted = sum(score * weight for score, weight in zip(scores, weights))
    return weighted / total_weight


__all__ = ["DEFAULT_ALPHA", "recency_weighted_average", "recency_weights"]
