"""Poisson draws for simulated goal counts."""

from __future__ import annotations

import math
import random

MIN_RATE = 0.01


def draw_poisson(rng: random.Random, lam: float) -> int:
    """Draw one Poisson(``lam``) variate using Knuth's multiplication method.

    Rates below ``MIN_RATE`` are treated as a certain zero.
    """

    if lam < MIN_RATE:
        return 0
    L = math.exp(-lam)
    k = 0
    p = 1.0
    while True:
        k += 1
        p *= rng.random()
        if p <= L:
            return k - 1


class PoissonSampler:
    """Stateful sampler bound to a single random source."""

    def __init__(self, rng: random.Random | None = None, *, seed: int | None = None) -> None:
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self.rng = rng if rng is not None else random.Random(seed)

    def sample(self, lam: float) -> int:
        return draw_poisson(self.rng, lam)


__all__ = ["MIN_RATE", "PoissonSampler", "draw_poisson"]
