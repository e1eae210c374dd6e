"""Monte Carlo match simulation from two Poisson scoring rates."""

from __future__ import annotations

import asyncio
import collections
import dataclasses
import logging
import math
import random
import types
from typing import Callable, Dict, Generator, Tuple

from .models import (
    MarketProbabilities,
    ScoreProbability,
    SimulationResult,
    format_score,
    to_fixed,
)
from .sampling import PoissonSampler

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

DEFAULT_ITERATIONS = 18_000
PROGRESS_STEPS = 20
TOP_SCORES = 5


class SimulationCancelled(RuntimeError):
    """Raised when a cancellation token is set during a run."""


class CancellationToken:
    """Flag checked by the simulator at every progress checkpoint."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise SimulationCancelled("Simulation cancelled")


@dataclasses.dataclass(slots=True)
class _Tally:
    scores: Dict[Tuple[int, int], int] = dataclasses.field(default_factory=dict)
    win_a: int = 0
    win_b: int = 0
    draws: int = 0
    btts: int = 0
    over15: int = 0
    over25: int = 0
    over35: int = 0

    def record(self, goals_a: int, goals_b: int) -> None:
        key = (goals_a, goals_b)
        self.scores[key] = self.scores.get(key, 0) + 1
        if goals_a == goals_b:
            self.draws += 1
        elif goals_a > goals_b:
            self.win_a += 1
        else:
            self.win_b += 1
        if goals_a > 0 and goals_b > 0:
            self.btts += 1
        total = goals_a + goals_b
        if total > 1.5:
            self.over15 += 1
        if total > 2.5:
            self.over25 += 1
        if total > 3.5:
            self.over35 += 1


def _percentage(count: int, iterations: int, digits: int) -> str:
    return to_fixed(count / iterations * 100, digits)


class MatchSimulator:
    """Run independent Poisson score draws and summarise the outcomes.

    Trials execute sequentially so the first score to reach the highest
    count is reported as the mode. Every ``iterations // progress_steps``
    trials the simulator reports progress and checks the cancellation token;
    :meth:`simulate_async` additionally yields to the event loop there.
    """

    def __init__(
        self,
        sampler: PoissonSampler | None = None,
        *,
        progress_steps: int = PROGRESS_STEPS,
    ) -> None:
        if progress_steps <= 0:
            raise ValueError("progress_steps must be greater than zero")
        self.sampler = sampler or PoissonSampler()
        self.progress_steps = progress_steps

    @classmethod
    def seeded(cls, seed: int | None, **kwargs: int) -> "MatchSimulator":
        return cls(PoissonSampler(random.Random(seed)), **kwargs)

    def simulate(
        self,
        lam_a: float,
        lam_b: float,
        iterations: int = DEFAULT_ITERATIONS,
        progress: ProgressCallback | None = None,
        start_percent: float = 0.0,
        end_percent: float = 100.0,
        *,
        token: CancellationToken | None = None,
    ) -> SimulationResult:
        runner = self._run(lam_a, lam_b, iterations, progress, start_percent, end_percent, token)
        while True:
            try:
                next(runner)
            except StopIteration as stop:
                return stop.value

    async def simulate_async(
        self,
        lam_a: float,
        lam_b: float,
        iterations: int = DEFAULT_ITERATIONS,
        progress: ProgressCallback | None = None,
        start_percent: float = 0.0,
        end_percent: float = 100.0,
        *,
        token: CancellationToken | None = None,
    ) -> SimulationResult:
        runner = self._run(lam_a, lam_b, iterations, progress, start_percent, end_percent, token)
        while True:
            try:
                next(runner)
            except StopIteration as stop:
                return stop.value
            await asyncio.sleep(0)

    def _run(
        self,
        lam_a: float,
        lam_b: float,
        iterations: int,
        progress: ProgressCallback | None,
        start_percent: float,
        end_percent: float,
        token: CancellationToken | None,
    ) -> Generator[int, None, SimulationResult]:
        if iterations <= 0:
            raise ValueError("iterations must be greater than zero")
        step = max(1, iterations // self.progress_steps)
        span = end_percent - start_percent
        tally = _Tally()
        sample = self.sampler.sample
        for index in range(iterations):
            if index % step == 0:
                if token is not None:
                    token.raise_if_cancelled()
                percent = math.floor(start_percent + (index / iterations) * span)
                if progress is not None:
                    progress(percent)
                yield percent
            tally.record(sample(lam_a), sample(lam_b))
        result = self._summarise(tally, iterations)
        logger.debug(
            "Simulated %d trials with lam_a=%.3f lam_b=%.3f -> mode %s (%s%%)",
            iterations,
            lam_a,
            lam_b,
            result.score_exact,
            result.score_exact_percentage,
        )
        return result

    @staticmethod
    def _summarise(tally: _Tally, iterations: int) -> SimulationResult:
        ranked = collections.Counter(tally.scores).most_common()
        (mode_a, mode_b), mode_count = ranked[0]
        probas = MarketProbabilities(
            btts=_percentage(tally.btts, iterations, 1),
            over15=_percentage(tally.over15, iterations, 1),
            over25=_percentage(tally.over25, iterations, 1),
            over35=_percentage(tally.over35, iterations, 1),
            win_a=_percentage(tally.win_a, iterations, 1),
            win_b=_percentage(tally.win_b, iterations, 1),
            draw=_percentage(tally.draws, iterations, 1),
        )
        top_scores = tuple(
            ScoreProbability(format_score(*score), _percentage(count, iterations, 2))
            for score, count in ranked[:TOP_SCORES]
        )
        return SimulationResult(
            score_exact=format_score(mode_a, mode_b),
            score_exact_percentage=_percentage(mode_count, iterations, 2),
            probas=probas,
            top_scores=top_scores,
            iterations=iterations,
            score_counts=types.MappingProxyType(dict(tally.scores)),
        )


__all__ = [
    "CancellationToken",
    "DEFAULT_ITERATIONS",
    "MatchSimulator",
    "ProgressCallback",
    "SimulationCancelled",
    "TOP_SCORES",
]
