"""End-to-end match prediction: adjustment, averaging, simulation, coupons."""

from __future__ import annotations

import asyncio
import dataclasses
import datetime as dt
import logging
import random
from typing import Any, Mapping

from .adjustment import AdjustedInputs, ContextAdjuster
from .config import FootsimConfig, get_config
from .coupon import CouponGenerator
from .models import PredictionReport, SimulationResult
from .sampling import PoissonSampler
from .simulation import (
    CancellationToken,
    MatchSimulator,
    ProgressCallback,
    SimulationCancelled,
)
from .validation import SimulationRequest, validate_request
from .weighting import recency_weighted_average

logger = logging.getLogger(__name__)

# Progress milestones on the 0-100 scale.
PROGRESS_STARTED = 10
PROGRESS_ADJUSTED = 30
PROGRESS_AVERAGED = 50
FULL_TIME_WINDOW = (50, 80)
HALF_TIME_WINDOW = (80, 90)
PROGRESS_DONE = 100


@dataclasses.dataclass(frozen=True, slots=True)
class _Prepared:
    request: SimulationRequest
    adjusted: AdjustedInputs
    lam_a: float
    lam_b: float


def _notify(progress: ProgressCallback | None, percent: int) -> None:
    if progress is not None:
        progress(percent)


class PredictionEngine:
    """Turn a validated :class:`SimulationRequest` into a :class:`PredictionReport`.

    The engine holds no per-request state; only the random source persists
    between calls. Two engines seeded identically produce identical reports
    for identical requests (apart from the ``date`` stamp).
    """

    def __init__(
        self,
        config: FootsimConfig | None = None,
        *,
        rng: random.Random | None = None,
        adjuster: ContextAdjuster | None = None,
    ) -> None:
        self.config = config or get_config()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.adjuster = adjuster or ContextAdjuster()
        self.simulator = MatchSimulator(
            PoissonSampler(self.rng), progress_steps=self.config.progress_steps
        )

    def predict(
        self,
        request: SimulationRequest,
        progress: ProgressCallback | None = None,
        *,
        token: CancellationToken | None = None,
    ) -> PredictionReport:
        logger.info("Simulating %s vs %s", request.team_a_name, request.team_b_name)
        try:
            _notify(progress, PROGRESS_STARTED)
            prepared = self._prepare(request, progress)
            full_time = self.simulator.simulate(
                prepared.lam_a,
                prepared.lam_b,
                request.iterations,
                progress,
                *FULL_TIME_WINDOW,
                token=token,
            )
            half_time = self.simulator.simulate(
                prepared.lam_a / 2,
                prepared.lam_b / 2,
                request.iterations,
                progress,
                *HALF_TIME_WINDOW,
                token=token,
            )
            report = self._report(prepared, half_time, full_time)
        except SimulationCancelled:
            logger.info(
                "Simulation of %s vs %s cancelled", request.team_a_name, request.team_b_name
            )
            raise
        except Exception:
            logger.exception(
                "Simulation of %s vs %s failed", request.team_a_name, request.team_b_name
            )
            raise
        _notify(progress, PROGRESS_DONE)
        return report

    async def predict_async(
        self,
        request: SimulationRequest,
        progress: ProgressCallback | None = None,
        *,
        token: CancellationToken | None = None,
    ) -> PredictionReport:
        logger.info("Simulating %s vs %s", request.team_a_name, request.team_b_name)
        try:
            await asyncio.sleep(self.config.initial_delay_seconds)
            _notify(progress, PROGRESS_STARTED)
            prepared = self._prepare(request, progress)
            full_time = await self.simulator.simulate_async(
                prepared.lam_a,
                prepared.lam_b,
                request.iterations,
                progress,
                *FULL_TIME_WINDOW,
                token=token,
            )
            half_time = await self.simulator.simulate_async(
                prepared.lam_a / 2,
                prepared.lam_b / 2,
                request.iterations,
                progress,
                *HALF_TIME_WINDOW,
                token=token,
            )
            report = self._report(prepared, half_time, full_time)
        except SimulationCancelled:
            logger.info(
                "Simulation of %s vs %s cancelled", request.team_a_name, request.team_b_name
            )
            raise
        except Exception:
            logger.exception(
                "Simulation of %s vs %s failed", request.team_a_name, request.team_b_name
            )
            raise
        _notify(progress, PROGRESS_DONE)
        return report

    # -- pipeline stages ----------------------------------------------------

    def _prepare(
        self, request: SimulationRequest, progress: ProgressCallback | None
    ) -> _Prepared:
        adjusted = self.adjuster.adjust(
            request.scores_a,
            request.scores_b,
            request.context(),
            request.head_to_head,
        )
        _notify(progress, PROGRESS_ADJUSTED)
        factors = adjusted.factors
        lam_a = recency_weighted_average(adjusted.scores_a, request.alpha) * factors.factor_a
        lam_b = recency_weighted_average(adjusted.scores_b, request.alpha) * factors.factor_b
        logger.debug("Expected goals lam_a=%.4f lam_b=%.4f", lam_a, lam_b)
        _notify(progress, PROGRESS_AVERAGED)
        return _Prepared(request=request, adjusted=adjusted, lam_a=lam_a, lam_b=lam_b)

    def _report(
        self,
        prepared: _Prepared,
        half_time: SimulationResult,
        full_time: SimulationResult,
    ) -> PredictionReport:
        request = prepared.request
        generator = CouponGenerator(request.team_a_name, request.team_b_name)
        standard = self.config.coupon_threshold
        high = self.config.high_confidence_threshold
        report = PredictionReport(
            team_a_name=request.team_a_name,
            team_b_name=request.team_b_name,
            match_settings=request.context(),
            half_time=half_time,
            full_time=full_time,
            coupon=generator.generate(half_time, full_time, standard),
            coupon_high_confidence=generator.generate(half_time, full_time, high),
            expected_goals=(prepared.lam_a, prepared.lam_b),
            factors=prepared.adjusted.factors,
            thresholds=(standard, high),
            date=dt.datetime.now(dt.timezone.utc).isoformat(),
        )
        logger.info(
            "%s vs %s -> %s, %d coupon entries (%d high confidence)",
            request.team_a_name,
            request.team_b_name,
            full_time.score_exact,
            len(report.coupon),
            len(report.coupon_high_confidence),
        )
        return report


def simulate_match(
    data: Mapping[str, Any] | SimulationRequest,
    progress: ProgressCallback | None = None,
    *,
    config: FootsimConfig | None = None,
    seed: int | None = None,
) -> PredictionReport:
    """Validate ``data`` and run a one-off prediction."""

    settings = config or get_config()
    request = validate_request(data, settings)
    rng = random.Random(seed if seed is not None else settings.seed)
    return PredictionEngine(settings, rng=rng).predict(request, progress)


__all__ = ["PredictionEngine", "simulate_match"]
