"""Builders for hand-crafted simulation results and reports."""

from __future__ import annotations

from typing import Tuple

from footsim.models import (
    AdjustmentFactors,
    CouponEntry,
    MarketProbabilities,
    MatchContext,
    PredictionReport,
    ScoreProbability,
    SimulationResult,
)


def make_result(
    score_exact: str = "1-1",
    score_exact_percentage: str = "12.50",
    *,
    btts: str = "50.0",
    over15: str = "60.0",
    over25: str = "40.0",
    over35: str = "20.0",
    win_a: str = "40.0",
    win_b: str = "30.0",
    draw: str = "30.0",
    iterations: int = 10_000,
) -> SimulationResult:
    return SimulationResult(
        score_exact=score_exact,
        score_exact_percentage=score_exact_percentage,
        probas=MarketProbabilities(
            btts=btts,
            over15=over15,
            over25=over25,
            over35=over35,
            win_a=win_a,
            win_b=win_b,
            draw=draw,
        ),
        top_scores=(ScoreProbability(score_exact, score_exact_percentage),),
        iterations=iterations,
    )


def make_report(
    team_a: str = "Lyon",
    team_b: str = "Nantes",
    full_time: SimulationResult | None = None,
    *,
    settings: MatchContext | None = None,
    coupon: Tuple[CouponEntry, ...] = (),
    date: str = "2024-05-01T12:00:00+00:00",
) -> PredictionReport:
    full_time = full_time or make_result()
    return PredictionReport(
        team_a_name=team_a,
        team_b_name=team_b,
        match_settings=settings or MatchContext(),
        half_time=make_result("0-0", "35.00"),
        full_time=full_time,
        coupon=coupon,
        coupon_high_confidence=coupon[:1],
        expected_goals=(1.5, 1.1),
        factors=AdjustmentFactors(),
        thresholds=(70.0, 75.0),
        date=date,
    )
