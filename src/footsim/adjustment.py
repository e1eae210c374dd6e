"""Contextual corrections applied to each side's scoring average."""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, List, Sequence, Tuple

from .models import (
    AdjustmentFactors,
    HeadToHeadRecord,
    MatchContext,
    MatchType,
    TeamScoreHistory,
)

logger = logging.getLogger(__name__)

HOME_ADVANTAGE = 1.2
RANK_STEP = 0.01
RANK_FACTOR_BOUNDS = (0.8, 1.2)
COMPETITION_BOOST = 1.05
KNOCKOUT_DAMPING = 0.9
HEAD_TO_HEAD_RATIO_CAP = 1.3
HEAD_TO_HEAD_WEIGHT = 0.3


@dataclasses.dataclass(frozen=True, slots=True)
class AdjustmentStep:
    """Factors after a named adjustment has been applied."""

    name: str
    factors: AdjustmentFactors


@dataclasses.dataclass(frozen=True, slots=True)
class AdjustedInputs:
    scores_a: TeamScoreHistory
    scores_b: TeamScoreHistory
    factors: AdjustmentFactors
    trace: Tuple[AdjustmentStep, ...] = ()


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def home_advantage(context: MatchContext) -> Tuple[float, float]:
    if context.is_home_team_a:
        return HOME_ADVANTAGE, 1.0
    if context.is_home_team_b:
        return 1.0, HOME_ADVANTAGE
    return 1.0, 1.0


def rank_factor(rank_a: int, rank_b: int) -> float:
    """Boost for side A proportional to how much better it is ranked."""

    lower, upper = RANK_FACTOR_BOUNDS
    return _clamp(1 + (rank_b - rank_a) * RANK_STEP, lower, upper)


def head_to_head_factors(records: Iterable[HeadToHeadRecord]) -> Tuple[float, float]:
    goals_a = 0
    goals_b = 0
    for record in records:
        goals_a += record.score_a
        goals_b += record.score_b
    if goals_a > goals_b:
        ratio = min(HEAD_TO_HEAD_RATIO_CAP, goals_a / max(1, goals_b))
        return 1 + (ratio - 1) * HEAD_TO_HEAD_WEIGHT, 1.0
    if goals_b > goals_a:
        ratio = min(HEAD_TO_HEAD_RATIO_CAP, goals_b / max(1, goals_a))
        return 1.0, 1 + (ratio - 1) * HEAD_TO_HEAD_WEIGHT
    return 1.0, 1.0


class ContextAdjuster:
    """Derive :class:`AdjustmentFactors` from the fixture context.

    Steps run in a fixed order (home advantage, league rank, competition,
    head-to-head) so the recorded trace is reproducible. Only side A is
    corrected for the league rank gap.
    """

    def adjust(
        self,
        scores_a: Sequence[int],
        scores_b: Sequence[int],
        context: MatchContext,
        head_to_head: Sequence[HeadToHeadRecord] | None = None,
    ) -> AdjustedInputs:
        factors = AdjustmentFactors()
        trace: List[AdjustmentStep] = []

        def apply(name: str, factor_a: float, factor_b: float) -> None:
            nonlocal factors
            factors = factors.scaled(factor_a, factor_b)
            trace.append(AdjustmentStep(name, factors))
            logger.debug(
                "Adjustment %s -> factor_a=%.4f factor_b=%.4f",
                name,
                factors.factor_a,
                factors.factor_b,
            )

        if context.is_home_team_a or context.is_home_team_b:
            apply("home_advantage", *home_advantage(context))

        if (
            context.match_type is MatchType.LEAGUE
            and context.rank_a is not None
            and context.rank_b is not None
        ):
            apply("rank", rank_factor(context.rank_a, context.rank_b), 1.0)

        if context.match_type is MatchType.COMPETITION:
            apply("competition", COMPETITION_BOOST, COMPETITION_BOOST)
            if context.is_knockout_stage:
                apply("knockout", KNOCKOUT_DAMPING, KNOCKOUT_DAMPING)

        if head_to_head:
            h2h_a, h2h_b = head_to_head_factors(head_to_head)
            if h2h_a != 1.0 or h2h_b != 1.0:
                apply("head_to_head", h2h_a, h2h_b)

        return AdjustedInputs(
            scores_a=tuple(scores_a),
            scores_b=tuple(scores_b),
            factors=factors,
            trace=tuple(trace),
        )


__all__ = [
    "AdjustedInputs",
    "AdjustmentStep",
    "ContextAdjuster",
    "head_to_head_factors",
    "home_advantage",
    "rank_factor",
]
