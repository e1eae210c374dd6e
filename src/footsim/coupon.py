"""Derive a bet coupon from simulated match probabilities."""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Tuple

from .models import CouponEntry, SimulationResult, round_half_up, to_fixed

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 70.0
HIGH_CONFIDENCE_THRESHOLD = 75.0

GOAL_LINES = (("over15", "1.5"), ("over25", "2.5"), ("over35", "3.5"))


@dataclasses.dataclass(frozen=True, slots=True)
class SecondaryEstimate:
    """Heuristic count estimate with its confidence percentage."""

    market: str
    estimate: int
    confidence: float


def match_intensity(goals_a: int, goals_b: int) -> float:
    intensity = 0.0
    if abs(goals_a - goals_b) < 1:
        intensity += 1
    if goals_a + goals_b > 2.5:
        intensity += 0.5
    if goals_a > 0 and goals_b > 0:
        intensity += 0.5
    return intensity


def estimate_corners(goals_a: int, goals_b: int) -> SecondaryEstimate:
    total = goals_a + goals_b
    return SecondaryEstimate(
        "corners", round_half_up(7 + total * 1.3), min(95, 70 + total * 3)
    )


def estimate_cards(goals_a: int, goals_b: int) -> SecondaryEstimate:
    intensity = match_intensity(goals_a, goals_b)
    return SecondaryEstimate(
        "cards", round_half_up(3 + intensity * 1.5), min(90, 65 + intensity * 7)
    )


def estimate_fouls(goals_a: int, goals_b: int) -> SecondaryEstimate:
    cards = estimate_cards(goals_a, goals_b)
    return SecondaryEstimate("fouls", cards.estimate * 4, cards.confidence - 5)


def estimate_throw_ins(goals_a: int, goals_b: int) -> SecondaryEstimate:
    intensity = match_intensity(goals_a, goals_b)
    return SecondaryEstimate(
        "throw_ins", round_half_up(25 + intensity * 3), min(85, 60 + intensity * 5)
    )


class CouponGenerator:
    """Emit every market whose probability clears a confidence threshold.

    Goal markets come from the full-time Monte Carlo probabilities. Corners,
    cards, fouls and throw-ins are extrapolated from the full-time mode score
    alone and are only as good as that heuristic.
    """

    def __init__(
        self,
        team_a_label: str = "Team A",
        team_b_label: str = "Team B",
    ) -> None:
        self.team_a_label = team_a_label
        self.team_b_label = team_b_label

    def generate(
        self,
        half_time: SimulationResult,
        full_time: SimulationResult,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> Tuple[CouponEntry, ...]:
        del half_time  # half-time markets are not offered
        coupon: List[CouponEntry] = []
        coupon.extend(self._exact_score(full_time, threshold))
        coupon.extend(self._both_teams_to_score(full_time, threshold))
        coupon.extend(self._goal_lines(full_time, threshold))
        coupon.extend(self._double_chance(full_time, threshold))
        coupon.extend(self._match_result(full_time, threshold))
        coupon.extend(self._secondary_markets(full_time, threshold))
        logger.debug("Coupon at %.1f%% threshold has %d entries", threshold, len(coupon))
        return tuple(coupon)

    # -- goal markets -------------------------------------------------------

    def _exact_score(self, result: SimulationResult, threshold: float) -> List[CouponEntry]:
        if float(result.score_exact_percentage) > threshold:
            return [CouponEntry("Exact score", result.score_exact, result.score_exact_percentage)]
        return []

    def _both_teams_to_score(
        self, result: SimulationResult, threshold: float
    ) -> List[CouponEntry]:
        btts = result.probas.value("btts")
        if btts > threshold:
            return [CouponEntry("BTTS", "Yes", result.probas.btts)]
        if 100 - btts > threshold:
            return [CouponEntry("BTTS", "No", to_fixed(100 - btts, 1))]
        return []

    def _goal_lines(self, result: SimulationResult, threshold: float) -> List[CouponEntry]:
        entries: List[CouponEntry] = []
        for market, line in GOAL_LINES:
            over = result.probas.value(market)
            if over > threshold:
                entries.append(CouponEntry(f"Over {line}", "Yes", getattr(result.probas, market)))
            elif 100 - over > threshold:
                entries.append(CouponEntry(f"Under {line}", "Yes", to_fixed(100 - over, 1)))
        return entries

    def _double_chance(self, result: SimulationResult, threshold: float) -> List[CouponEntry]:
        win_a = result.probas.value("win_a")
        draw = result.probas.value("draw")
        win_b = result.probas.value("win_b")
        combinations = (
            (f"1X ({self.team_a_label} or draw)", win_a + draw),
            (f"12 ({self.team_a_label} or {self.team_b_label})", win_a + win_b),
            (f"X2 (draw or {self.team_b_label})", draw + win_b),
        )
        return [
            CouponEntry("Double chance", pick, to_fixed(probability, 1))
            for pick, probability in combinations
            if probability > threshold
        ]

    def _match_result(self, result: SimulationResult, threshold: float) -> List[CouponEntry]:
        outcomes = (
            (f"1 ({self.team_a_label} win)", result.probas.win_a),
            (f"2 ({self.team_b_label} win)", result.probas.win_b),
            ("X (draw)", result.probas.draw),
        )
        for pick, probability in outcomes:
            if float(probability) > threshold:
                return [CouponEntry("1X2", pick, probability)]
        return []

    # -- heuristic markets --------------------------------------------------

    def _secondary_markets(
        self, result: SimulationResult, threshold: float
    ) -> List[CouponEntry]:
        goals_a, goals_b = result.mode_goals
        entries: List[CouponEntry] = []

        corners = estimate_corners(goals_a, goals_b)
        if corners.confidence > threshold:
            if corners.estimate >= 10:
                entries.append(_heuristic("Corners", "Over 8.5", corners))
            elif corners.estimate <= 7:
                entries.append(_heuristic("Corners", "Under 9.5", corners))

        cards = estimate_cards(goals_a, goals_b)
        if cards.confidence > threshold:
            if cards.estimate >= 5:
                entries.append(_heuristic("Yellow cards", "Over 3.5", cards))
            elif cards.estimate <= 3:
                entries.append(_heuristic("Yellow cards", "Under 3.5", cards))

        fouls = estimate_fouls(goals_a, goals_b)
        if fouls.confidence > threshold:
            pick = "Over 19.5" if fouls.estimate >= 20 else "Under 21.5"
            entries.append(_heuristic("Fouls", pick, fouls))

        throw_ins = estimate_throw_ins(goals_a, goals_b)
        if throw_ins.confidence > threshold:
            pick = "Over 27.5" if throw_ins.estimate >= 30 else "Under 32.5"
            entries.append(_heuristic("Throw-ins", pick, throw_ins))

        return entries


def _heuristic(market: str, pick: str, estimate: SecondaryEstimate) -> CouponEntry:
    return CouponEntry(market, pick, to_fixed(estimate.confidence, 1))


__all__ = [
    "CouponGenerator",
    "DEFAULT_THRESHOLD",
    "HIGH_CONFIDENCE_THRESHOLD",
    "SecondaryEstimate",
    "estimate_cards",
    "estimate_corners",
    "estimate_fouls",
    "estimate_throw_ins",
    "match_intensity",
]
