"""Value objects shared by the prediction engine."""

from __future__ import annotations

import dataclasses
import enum
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Sequence, Tuple

TeamScoreHistory = Tuple[int, ...]


class MatchType(str, enum.Enum):
    """Kind of fixture being simulated."""

    FRIENDLY = "friendly"
    LEAGUE = "league"
    COMPETITION = "competition"


class CompetitionType(str, enum.Enum):
    """Cup or continental competition a fixture belongs to."""

    CHAMPIONS_LEAGUE = "championsLeague"
    EUROPA_LEAGUE = "europaLeague"
    DOMESTIC_CUP = "domesticCup"
    WORLD_CUP = "worldCup"


@dataclasses.dataclass(frozen=True, slots=True)
class HeadToHeadRecord:
    """Score of a previous meeting between the two sides."""

    score_a: int
    score_b: int


@dataclasses.dataclass(frozen=True, slots=True)
class MatchContext:
    """Fixture settings that drive the context adjustments.

    ``rank_a``/``rank_b`` only matter for league fixtures, while
    ``competition_type`` and ``is_knockout_stage`` only matter for
    competition fixtures.
    """

    match_type: MatchType = MatchType.FRIENDLY
    is_home_team_a: bool = False
    is_home_team_b: bool = False
    rank_a: int | None = None
    rank_b: int | None = None
    competition_type: CompetitionType | None = None
    is_knockout_stage: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matchType": self.match_type.value,
            "isHomeTeamA": self.is_home_team_a,
            "isHomeTeamB": self.is_home_team_b,
            "rankA": self.rank_a,
            "rankB": self.rank_b,
            "competitionType": (
                self.competition_type.value if self.competition_type else None
            ),
            "isKnockoutStage": self.is_knockout_stage,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class AdjustmentFactors:
    """Multiplicative corrections applied to each side's average."""

    factor_a: float = 1.0
    factor_b: float = 1.0

    def scaled(self, factor_a: float = 1.0, factor_b: float = 1.0) -> "AdjustmentFactors":
        return AdjustmentFactors(self.factor_a * factor_a, self.factor_b * factor_b)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def to_fixed(value: float, digits: int) -> str:
    """Format ``value`` with ``digits`` decimals, rounding halves away from zero.

    The float is converted exactly before rounding so values such as ``12.25``
    become ``"12.3"`` rather than following banker's rounding.
    """

    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""

    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_score(goals_a: int, goals_b: int) -> str:
    return f"{goals_a}-{goals_b}"


def parse_score(score: str) -> Tuple[int, int]:
    """Split an ``"A-B"`` score label into its two goal counts."""

    left, right = score.split("-", 1)
    return int(left), int(right)


# ---------------------------------------------------------------------------
# Simulation output
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, slots=True)
class ScoreProbability:
    score: str
    percentage: str

    def to_dict(self) -> Dict[str, str]:
        return {"score": self.score, "pourcentage": self.percentage}


@dataclasses.dataclass(frozen=True, slots=True)
class MarketProbabilities:
    """Market percentages formatted with one decimal."""

    btts: str
    over15: str
    over25: str
    over35: str
    win_a: str
    win_b: str
    draw: str

    def value(self, market: str) -> float:
        return float(getattr(self, market))

    def to_dict(self) -> Dict[str, str]:
        return {
            "btts": self.btts,
            "over15": self.over15,
            "over25": self.over25,
            "over35": self.over35,
            "victoireA": self.win_a,
            "victoireB": self.win_b,
            "nul": self.draw,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class SimulationResult:
    score_exact: str
    score_exact_percentage: str
    probas: MarketProbabilities
    top_scores: Tuple[ScoreProbability, ...]
    iterations: int
    score_counts: Mapping[Tuple[int, int], int] = dataclasses.field(
        default_factory=dict, compare=False, repr=False
    )

    @property
    def mode_goals(self) -> Tuple[int, int]:
        return parse_score(self.score_exact)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scoreExact": self.score_exact,
            "scoreExactPourcentage": self.score_exact_percentage,
            "probas": self.probas.to_dict(),
            "topScores": [entry.to_dict() for entry in self.top_scores],
        }


@dataclasses.dataclass(frozen=True, slots=True)
class CouponEntry:
    type: str
    pick: str
    probability: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "pari": self.pick, "probabilite": self.probability}


@dataclasses.dataclass(frozen=True, slots=True)
class PredictionReport:
    """Everything produced by one engine run."""

    team_a_name: str
    team_b_name: str
    match_settings: MatchContext
    half_time: SimulationResult
    full_time: SimulationResult
    coupon: Tuple[CouponEntry, ...]
    coupon_high_confidence: Tuple[CouponEntry, ...]
    expected_goals: Tuple[float, float]
    factors: AdjustmentFactors
    thresholds: Tuple[float, float]
    date: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "teamAName": self.team_a_name,
            "teamBName": self.team_b_name,
            "matchSettings": self.match_settings.to_dict(),
            "resultatsHT": self.half_time.to_dict(),
            "resultatsFT": self.full_time.to_dict(),
            "couponParis": _entries_to_dicts(self.coupon),
            "couponParisHighConfidence": _entries_to_dicts(self.coupon_high_confidence),
            "expectedGoals": {
                "teamA": self.expected_goals[0],
                "teamB": self.expected_goals[1],
            },
            "date": self.date,
        }


def _entries_to_dicts(entries: Sequence[CouponEntry]) -> List[Dict[str, str]]:
    return [entry.to_dict() for entry in entries]


__all__ = [
    "AdjustmentFactors",
    "CompetitionType",
    "CouponEntry",
    "HeadToHeadRecord",
    "MarketProbabilities",
    "MatchContext",
    "MatchType",
    "PredictionReport",
    "ScoreProbability",
    "SimulationResult",
    "TeamScoreHistory",
    "format_score",
    "parse_score",
    "round_half_up",
    "to_fixed",
]
