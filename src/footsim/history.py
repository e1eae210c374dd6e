"""In-memory record of recent prediction reports."""

from __future__ import annotations

import collections
import logging
from typing import Deque, Iterator, List

import polars as pl

from .config import FootsimConfig, get_config
from .models import CompetitionType, MatchContext, MatchType, PredictionReport

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50

_COMPETITION_LABELS = {
    CompetitionType.CHAMPIONS_LEAGUE: "Champions League",
    CompetitionType.EUROPA_LEAGUE: "Europa League",
    CompetitionType.DOMESTIC_CUP: "Domestic Cup",
    CompetitionType.WORLD_CUP: "World Cup",
}


def outcome_label(report: PredictionReport) -> str:
    """Name the full-time outcome that is strictly most likely, else a draw."""

    probas = report.full_time.probas
    win_a = probas.value("win_a")
    win_b = probas.value("win_b")
    draw = probas.value("draw")
    if win_a > win_b and win_a > draw:
        return f"{report.team_a_name} win"
    if win_b > win_a and win_b > draw:
        return f"{report.team_b_name} win"
    return "Draw"


def match_type_label(settings: MatchContext) -> str:
    if settings.match_type is MatchType.FRIENDLY:
        return "Friendly"
    if settings.match_type is MatchType.LEAGUE:
        return "League"
    if settings.competition_type is not None:
        return _COMPETITION_LABELS[settings.competition_type]
    return "Competition"


class SimulationHistory:
    """Newest-first list of reports capped at ``limit`` entries."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("limit must be greater than zero")
        self.limit = limit
        self._entries: Deque[PredictionReport] = collections.deque(maxlen=limit)

    @classmethod
    def from_config(cls, config: FootsimConfig | None = None) -> "SimulationHistory":
        return cls((config or get_config()).history_limit)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PredictionReport]:
        return iter(self._entries)

    @property
    def entries(self) -> List[PredictionReport]:
        return list(self._entries)

    def add(self, report: PredictionReport) -> List[PredictionReport]:
        self._entries.appendleft(report)
        logger.debug(
            "Recorded %s vs %s (%d/%d entries)",
            report.team_a_name,
            report.team_b_name,
            len(self._entries),
            self.limit,
        )
        return self.entries

    def clear(self) -> None:
        self._entries.clear()

    def to_frame(self) -> pl.DataFrame:
        """Summarise the history as one row per report."""

        rows = [
            {
                "date": report.date,
                "team_a": report.team_a_name,
                "team_b": report.team_b_name,
                "match_type": match_type_label(report.match_settings),
                "score_exact": report.full_time.score_exact,
                "score_exact_pct": float(report.full_time.score_exact_percentage),
                "outcome": outcome_label(report),
                "coupon_entries": len(report.coupon),
                "high_confidence_entries": len(report.coupon_high_confidence),
            }
            for report in self._entries
        ]
        schema = {
            "date": pl.Utf8,
            "team_a": pl.Utf8,
            "team_b": pl.Utf8,
            "match_type": pl.Utf8,
            "score_exact": pl.Utf8,
            "score_exact_pct": pl.Float64,
            "outcome": pl.Utf8,
            "coupon_entries": pl.Int64,
            "high_confidence_entries": pl.Int64,
        }
        return pl.DataFrame(rows, schema=schema)


__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "SimulationHistory",
    "match_type_label",
    "outcome_label",
]
