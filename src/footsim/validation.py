"""Request validation performed before the engine runs.

The engine trusts its inputs; everything a user can get wrong is rejected
here, either while parsing form strings or while building a
:class:`SimulationRequest`.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    field_validator,
    model_validator,
)

from .config import FootsimConfig, get_config
from .models import CompetitionType, HeadToHeadRecord, MatchContext, MatchType

MIN_HISTORY = 3
ALPHA_RANGE = (0.0, 3.0)
ITERATION_RANGE = (1_000, 20_000)
RANK_RANGE = (1, 20)


class InvalidMatchInput(ValueError):
    """Raised when simulation input fails validation."""


def parse_score_list(raw: str, label: str = "scores") -> Tuple[int, ...]:
    """Parse a comma separated list of goal counts such as ``"2, 1, 3"``."""

    if not raw or not raw.strip():
        raise InvalidMatchInput(f"{label} are required")
    scores: List[int] = []
    for token in raw.split(","):
        token = token.strip()
        try:
            value = int(token)
        except ValueError:
            raise InvalidMatchInput(f"{label} must be valid whole numbers") from None
        if value < 0:
            raise InvalidMatchInput(f"{label} must be valid whole numbers")
        scores.append(value)
    if len(scores) < MIN_HISTORY:
        raise InvalidMatchInput(f"at least {MIN_HISTORY} {label} are required")
    return tuple(scores)


def parse_head_to_head(raw: str | None) -> Tuple[HeadToHeadRecord, ...]:
    """Parse previous meetings written as ``"2-1, 0-0"``; blank means none."""

    if raw is None or not raw.strip():
        return ()
    records: List[HeadToHeadRecord] = []
    for token in raw.split(","):
        parts = token.strip().split("-")
        try:
            if len(parts) != 2:
                raise ValueError(token)
            score_a, score_b = (int(part.strip()) for part in parts)
        except ValueError:
            raise InvalidMatchInput(
                'invalid head-to-head format; use "A-B" (e.g. 2-1)'
            ) from None
        if score_a < 0 or score_b < 0:
            raise InvalidMatchInput("head-to-head scores must be non-negative")
        records.append(HeadToHeadRecord(score_a, score_b))
    return tuple(records)


class HeadToHeadModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    score_a: StrictInt = Field(ge=0, alias="scoreA")
    score_b: StrictInt = Field(ge=0, alias="scoreB")


class SimulationRequest(BaseModel):
    """Validated engine input.

    Accepts either the snake_case field names or the camelCase keys used by
    the form layer (``teamAName``, ``scoresA``, ``h2hScores``...).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    team_a_name: str = Field(alias="teamAName")
    team_b_name: str = Field(alias="teamBName")
    scores_a: Tuple[StrictInt, ...] = Field(alias="scoresA")
    scores_b: Tuple[StrictInt, ...] = Field(alias="scoresB")
    h2h_scores: Tuple[HeadToHeadModel, ...] = Field(default=(), alias="h2hScores")
    is_home_team_a: bool = Field(default=False, alias="isHomeTeamA")
    is_home_team_b: bool = Field(default=False, alias="isHomeTeamB")
    match_type: MatchType = Field(default=MatchType.FRIENDLY, alias="matchType")
    alpha: float = Field(default=1.3, ge=ALPHA_RANGE[0], le=ALPHA_RANGE[1])
    iterations: int = Field(default=18_000, ge=ITERATION_RANGE[0], le=ITERATION_RANGE[1])
    rank_a: int | None = Field(
        default=None, ge=RANK_RANGE[0], le=RANK_RANGE[1], alias="rankA"
    )
    rank_b: int | None = Field(
        default=None, ge=RANK_RANGE[0], le=RANK_RANGE[1], alias="rankB"
    )
    competition_type: CompetitionType | None = Field(default=None, alias="competitionType")
    is_knockout_stage: bool = Field(default=False, alias="isKnockoutStage")

    @field_validator("team_a_name", "team_b_name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("team name is required")
        return stripped

    @field_validator("h2h_scores", mode="before")
    @classmethod
    def _unpack_records(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return [
                {"score_a": item.score_a, "score_b": item.score_b}
                if isinstance(item, HeadToHeadRecord)
                else item
                for item in value
            ]
        return value

    @field_validator("scores_a", "scores_b")
    @classmethod
    def _check_history(cls, value: Tuple[int, ...]) -> Tuple[int, ...]:
        if len(value) < MIN_HISTORY:
            raise ValueError(f"at least {MIN_HISTORY} scores are required")
        if any(score < 0 for score in value):
            raise ValueError("scores must be non-negative")
        return value

    @model_validator(mode="after")
    def _check_home_flags(self) -> "SimulationRequest":
        if self.is_home_team_a and self.is_home_team_b:
            raise ValueError("only one team can play at home")
        return self

    @property
    def head_to_head(self) -> Tuple[HeadToHeadRecord, ...]:
        return tuple(HeadToHeadRecord(item.score_a, item.score_b) for item in self.h2h_scores)

    def context(self) -> MatchContext:
        return MatchContext(
            match_type=self.match_type,
            is_home_team_a=self.is_home_team_a,
            is_home_team_b=self.is_home_team_b,
            rank_a=self.rank_a,
            rank_b=self.rank_b,
            competition_type=self.competition_type,
            is_knockout_stage=self.is_knockout_stage,
        )


def validate_request(
    data: Mapping[str, Any] | SimulationRequest,
    config: FootsimConfig | None = None,
) -> SimulationRequest:
    """Return a :class:`SimulationRequest` or raise :class:`InvalidMatchInput`.

    Missing ``alpha`` and ``iterations`` keys are filled from the configured
    defaults (``default_alpha`` and ``default_iterations``).
    """

    if isinstance(data, SimulationRequest):
        return data
    settings = config or get_config()
    values = dict(data)
    values.setdefault("alpha", settings.default_alpha)
    values.setdefault("iterations", settings.default_iterations)
    try:
        return SimulationRequest.model_validate(values)
    except ValidationError as exc:
        messages = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "request"
            messages.append(f"{location}: {error['msg']}")
        bullet_list = "\n".join(f"- {message}" for message in messages)
        raise InvalidMatchInput(f"Simulation input is invalid:\n{bullet_list}") from exc


__all__ = [
    "HeadToHeadModel",
    "InvalidMatchInput",
    "SimulationRequest",
    "parse_head_to_head",
    "parse_score_list",
    "validate_request",
]
