from __future__ import annotations

import random
from typing import Any, Dict

import pytest

from footsim.config import FootsimConfig, reset_config
from footsim.engine import PredictionEngine
from footsim.validation import SimulationRequest


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "FOOTSIM_ALPHA",
        "FOOTSIM_ITERATIONS",
        "FOOTSIM_SEED",
        "FOOTSIM_COUPON_THRESHOLD",
        "FOOTSIM_HIGH_CONFIDENCE_THRESHOLD",
        "FOOTSIM_PROGRESS_STEPS",
        "FOOTSIM_INITIAL_DELAY",
        "FOOTSIM_HISTORY_LIMIT",
        "FOOTSIM_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture()
def form_data() -> Dict[str, Any]:
    return {
        "teamAName": "Lyon",
        "teamBName": "Nantes",
        "scoresA": [2, 1, 3, 0, 2],
        "scoresB": [1, 0, 1, 2, 1],
        "h2hScores": [],
        "isHomeTeamA": True,
        "isHomeTeamB": False,
        "matchType": "friendly",
        "alpha": 1.3,
        "iterations": 18_000,
    }


@pytest.fixture()
def request_model(form_data: Dict[str, Any]) -> SimulationRequest:
    return SimulationRequest.model_validate(form_data)


@pytest.fixture()
def seeded_engine() -> PredictionEngine:
    return PredictionEngine(FootsimConfig(), rng=random.Random(1234))
