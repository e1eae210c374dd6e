"""Prediction engine tests."""

from __future__ import annotations

import asyncio
import dataclasses
import random
from typing import Any, Dict, List

import pytest

from footsim.config import FootsimConfig
from footsim.engine import PredictionEngine, simulate_match
from footsim.models import PredictionReport
from footsim.simulation import CancellationToken, SimulationCancelled
from footsim.validation import InvalidMatchInput, SimulationRequest
from footsim.weighting import recency_weighted_average


def _undated(report: PredictionReport) -> PredictionReport:
    return dataclasses.replace(report, date="")


def _engine(seed: int, **overrides: Any) -> PredictionEngine:
    return PredictionEngine(FootsimConfig(**overrides), rng=random.Random(seed))


def _request(form_data: Dict[str, Any], **changes: Any) -> SimulationRequest:
    form_data.update(changes)
    return SimulationRequest.model_validate(form_data)


def test_stronger_home_side_is_favoured(form_data: Dict[str, Any]) -> None:
    request = _request(
        form_data,
        scoresA=[3, 2, 3, 2, 3],
        scoresB=[0, 1, 0, 0, 1],
        iterations=5_000,
    )
    report = _engine(11).predict(request)
    probas = report.full_time.probas
    assert probas.value("win_a") > probas.value("win_b")
    total = probas.value("win_a") + probas.value("draw") + probas.value("win_b")
    assert total == pytest.approx(100.0, abs=0.2)


def test_expected_goals_include_home_advantage(request_model: SimulationRequest) -> None:
    report = _engine(5).predict(request_model)
    lam_a, lam_b = report.expected_goals
    assert lam_a == pytest.approx(recency_weighted_average(request_model.scores_a, 1.3) * 1.2)
    assert lam_b == pytest.approx(recency_weighted_average(request_model.scores_b, 1.3))
    assert report.factors.factor_a == pytest.approx(1.2)


def test_half_time_uses_half_the_rates(form_data: Dict[str, Any]) -> None:
    request = _request(form_data, iterations=5_000)
    report = _engine(21).predict(request)
    assert report.half_time.probas.value("over25") < report.full_time.probas.value("over25")
    assert report.half_time.iterations == report.full_time.iterations == 5_000


def test_seeded_engines_agree(request_model: SimulationRequest) -> None:
    first = _engine(1234).predict(request_model)
    second = _engine(1234).predict(request_model)
    assert _undated(first) == _undated(second)


def test_progress_milestones(seeded_engine: PredictionEngine, form_data: Dict[str, Any]) -> None:
    seen: List[int] = []
    seeded_engine.predict(_request(form_data, iterations=2_000), seen.append)
    assert seen[:3] == [10, 30, 50]
    assert seen[-1] == 100
    assert seen == sorted(seen)
    full_time = [value for value in seen[3:-1] if value < 80]
    half_time = [value for value in seen[3:-1] if value >= 80]
    assert len(full_time) == len(half_time) == 20
    assert max(half_time) < 90


def test_cancellation_propagates(seeded_engine: PredictionEngine, form_data: Dict[str, Any]) -> None:
    token = CancellationToken()
    seen: List[int] = []

    def progress(percent: int) -> None:
        seen.append(percent)
        if percent >= 50:
            token.cancel()

    with pytest.raises(SimulationCancelled):
        seeded_engine.predict(_request(form_data, iterations=2_000), progress, token=token)
    assert 100 not in seen


def test_async_prediction_matches_sync(request_model: SimulationRequest) -> None:
    sync_report = _engine(99).predict(request_model)
    async_report = asyncio.run(_engine(99).predict_async(request_model))
    assert _undated(async_report) == _undated(sync_report)


def test_coupons_use_configured_thresholds(request_model: SimulationRequest) -> None:
    report = _engine(3, coupon_threshold=60.0, high_confidence_threshold=90.0).predict(
        request_model
    )
    assert report.thresholds == (60.0, 90.0)
    assert len(report.coupon_high_confidence) <= len(report.coupon)
    assert all(float(entry.probability) >= 60.0 for entry in report.coupon)
    assert all(float(entry.probability) >= 90.0 for entry in report.coupon_high_confidence)


def test_report_serialises_with_contract_keys(request_model: SimulationRequest) -> None:
    payload = _engine(8).predict(request_model).to_dict()
    assert set(payload) == {
        "teamAName",
        "teamBName",
        "matchSettings",
        "resultatsHT",
        "resultatsFT",
        "couponParis",
        "couponParisHighConfidence",
        "expectedGoals",
        "date",
    }
    assert payload["matchSettings"]["isHomeTeamA"] is True
    assert set(payload["resultatsFT"]) == {
        "scoreExact",
        "scoreExactPourcentage",
        "probas",
        "topScores",
    }
    assert payload["date"].endswith("+00:00")


def test_simulate_match_is_reproducible_with_seed(form_data: Dict[str, Any]) -> None:
    form_data["iterations"] = 2_000
    first = simulate_match(form_data, seed=7)
    second = simulate_match(dict(form_data), seed=7)
    assert _undated(first) == _undated(second)


def test_simulate_match_uses_config_seed(form_data: Dict[str, Any]) -> None:
    form_data["iterations"] = 2_000
    config = FootsimConfig(seed=42)
    first = simulate_match(form_data, config=config)
    second = simulate_match(form_data, config=config)
    assert _undated(first) == _undated(second)


def test_simulate_match_rejects_invalid_input(form_data: Dict[str, Any]) -> None:
    form_data["scoresA"] = [1]
    with pytest.raises(InvalidMatchInput):
        simulate_match(form_data)


def test_simulate_match_applies_configured_defaults(form_data: Dict[str, Any]) -> None:
    del form_data["alpha"], form_data["iterations"]
    config = FootsimConfig(default_alpha=2.0, default_iterations=2_000)
    report = simulate_match(form_data, config=config, seed=1)
    assert report.full_time.iterations == 2_000
    assert report.half_time.iterations == 2_000
    lam_a, _ = report.expected_goals
    assert lam_a == pytest.approx(recency_weighted_average((2, 1, 3, 0, 2), 2.0) * 1.2)
