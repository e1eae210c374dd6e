"""Command line tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from footsim.cli import main

SIMULATE_ARGS = [
    "simulate",
    "Lyon",
    "Nantes",
    "--scores-a",
    "2,1,3,0,2",
    "--scores-b",
    "1,0,1,2,1",
    "--home",
    "a",
    "--iterations",
    "2000",
    "--seed",
    "5",
]


def test_simulate_prints_report(capsys: pytest.CaptureFixture[str]) -> None:
    main(SIMULATE_ARGS)
    payload = json.loads(capsys.readouterr().out)
    assert payload["teamAName"] == "Lyon"
    assert payload["matchSettings"]["isHomeTeamA"] is True
    assert len(payload["resultatsFT"]["topScores"]) <= 5


def test_simulate_is_reproducible_with_seed(capsys: pytest.CaptureFixture[str]) -> None:
    main(SIMULATE_ARGS)
    first = json.loads(capsys.readouterr().out)
    main(SIMULATE_ARGS)
    second = json.loads(capsys.readouterr().out)
    first.pop("date")
    second.pop("date")
    assert first == second


def test_simulate_reports_progress(capsys: pytest.CaptureFixture[str]) -> None:
    main([*SIMULATE_ARGS, "--progress"])
    assert "progress: 100%" in capsys.readouterr().err


def test_simulate_with_head_to_head_and_league(capsys: pytest.CaptureFixture[str]) -> None:
    main(
        [
            *SIMULATE_ARGS,
            "--h2h",
            "2-1,0-0",
            "--match-type",
            "league",
            "--rank-a",
            "2",
            "--rank-b",
            "14",
        ]
    )
    payload = json.loads(capsys.readouterr().out)
    assert payload["matchSettings"]["matchType"] == "league"
    assert payload["matchSettings"]["rankB"] == 14


def test_simulate_rejects_short_history() -> None:
    args = list(SIMULATE_ARGS)
    args[args.index("2,1,3,0,2")] = "2,1"
    with pytest.raises(SystemExit, match="at least 3"):
        main(args)


def test_simulate_rejects_bad_head_to_head() -> None:
    with pytest.raises(SystemExit, match="head-to-head"):
        main([*SIMULATE_ARGS, "--h2h", "2:1"])


def test_config_command_reads_yaml(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "footsim.yaml"
    path.write_text("coupon_threshold: 72\nhigh_confidence_threshold: 72\n")
    main(["config", "--config", str(path)])
    payload = json.loads(capsys.readouterr().out)
    assert payload["config"]["coupon_threshold"] == 72.0
    assert any("identical" in message for message in payload["warnings"])


def test_invalid_config_exits(tmp_path: Path) -> None:
    path = tmp_path / "footsim.yaml"
    path.write_text("default_iterations: 5\n")
    with pytest.raises(SystemExit, match="default_iterations"):
        main(["config", "--config", str(path)])


def test_missing_config_file_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="Cannot load configuration"):
        main(["config", "--config", str(tmp_path / "missing.yaml")])


def test_non_mapping_config_file_exits(tmp_path: Path) -> None:
    path = tmp_path / "footsim.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(SystemExit, match="must be a mapping"):
        main(["config", "--config", str(path)])
