"""Tests for game settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from seabattle.config import GameConfig
from seabattle.engine.player import Difficulty


def test_defaults() -> None:
    config = GameConfig()
    assert config.board_size == 10
    assert config.difficulty is Difficulty.MEDIUM
    assert config.computer_delay == 0.5


def test_from_env_reads_seabattle_variables(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("SEABATTLE_BOARD_SIZE", "12")
    monkeypatch.setenv("SEABATTLE_DIFFICULTY", "HARD")
    monkeypatch.setenv("SEABATTLE_SCORES_PATH", str(tmp_path / "s.json"))
    monkeypatch.setenv("SEABATTLE_COMPUTER_DELAY", "0")
    monkeypatch.delenv("SEABATTLE_PLACEMENT_ATTEMPTS", raising=False)

    config = GameConfig.from_env()
    assert config.board_size == 12
    assert config.difficulty is Difficulty.HARD
    assert config.scores_path == tmp_path / "s.json"
    assert config.computer_delay == 0.0


def test_explicit_overrides_beat_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEABATTLE_BOARD_SIZE", "12")
    monkeypatch.delenv("SEABATTLE_DIFFICULTY", raising=False)
    config = GameConfig.from_env(board_size=8, difficulty=None)
    assert config.board_size == 8
    assert config.difficulty is Difficulty.MEDIUM


@pytest.mark.parametrize(
    "field, value",
    [("board_size", 3), ("board_size", 40), ("computer_delay", -1), ("difficulty", "expert")],
)
def test_invalid_values_are_rejected(field: str, value: object) -> None:
    with pytest.raises(ValidationError):
        GameConfig(**{field: value})
