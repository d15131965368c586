"""Tests for game configuration."""

import pytest
from pydantic import ValidationError

from seabattle.config import STANDARD_FLEET_LENGTHS, GameConfig


def test_defaults_describe_standard_game() -> None:
    config = GameConfig()
    assert config.board_size == 10
    assert config.fleet == STANDARD_FLEET_LENGTHS
    assert config.uses_standard_fleet
    assert config.rng_seed is None
    assert config.computer_delay == 1.0


def test_from_env_reads_game_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEABATTLE_BOARD_SIZE", "8")
    monkeypatch.setenv("SEABATTLE_FLEET", "4, 3,2")
    monkeypatch.setenv("SEABATTLE_SEED", "17")
    monkeypatch.setenv("SEABATTLE_COMPUTER_DELAY", "0.25")

    config = GameConfig.from_env()
    assert config.board_size == 8
    assert config.fleet == (4, 3, 2)
    assert not config.uses_standard_fleet
    assert config.rng_seed == 17
    assert config.computer_delay == 0.25


def test_from_env_overrides_win_and_none_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEABATTLE_SEED", "17")
    monkeypatch.delenv("SEABATTLE_COMPUTER_DELAY", raising=False)

    config = GameConfig.from_env(rng_seed=3, computer_delay=None)
    assert config.rng_seed == 3
    assert config.computer_delay == 1.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"board_size": 0},
        {"fleet": ()},
        {"fleet": (3, 0)},
        {"computer_delay": -1.0},
    ],
)
def test_invalid_values_rejected(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        GameConfig(**kwargs)
