"""Tests for GameConfig loading and validation."""

import pytest

from angler.config import ArenaConfig, GameConfig, LineConfig, SessionConfig
from angler.exceptions import ConfigurationError


def test_defaults_are_valid():
    config = GameConfig()
    config.validate()
    assert config.frame_ms == pytest.approx(1000 / 60)
    assert config.session.starting_money == 120
    assert config.session.time_budget_seconds == 137
    assert config.challenge.timeout_ms is None


def test_partial_override_keeps_other_defaults():
    config = GameConfig.from_dict({"session": {"starting_money": 50}, "population": {"size": 4}})
    assert config.session.starting_money == 50
    assert config.session.time_budget_seconds == 137
    assert config.population.size == 4
    assert config.line == LineConfig()


def test_round_trip():
    config = GameConfig(session=SessionConfig(time_budget_seconds=30))
    assert GameConfig.from_dict(config.to_dict()) == config


def test_unknown_section_rejected():
    with pytest.raises(ConfigurationError, match="sections"):
        GameConfig.from_dict({"ocean": {}})


def test_unknown_key_rejected():
    with pytest.raises(ConfigurationError, match="session"):
        GameConfig.from_dict({"session": {"gold": 5}})


def test_section_must_be_mapping():
    with pytest.raises(ConfigurationError):
        GameConfig.from_dict({"line": 5})


@pytest.mark.parametrize(
    "config",
    [
        GameConfig(arena=ArenaConfig(boat_min_x=720, boat_max_x=80)),
        GameConfig(arena=ArenaConfig(frame_rate=0)),
        GameConfig(line=LineConfig(retract_step=-1)),
        GameConfig(session=SessionConfig(time_budget_seconds=0)),
    ],
)
def test_validate_rejects_inconsistent_values(config):
    with pytest.raises(ConfigurationError):
        config.validate()


def test_from_dict_validates():
    with pytest.raises(ConfigurationError):
        GameConfig.from_dict({"challenge": {"window_end_base": 95}})
