import pytest

from config.leagues import get_league_config, get_leagues_by_priority
from config.settings import load_scoring_config, load_value_config
from core.errors import ConfigError


def test_value_config_defaults():
    config = load_value_config(env={})
    assert config.edge_threshold == 0.08
    assert config.confidence_threshold == 0.65


def test_value_config_environment_and_overrides():
    env = {"EDGE_THRESHOLD": "0.05", "CONFIDENCE_THRESHOLD": "0.7"}

    assert load_value_config(env=env).edge_threshold == 0.05
    config = load_value_config(env=env, edge_threshold=0.1, confidence_threshold=None)
    assert config.edge_threshold == 0.1
    assert config.confidence_threshold == 0.7


@pytest.mark.parametrize("env", [
    {"EDGE_THRESHOLD": "1.5"},
    {"CONFIDENCE_THRESHOLD": "-0.1"},
    {"EDGE_THRESHOLD": "lots"},
])
def test_value_config_rejects_bad_values(env):
    with pytest.raises(ConfigError):
        load_value_config(env=env)


def test_scoring_config_defaults():
    config = load_scoring_config(env={})
    assert config.weights == (0.30, 0.25, 0.20, 0.15, 0.10)
    assert config.min_confidence == 60


def test_scoring_config_weights_must_sum_to_one():
    with pytest.raises(ConfigError, match="sum to 1.0"):
        load_scoring_config(env={"FORM_WEIGHT": "0.5"})

    config = load_scoring_config(env={"FORM_WEIGHT": "0.4", "HOME_AWAY_WEIGHT": "0.15"})
    assert config.form_weight == 0.4


def test_scoring_config_rejects_negative_weight_and_bad_minimum():
    with pytest.raises(ConfigError, match="non-negative"):
        load_scoring_config(env={"FORM_WEIGHT": "-0.1", "HOME_AWAY_WEIGHT": "0.65"})
    with pytest.raises(ConfigError):
        load_scoring_config(env={}, min_confidence=150)


def test_league_lookup():
    assert get_league_config("premier_league")["odds_api_key"] == "soccer_epl"
    assert get_league_config("unknown") is None
    assert "kenyan_premier_league" not in get_leagues_by_priority(max_priority=2)
