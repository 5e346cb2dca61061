"""Application settings and configuration."""
import os
from dataclasses import dataclass

from core.errors import ConfigError

# Directories
DATA_DIR = os.getenv("DATA_DIR", "data")
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "output")
LOGS_DIR = os.getenv("LOGS_DIR", "logs")

# HTTP Settings
HTTP_TIMEOUT = 25
HTTP_CONCURRENCY = 12
HTTP_RETRIES = 2

# Odds API
ODDS_API_KEY = os.getenv("ODDS_API_KEY", "")
ODDS_API_BASE = os.getenv("ODDS_API_BASE", "https://api.the-odds-api.com/v4")
ODDS_API_REGIONS = "eu"

# Source precedence: fixtures feed first, then supplementary feeds
MATCH_SOURCE_PRECEDENCE = ["fixtures", "tips", "stats"]
ODDS_FILE_PREFIX = "odds_"

# Value Betting Settings (mode a)
EDGE_THRESHOLD = 0.08  # 8% edge
CONFIDENCE_THRESHOLD = 0.65  # 65% model probability
HOME_ADVANTAGE_FACTOR = 1.2

# Weighted-factor Settings (mode b)
FORM_WEIGHT = 0.30
HOME_AWAY_WEIGHT = 0.25
HEAD_TO_HEAD_WEIGHT = 0.20
INJURY_WEIGHT = 0.15
LEAGUE_POSITION_WEIGHT = 0.10
MIN_CONFIDENCE_THRESHOLD = 60

# Logging
DEBUG_MODE = os.getenv("DEBUG", "0") == "1"


@dataclass(frozen=True)
class ValueBettingConfig:
    """Thresholds for the market-relative value-betting engine."""
    edge_threshold: float = EDGE_THRESHOLD
    confidence_threshold: float = CONFIDENCE_THRESHOLD


@dataclass(frozen=True)
class ScoringConfig:
    """Weights and cutoff for the weighted-factor engine."""
    form_weight: float = FORM_WEIGHT
    home_away_weight: float = HOME_AWAY_WEIGHT
    head_to_head_weight: float = HEAD_TO_HEAD_WEIGHT
    injury_weight: float = INJURY_WEIGHT
    league_position_weight: float = LEAGUE_POSITION_WEIGHT
    min_confidence: float = MIN_CONFIDENCE_THRESHOLD

    @property
    def weights(self):
        return (
            self.form_weight,
            self.home_away_weight,
            self.head_to_head_weight,
            self.injury_weight,
            self.league_position_weight,
        )


def _read_float(env, name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def load_value_config(env=None, **overrides) -> ValueBettingConfig:
    """
    Build the value-betting config from environment variables.

    Explicit keyword overrides (e.g. from CLI flags) win over the environment;
    None values are ignored.
    """
    env = os.environ if env is None else env
    values = {
        "edge_threshold": _read_float(env, "EDGE_THRESHOLD", EDGE_THRESHOLD),
        "confidence_threshold": _read_float(env, "CONFIDENCE_THRESHOLD", CONFIDENCE_THRESHOLD),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    for name, value in values.items():
        if not 0.0 <= value <= 1.0:
            raise ConfigError(f"{name} must be within [0, 1], got {value}")

    return ValueBettingConfig(**values)


def load_scoring_config(env=None, **overrides) -> ScoringConfig:
    """Build the weighted-factor config from environment variables."""
    env = os.environ if env is None else env
    values = {
        "form_weight": _read_float(env, "FORM_WEIGHT", FORM_WEIGHT),
        "home_away_weight": _read_float(env, "HOME_AWAY_WEIGHT", HOME_AWAY_WEIGHT),
        "head_to_head_weight": _read_float(env, "HEAD_TO_HEAD_WEIGHT", HEAD_TO_HEAD_WEIGHT),
        "injury_weight": _read_float(env, "INJURY_WEIGHT", INJURY_WEIGHT),
        "league_position_weight": _read_float(env, "LEAGUE_POSITION_WEIGHT", LEAGUE_POSITION_WEIGHT),
        "min_confidence": _read_float(env, "MIN_CONFIDENCE_THRESHOLD", MIN_CONFIDENCE_THRESHOLD),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    config = ScoringConfig(**values)

    if any(w < 0 for w in config.weights):
        raise ConfigError(f"Scoring weights must be non-negative, got {config.weights}")
    if abs(sum(config.weights) - 1.0) > 1e-6:
        raise ConfigError(f"Scoring weights must sum to 1.0, got {sum(config.weights):.4f}")
    if not 0 <= config.min_confidence <= 100:
        raise ConfigError(f"min_confidence must be within [0, 100], got {config.min_confidence}")

    return config
