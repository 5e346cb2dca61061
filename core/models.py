"""Core data models."""
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# ---------------- Odds ----------------

@dataclass(frozen=True)
class OddsQuote:
    """One price in every representation; all fields derive from `decimal`."""
    decimal: float
    fractional: str
    american: int
    implied_probability: float

    @property
    def is_quoted(self) -> bool:
        return self.decimal > 1.0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class BookmakerMarket:
    """A bookmaker's full set of normalized quotes for one match."""
    bookmaker: str
    home_win: OddsQuote
    draw: OddsQuote
    away_win: OddsQuote
    margin: float
    fair_home_win: OddsQuote
    fair_draw: OddsQuote
    fair_away_win: OddsQuote
    btts_yes: Optional[OddsQuote] = None
    btts_no: Optional[OddsQuote] = None
    over_2_5: Optional[OddsQuote] = None
    under_2_5: Optional[OddsQuote] = None
    fair_btts_yes: Optional[OddsQuote] = None
    fair_btts_no: Optional[OddsQuote] = None
    fair_over_2_5: Optional[OddsQuote] = None
    fair_under_2_5: Optional[OddsQuote] = None

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class BestPrice:
    bookmaker: str
    odds: OddsQuote


@dataclass(frozen=True)
class BestOddsSnapshot:
    """Highest available price per outcome, tagged with the bookmaker offering it."""
    home_win: BestPrice
    draw: BestPrice
    away_win: BestPrice
    btts_yes: Optional[BestPrice] = None
    btts_no: Optional[BestPrice] = None
    over_2_5: Optional[BestPrice] = None
    under_2_5: Optional[BestPrice] = None

    def get(self, outcome: str) -> Optional[BestPrice]:
        return getattr(self, outcome, None)

    def to_dict(self):
        return asdict(self)


# ---------------- Source records ----------------

@dataclass
class H2HMatch:
    date: str
    home_team: str
    away_team: str
    home_score: int
    away_score: int
    competition: str = ""


@dataclass
class MatchRecord:
    """
    Superset schema for a match as reported by any feed.

    Every optional field is falsy when the source does not supply it, so the
    reconciler can fill forward field by field.
    """
    source: str
    home_team: str
    away_team: str
    match_id: Optional[str] = None
    date: Optional[str] = None
    kickoff_time: Optional[str] = None
    kickoff_timestamp: Optional[int] = None
    league: Optional[str] = None
    country: Optional[str] = None
    home_form: List[str] = field(default_factory=list)
    away_form: List[str] = field(default_factory=list)
    home_goals_scored_last5: int = 0
    home_goals_conceded_last5: int = 0
    away_goals_scored_last5: int = 0
    away_goals_conceded_last5: int = 0
    h2h_matches: List[H2HMatch] = field(default_factory=list)
    home_odds: Optional[float] = None
    draw_odds: Optional[float] = None
    away_odds: Optional[float] = None
    home_elo: Optional[float] = None
    away_elo: Optional[float] = None
    home_days_rest: Optional[int] = None
    away_days_rest: Optional[int] = None
    tips: Dict[str, str] = field(default_factory=dict)


@dataclass
class BookmakerQuoteRecord:
    """Raw decimal prices for one match from one bookmaker feed."""
    bookmaker: str
    home_team: str
    away_team: str
    home_win_odds: Optional[float] = None
    draw_odds: Optional[float] = None
    away_win_odds: Optional[float] = None
    btts_yes_odds: Optional[float] = None
    btts_no_odds: Optional[float] = None
    over_2_5_odds: Optional[float] = None
    under_2_5_odds: Optional[float] = None
    kickoff_time: Optional[str] = None
    scraped_at: str = field(default_factory=_utc_now)


# ---------------- Features ----------------

@dataclass
class FeatureVector:
    home_form_points: int
    away_form_points: int
    home_goals_scored_avg: float
    home_goals_conceded_avg: float
    away_goals_scored_avg: float
    away_goals_conceded_avg: float
    h2h_home_wins: int
    h2h_draws: int
    h2h_away_wins: int
    h2h_home_goals_avg: float
    h2h_away_goals_avg: float
    home_advantage_factor: float
    market_implied_prob_home: float
    market_implied_prob_draw: float
    market_implied_prob_away: float
    market_implied_prob_btts_yes: Optional[float] = None
    market_implied_prob_btts_no: Optional[float] = None
    market_implied_prob_over_2_5: Optional[float] = None
    market_implied_prob_under_2_5: Optional[float] = None
    home_elo: float = 1500.0
    away_elo: float = 1500.0
    days_rest_home: Optional[int] = None
    days_rest_away: Optional[int] = None

    def to_dict(self):
        return asdict(self)


@dataclass
class MatchFeatures:
    """Canonical match plus everything derived from it for scoring."""
    match_id: str
    date: str
    timestamp: int
    league: str
    country: str
    home_team: str
    away_team: str
    h2h_matches: List[H2HMatch]
    bookmaker_odds: List[BookmakerMarket]
    best_odds: Optional[BestOddsSnapshot]
    features: FeatureVector


# ---------------- Value betting output (mode a) ----------------

@dataclass
class ValueRecommendation:
    bet: str
    market: str
    bookmaker: str
    odds: float
    confidence: float
    edge: float
    ev: float
    reasoning: str = ""
    key_factors: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "bet": self.bet,
            "market": self.market,
            "bookmaker": self.bookmaker,
            "odds": self.odds,
            "confidence": round(self.confidence, 4),
            "edge": round(self.edge, 4),
            "ev": round(self.ev, 4),
            "reasoning": self.reasoning,
            "key_factors": list(self.key_factors),
        }


@dataclass
class PredictionResult:
    match_id: str
    date: str
    timestamp: int
    league: str
    country: str
    home_team: str
    away_team: str
    kickoff_time: str
    model_prob_1x2: Dict[str, float]
    model_prob_btts: Dict[str, float]
    model_prob_over_under: Dict[str, float]
    best_bookmaker: str
    best_odds: float
    recommendation: Optional[ValueRecommendation] = None
    raw_features: Optional[FeatureVector] = None

    def to_dict(self):
        return {
            "match_id": self.match_id,
            "date": self.date,
            "timestamp": self.timestamp,
            "league": self.league,
            "country": self.country,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "kickoff_time": self.kickoff_time,
            "model_prob_1x2": dict(self.model_prob_1x2),
            "model_prob_btts": dict(self.model_prob_btts),
            "model_prob_over_under": dict(self.model_prob_over_under),
            "best_bookmaker": self.best_bookmaker,
            "best_odds": self.best_odds,
            "recommendation": self.recommendation.to_dict() if self.recommendation else None,
            "raw_features": self.raw_features.to_dict() if self.raw_features else None,
        }


# ---------------- Operational scoring (mode b) ----------------

class BetType(str, Enum):
    HOME_WIN = "HOME_WIN"
    AWAY_WIN = "AWAY_WIN"
    DRAW = "DRAW"
    BTTS = "BTTS"
    OVER_UNDER = "OVER_UNDER"


class BetCategory(str, Enum):
    SAFE_BET = "SAFE_BET"
    VALUE_BET = "VALUE_BET"
    RISKY_BET = "RISKY_BET"


class InjurySeverity(str, Enum):
    SEVERE = "SEVERE"
    MODERATE = "MODERATE"
    MINOR = "MINOR"
    DOUBTFUL = "DOUBTFUL"


@dataclass
class Injury:
    player: str
    severity: Optional[InjurySeverity] = None


@dataclass
class TeamSnapshot:
    """Persisted per-team signals used by the weighted-factor engine."""
    id: int
    name: str
    form_points: float = 0.0
    home_win_rate: float = 0.0
    away_win_rate: float = 0.0
    avg_goals_scored: float = 0.0
    position: Optional[int] = None
    injuries: List[Injury] = field(default_factory=list)


@dataclass
class ScheduledFixture:
    id: int
    start_time: str
    home_team: TeamSnapshot
    away_team: TeamSnapshot
    league: str = ""
    status: str = "SCHEDULED"
    h2h_home_wins: int = 0
    h2h_draws: int = 0
    h2h_away_wins: int = 0
    home_odds: Optional[float] = None
    draw_odds: Optional[float] = None
    away_odds: Optional[float] = None


@dataclass
class Recommendation:
    match_id: int
    recommended_team_id: int
    recommended_team: str
    bet_type: BetType
    confidence_score: int
    category: BetCategory
    form_score: float
    home_away_score: float
    h2h_score: float
    injury_impact: float
    league_motivation: float
    odds_value: float
    reasoning: str
    key_factors: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "match_id": self.match_id,
            "recommended_team_id": self.recommended_team_id,
            "recommended_team": self.recommended_team,
            "bet_type": self.bet_type.value,
            "confidence_score": self.confidence_score,
            "category": self.category.value,
            "form_score": round(self.form_score, 2),
            "home_away_score": round(self.home_away_score, 2),
            "h2h_score": round(self.h2h_score, 2),
            "injury_impact": round(self.injury_impact, 2),
            "league_motivation": round(self.league_motivation, 2),
            "odds_value": round(self.odds_value, 2),
            "reasoning": self.reasoning,
            "key_factors": list(self.key_factors),
        }
