"""
Operational weighted-factor scoring.

Five sub-scores (form, home/away, head-to-head, injuries, league motivation)
nominally on a 0-100 scale. They are not bounded individually, so a heavy
injury list can push the injury score past 100. A configurable weighted
sum turns them into a confidence score clamped to 0-100; a fixed decision
tree picks the bet and a banded rule its category.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from analysis.reasoning import compose_reasoning
from config.settings import ScoringConfig
from core.models import (
    BetCategory,
    BetType,
    Injury,
    InjurySeverity,
    Recommendation,
    ScheduledFixture,
    TeamSnapshot,
)
from utils.datetime_utils import same_day

logger = logging.getLogger(__name__)

INJURY_WEIGHTS = {
    InjurySeverity.SEVERE: 3.0,
    InjurySeverity.MODERATE: 2.0,
    InjurySeverity.MINOR: 1.0,
    InjurySeverity.DOUBTFUL: 0.5,
}

MAX_FORM_POINTS = 15  # 5 games x 3 points
MID_TABLE_POSITION = 10
VALUE_EV_THRESHOLD = 0.1


@dataclass
class FactorScores:
    form: float
    home_away: float
    h2h: float
    injury: float
    league_motivation: float


class WeightedFactorScorer:
    """Score scheduled fixtures from persisted team signals."""

    def __init__(self, config: Optional[ScoringConfig] = None, store=None):
        self.config = config or ScoringConfig()
        self.store = store

    # -------- Sub-scores --------

    @staticmethod
    def form_score(home: TeamSnapshot, away: TeamSnapshot) -> float:
        home_pct = (home.form_points / MAX_FORM_POINTS) * 100
        away_pct = (away.form_points / MAX_FORM_POINTS) * 100
        return 50 + (home_pct - away_pct) / 2

    @staticmethod
    def home_away_score(home: TeamSnapshot, away: TeamSnapshot) -> float:
        home_advantage = home.home_win_rate * 100
        away_disadvantage = (1 - away.away_win_rate) * 100
        return (home_advantage + away_disadvantage) / 2

    @staticmethod
    def h2h_score(fixture: ScheduledFixture) -> float:
        total = fixture.h2h_home_wins + fixture.h2h_draws + fixture.h2h_away_wins
        if total == 0:
            return 50.0
        return (fixture.h2h_home_wins / total) * 100

    @staticmethod
    def injury_load(injuries: List[Injury]) -> float:
        return sum(INJURY_WEIGHTS.get(injury.severity, 0.0) for injury in injuries)

    @classmethod
    def injury_impact(cls, home: TeamSnapshot, away: TeamSnapshot) -> float:
        """Above 50 when the away side is hit harder by injuries."""
        difference = cls.injury_load(away.injuries) - cls.injury_load(home.injuries)
        return 50 + difference * 10

    @staticmethod
    def motivation(position: Optional[int]) -> float:
        position = position or MID_TABLE_POSITION
        if position <= 4 or position >= 17:
            return 10.0
        return 5.0

    @classmethod
    def league_motivation(cls, home: TeamSnapshot, away: TeamSnapshot) -> float:
        return cls.motivation(home.position) - cls.motivation(away.position) + 50

    def factor_scores(self, fixture: ScheduledFixture) -> FactorScores:
        home, away = fixture.home_team, fixture.away_team
        return FactorScores(
            form=self.form_score(home, away),
            home_away=self.home_away_score(home, away),
            h2h=self.h2h_score(fixture),
            injury=self.injury_impact(home, away),
            league_motivation=self.league_motivation(home, away),
        )

    # -------- Combination --------

    def confidence_score(self, scores: FactorScores) -> int:
        c = self.config
        weighted = (
            scores.form * c.form_weight
            + scores.home_away * c.home_away_weight
            + scores.h2h * c.head_to_head_weight
            + scores.injury * c.injury_weight
            + scores.league_motivation * c.league_position_weight
        )
        # Halves round up
        return int(max(0, min(100, math.floor(weighted + 0.5))))

    @staticmethod
    def determine_recommendation(
        scores: FactorScores,
        home: TeamSnapshot,
        away: TeamSnapshot,
    ) -> Optional[Tuple[TeamSnapshot, BetType]]:
        if scores.form > 60 and scores.home_away > 60:
            return home, BetType.HOME_WIN
        if scores.form < 40 and scores.h2h < 40:
            return away, BetType.AWAY_WIN
        if home.avg_goals_scored > 1.5 and away.avg_goals_scored > 1.5:
            return home, BetType.BTTS
        if scores.form >= 50 and scores.home_away >= 50:
            return home, BetType.HOME_WIN
        return None

    @staticmethod
    def odds_value(fixture: ScheduledFixture, team: TeamSnapshot, confidence: int) -> float:
        """EV of the recommended side's price in percent, or 0 when it is not value."""
        if not fixture.home_odds or not fixture.away_odds:
            return 0.0
        odds = fixture.home_odds if team.id == fixture.home_team.id else fixture.away_odds
        probability = confidence / 100
        expected_value = odds * probability - 1
        is_value = probability > 1 / odds and expected_value > VALUE_EV_THRESHOLD
        return expected_value * 100 if is_value else 0.0

    @staticmethod
    def bet_category(confidence: int, odds_value: float, fixture: ScheduledFixture) -> BetCategory:
        """
        Banded category. Uses the home price whatever the pick, and anything
        outside the three bands falls back to VALUE_BET.
        """
        odds = fixture.home_odds or 2.0

        if confidence >= 75 and odds <= 2.0:
            return BetCategory.SAFE_BET
        if 60 <= confidence < 75 and odds_value > 10:
            return BetCategory.VALUE_BET
        if 60 <= confidence < 70 and odds > 3.0:
            return BetCategory.RISKY_BET
        return BetCategory.VALUE_BET

    @staticmethod
    def explain(scores: FactorScores, fixture: ScheduledFixture, team: TeamSnapshot):
        home = fixture.home_team
        reasons = []

        if scores.form > 60:
            reasons.append((f"{team.name} has superior recent form", "Excellent Form"))
        if scores.home_away > 65 and team.id == home.id:
            reasons.append((f"Strong home advantage for {home.name}", "Home Advantage"))
        if scores.h2h > 60:
            reasons.append(("Favorable head-to-head record", "H2H Dominance"))
        if scores.injury > 60:
            reasons.append(("Opposition has key injury concerns", "Injury Advantage"))

        return compose_reasoning(reasons, team.name)

    # -------- Entry points --------

    def analyze_fixture(self, fixture: ScheduledFixture) -> Optional[Recommendation]:
        scores = self.factor_scores(fixture)
        confidence = self.confidence_score(scores)

        pick = self.determine_recommendation(scores, fixture.home_team, fixture.away_team)
        if pick is None:
            return None
        team, bet_type = pick

        value = self.odds_value(fixture, team, confidence)
        category = self.bet_category(confidence, value, fixture)
        reasoning, key_factors = self.explain(scores, fixture, team)

        return Recommendation(
            match_id=fixture.id,
            recommended_team_id=team.id,
            recommended_team=team.name,
            bet_type=bet_type,
            confidence_score=confidence,
            category=category,
            form_score=scores.form,
            home_away_score=scores.home_away,
            h2h_score=scores.h2h,
            injury_impact=scores.injury,
            league_motivation=scores.league_motivation,
            odds_value=value,
            reasoning=reasoning,
            key_factors=key_factors,
        )

    @staticmethod
    def select_fixtures(
        fixtures: List[ScheduledFixture],
        day: Optional[date] = None,
        league: Optional[str] = None,
    ) -> List[ScheduledFixture]:
        """Scheduled fixtures, optionally restricted to one UTC day and league."""
        selected = []
        for fixture in fixtures:
            if fixture.status != "SCHEDULED":
                continue
            if day is not None and not same_day(fixture.start_time, day):
                continue
            if league and fixture.league.lower() != league.lower():
                continue
            selected.append(fixture)
        return selected

    def generate_predictions(
        self,
        fixtures: List[ScheduledFixture],
        day: Optional[date] = None,
        league: Optional[str] = None,
    ) -> List[Recommendation]:
        """
        Score fixtures and keep those at or above the minimum confidence.

        Kept recommendations are upserted into the store when one is attached.
        A fixture that fails to score is logged and skipped.

        Returns:
            Recommendations sorted by confidence, highest first
        """
        candidates = self.select_fixtures(fixtures, day, league)
        logger.info(f"Scoring {len(candidates)} of {len(fixtures)} fixtures")

        predictions = []
        for fixture in candidates:
            try:
                prediction = self.analyze_fixture(fixture)
                if prediction and prediction.confidence_score >= self.config.min_confidence:
                    predictions.append(prediction)
                    if self.store is not None:
                        self.store.upsert(prediction)
            except Exception as e:
                logger.error(f"Failed to generate prediction for match {fixture.id}: {e}")

        logger.info(f"Predictions generated: {len(predictions)}")
        return sorted(predictions, key=lambda p: p.confidence_score, reverse=True)
