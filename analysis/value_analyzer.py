"""Value betting analysis: model probabilities versus market-implied prices."""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from analysis.reasoning import compose_reasoning
from config.settings import ValueBettingConfig
from core.models import MatchFeatures, PredictionResult, ValueRecommendation
from utils.datetime_utils import timestamp_to_iso
from utils.logging_config import log_recommendation

logger = logging.getLogger(__name__)

# Used when no bookmaker quotes the market
DEFAULT_1X2 = (0.45, 0.25, 0.30)
DEFAULT_BTTS_YES = 0.55
DEFAULT_OVER_2_5 = 0.5

GOALS_BASELINE = 1.5
GOAL_LINE = 2.5


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


@dataclass
class Candidate:
    """One priced outcome considered for a recommendation."""
    bet: str
    market: str
    bookmaker: str
    odds: float
    model_prob: float
    market_prob: float

    @property
    def edge(self) -> float:
        return self.model_prob - self.market_prob

    @property
    def ev(self) -> float:
        return (self.model_prob * self.odds) - 1.0


class ValueAnalyzer:
    """Blend market prices with form, goals and head-to-head into model probabilities."""

    @staticmethod
    def predict_1x2(match: MatchFeatures) -> Dict[str, float]:
        f = match.features

        home = f.market_implied_prob_home or DEFAULT_1X2[0]
        draw = f.market_implied_prob_draw or DEFAULT_1X2[1]
        away = f.market_implied_prob_away or DEFAULT_1X2[2]

        # Form on a 0-15 scale
        form_diff = (f.home_form_points / 15) - (f.away_form_points / 15)
        home += form_diff * 0.1
        away -= form_diff * 0.1

        # Attack of one side against the defence of the other
        home_goal_power = (f.home_goals_scored_avg / GOALS_BASELINE) * (f.away_goals_conceded_avg / GOALS_BASELINE)
        away_goal_power = (f.away_goals_scored_avg / GOALS_BASELINE) * (f.home_goals_conceded_avg / GOALS_BASELINE)
        home += (home_goal_power - away_goal_power) * 0.05
        away += (away_goal_power - home_goal_power) * 0.05

        meetings = f.h2h_home_wins + f.h2h_draws + f.h2h_away_wins
        h2h_factor = (f.h2h_home_wins - f.h2h_away_wins) / (meetings or 1)
        home += h2h_factor * 0.05
        away -= h2h_factor * 0.05

        # Home advantage
        home += 0.05
        away -= 0.05

        closeness = 1 - abs(home - away)
        draw += closeness * 0.1

        home = _clamp(home, 0.05, 0.9)
        draw = _clamp(draw, 0.05, 0.6)
        away = _clamp(away, 0.05, 0.9)

        total = home + draw + away
        return {"home": home / total, "draw": draw / total, "away": away / total}

    @staticmethod
    def predict_btts(match: MatchFeatures) -> Dict[str, float]:
        f = match.features

        yes = f.market_implied_prob_btts_yes or DEFAULT_BTTS_YES

        home_scoring = f.home_goals_scored_avg / GOALS_BASELINE
        home_conceding = f.home_goals_conceded_avg / GOALS_BASELINE
        away_scoring = f.away_goals_scored_avg / GOALS_BASELINE
        away_conceding = f.away_goals_conceded_avg / GOALS_BASELINE
        yes += (home_scoring * away_conceding + away_scoring * home_conceding) * 0.1

        # No meetings counts as a 0% rate
        both_scored = sum(1 for m in match.h2h_matches if m.home_score > 0 and m.away_score > 0)
        h2h_rate = both_scored / (len(match.h2h_matches) or 1)
        yes = (yes + h2h_rate) / 2

        yes = _clamp(yes, 0.1, 0.9)
        return {"yes": yes, "no": 1 - yes}

    @staticmethod
    def predict_over_under(match: MatchFeatures) -> Dict[str, float]:
        f = match.features

        over = f.market_implied_prob_over_2_5 or DEFAULT_OVER_2_5

        home_xg = f.home_goals_scored_avg * f.away_goals_conceded_avg * f.home_advantage_factor
        away_xg = f.away_goals_scored_avg * f.home_goals_conceded_avg
        expected_goals = home_xg + away_xg

        over += (expected_goals - GOAL_LINE) * 0.1

        meetings = len(match.h2h_matches)
        h2h_avg_goals = sum(m.home_score + m.away_score for m in match.h2h_matches) / (meetings or 1)
        over = (over + (0.6 if h2h_avg_goals > GOAL_LINE else 0.4)) / 2

        over = _clamp(over, 0.1, 0.9)
        return {"over_2_5": over, "under_2_5": 1 - over, "expected_goals": expected_goals}

    @staticmethod
    def collect_candidates(
        match: MatchFeatures,
        prob_1x2: Dict[str, float],
        prob_btts: Dict[str, float],
        prob_ou: Dict[str, float],
    ) -> List[Candidate]:
        """Priced outcomes in tie-break order; unpriced or unquoted markets are skipped."""
        f = match.features
        snapshot = match.best_odds
        if snapshot is None:
            return []

        table = [
            ("1", "1x2", "home_win", prob_1x2["home"], f.market_implied_prob_home),
            ("X", "1x2", "draw", prob_1x2["draw"], f.market_implied_prob_draw),
            ("2", "1x2", "away_win", prob_1x2["away"], f.market_implied_prob_away),
            ("BTTS Yes", "btts", "btts_yes", prob_btts["yes"], f.market_implied_prob_btts_yes),
            ("BTTS No", "btts", "btts_no", prob_btts["no"], f.market_implied_prob_btts_no),
            ("Over 2.5", "ou_2_5", "over_2_5", prob_ou["over_2_5"], f.market_implied_prob_over_2_5),
            ("Under 2.5", "ou_2_5", "under_2_5", prob_ou["under_2_5"], f.market_implied_prob_under_2_5),
        ]

        candidates = []
        for bet, market, outcome, model_prob, market_prob in table:
            price = snapshot.get(outcome)
            if not market_prob or price is None or not price.odds.is_quoted:
                continue
            candidates.append(Candidate(
                bet=bet,
                market=market,
                bookmaker=price.bookmaker,
                odds=price.odds.decimal,
                model_prob=model_prob,
                market_prob=market_prob,
            ))
        return candidates

    @staticmethod
    def pick_best(candidates: List[Candidate], config: ValueBettingConfig) -> Optional[Candidate]:
        """
        Largest edge among candidates clearing both the edge and confidence bars.

        Ties keep the earlier candidate.
        """
        best = None
        for candidate in candidates:
            if candidate.edge <= config.edge_threshold:
                continue
            if candidate.model_prob <= config.confidence_threshold:
                continue
            if best is None or candidate.edge > best.edge:
                best = candidate
        return best

    @staticmethod
    def explain(match: MatchFeatures, candidate: Candidate, expected_goals: float):
        f = match.features
        reasons = []
        subject = f"{match.home_team} vs {match.away_team}"

        if candidate.bet in ("1", "2"):
            home_side = candidate.bet == "1"
            team = match.home_team if home_side else match.away_team
            subject = team
            form_gap = f.home_form_points - f.away_form_points
            if (form_gap if home_side else -form_gap) >= 4:
                reasons.append((f"{team} has superior recent form", "Excellent Form"))
            if home_side:
                reasons.append((f"Home advantage for {match.home_team}", "Home Advantage"))
            meetings = f.h2h_home_wins + f.h2h_draws + f.h2h_away_wins
            wins = f.h2h_home_wins if home_side else f.h2h_away_wins
            if meetings and wins / meetings > 0.6:
                reasons.append(("Favorable head-to-head record", "H2H Dominance"))
        elif candidate.bet in ("BTTS Yes", "Over 2.5") and expected_goals > GOAL_LINE:
            reasons.append((f"Expected goals of {expected_goals:.2f} point to an open game", "High Scoring"))
        elif candidate.bet in ("BTTS No", "Under 2.5") and expected_goals < GOAL_LINE:
            reasons.append((f"Expected goals of {expected_goals:.2f} point to a tight game", "Low Scoring"))

        if candidate.edge >= 0.15:
            reasons.append((f"Model probability beats the market by {candidate.edge * 100:.1f}%", "Market Edge"))

        return compose_reasoning(reasons, subject)

    @classmethod
    def predict_match(cls, match: MatchFeatures, config: ValueBettingConfig) -> PredictionResult:
        prob_1x2 = cls.predict_1x2(match)
        prob_btts = cls.predict_btts(match)
        prob_ou = cls.predict_over_under(match)

        candidates = cls.collect_candidates(match, prob_1x2, prob_btts, prob_ou)
        best = cls.pick_best(candidates, config)

        recommendation = None
        if best is not None:
            reasoning, key_factors = cls.explain(match, best, prob_ou["expected_goals"])
            recommendation = ValueRecommendation(
                bet=best.bet,
                market=best.market,
                bookmaker=best.bookmaker,
                odds=best.odds,
                confidence=best.model_prob,
                edge=best.edge,
                ev=best.ev,
                reasoning=reasoning,
                key_factors=key_factors,
            )

        return PredictionResult(
            match_id=match.match_id,
            date=match.date,
            timestamp=match.timestamp,
            league=match.league,
            country=match.country,
            home_team=match.home_team,
            away_team=match.away_team,
            kickoff_time=timestamp_to_iso(match.timestamp),
            model_prob_1x2=prob_1x2,
            model_prob_btts=prob_btts,
            model_prob_over_under=prob_ou,
            best_bookmaker=recommendation.bookmaker if recommendation else "",
            best_odds=recommendation.odds if recommendation else 0.0,
            recommendation=recommendation,
            raw_features=match.features,
        )

    @classmethod
    def predict_matches(
        cls,
        matches: List[MatchFeatures],
        config: Optional[ValueBettingConfig] = None,
    ) -> List[PredictionResult]:
        """
        Predict every match; a match that fails is logged and omitted.

        Returns:
            PredictionResult per successfully scored match, in input order
        """
        config = config or ValueBettingConfig()
        predictions = []

        for match in matches:
            try:
                prediction = cls.predict_match(match, config)
            except Exception as e:
                logger.error(f"Error predicting match {match.match_id}: {e}")
                continue

            predictions.append(prediction)

            rec = prediction.recommendation
            if rec:
                log_recommendation(
                    league=match.league,
                    match=f"{match.home_team} vs {match.away_team}",
                    bookmaker=rec.bookmaker,
                    bet=rec.bet,
                    odds=rec.odds,
                    confidence=rec.confidence,
                    edge=rec.edge,
                    ev=rec.ev,
                )

        recommended = sum(1 for p in predictions if p.recommendation)
        logger.info(
            f"Predicted {len(predictions)}/{len(matches)} matches, {recommended} above "
            f"{config.edge_threshold*100:.1f}% edge and {config.confidence_threshold*100:.0f}% confidence"
        )
        return predictions
