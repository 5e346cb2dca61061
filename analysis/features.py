"""Feature generation for match scoring."""
import logging
import re
from statistics import mean
from typing import Dict, List, Optional, Sequence

from config.settings import HOME_ADVANTAGE_FACTOR
from core.models import (
    BookmakerMarket,
    BookmakerQuoteRecord,
    FeatureVector,
    H2HMatch,
    MatchFeatures,
    MatchRecord,
)
from matching.event_matcher import EventMatcher
from odds.best_price import best_odds
from odds.normalizer import normalize_bookmaker_market
from utils.datetime_utils import to_unix_timestamp

logger = logging.getLogger(__name__)

FORM_POINTS = {"W": 3, "D": 1, "L": 0}

# Goal tallies cover the last five matches and are always averaged over five,
# even when fewer results are known.
LAST_N = 5

DEFAULT_ELO = 1500.0


def form_points(form: Sequence[str]) -> int:
    """W=3, D=1, L=0 summed over the recent-result list."""
    if not form:
        return 0
    return sum(FORM_POINTS.get(str(result).strip().upper(), 0) for result in form)


def last5_average(tally) -> float:
    try:
        return float(tally or 0) / LAST_N
    except (TypeError, ValueError):
        return 0.0


def count_h2h_results(h2h_matches: List[H2HMatch], team: str) -> Dict[str, int]:
    """Wins, draws and losses of `team` in prior meetings, whichever side it played."""
    tally = {"win": 0, "draw": 0, "loss": 0}
    for meeting in h2h_matches or []:
        side = EventMatcher.involves(meeting, team)
        if not side:
            continue
        goals_for, goals_against = (
            (meeting.home_score, meeting.away_score) if side == "home"
            else (meeting.away_score, meeting.home_score)
        )
        if goals_for > goals_against:
            tally["win"] += 1
        elif goals_for < goals_against:
            tally["loss"] += 1
        else:
            tally["draw"] += 1
    return tally


def h2h_goals_average(h2h_matches: List[H2HMatch], team: str) -> float:
    """Average goals `team` scored in the meetings it appears in."""
    goals = []
    for meeting in h2h_matches or []:
        side = EventMatcher.involves(meeting, team)
        if side == "home":
            goals.append(meeting.home_score)
        elif side == "away":
            goals.append(meeting.away_score)
    return float(mean(goals)) if goals else 0.0


def _mean_fair_probability(markets: List[BookmakerMarket], outcome: str) -> Optional[float]:
    quotes = [q for q in (getattr(m, outcome) for m in markets) if q is not None and q.is_quoted]
    if not quotes:
        return None
    return mean(q.implied_probability for q in quotes)


def build_features(
    record: MatchRecord,
    markets: Optional[List[BookmakerMarket]] = None,
    home_advantage_factor: float = HOME_ADVANTAGE_FACTOR,
) -> FeatureVector:
    """
    Numeric projection of a canonical match.

    Market-implied probabilities are means of each bookmaker's fair (de-vigged)
    probability; 1X2 falls back to 0 and optional markets to None when no
    bookmaker quotes them.
    """
    markets = markets or []
    h2h = count_h2h_results(record.h2h_matches, record.home_team)

    return FeatureVector(
        home_form_points=form_points(record.home_form),
        away_form_points=form_points(record.away_form),
        home_goals_scored_avg=last5_average(record.home_goals_scored_last5),
        home_goals_conceded_avg=last5_average(record.home_goals_conceded_last5),
        away_goals_scored_avg=last5_average(record.away_goals_scored_last5),
        away_goals_conceded_avg=last5_average(record.away_goals_conceded_last5),
        h2h_home_wins=h2h["win"],
        h2h_draws=h2h["draw"],
        h2h_away_wins=h2h["loss"],
        h2h_home_goals_avg=h2h_goals_average(record.h2h_matches, record.home_team),
        h2h_away_goals_avg=h2h_goals_average(record.h2h_matches, record.away_team),
        home_advantage_factor=home_advantage_factor,
        market_implied_prob_home=_mean_fair_probability(markets, "fair_home_win") or 0.0,
        market_implied_prob_draw=_mean_fair_probability(markets, "fair_draw") or 0.0,
        market_implied_prob_away=_mean_fair_probability(markets, "fair_away_win") or 0.0,
        market_implied_prob_btts_yes=_mean_fair_probability(markets, "fair_btts_yes"),
        market_implied_prob_btts_no=_mean_fair_probability(markets, "fair_btts_no"),
        market_implied_prob_over_2_5=_mean_fair_probability(markets, "fair_over_2_5"),
        market_implied_prob_under_2_5=_mean_fair_probability(markets, "fair_under_2_5"),
        home_elo=record.home_elo or DEFAULT_ELO,
        away_elo=record.away_elo or DEFAULT_ELO,
        days_rest_home=record.home_days_rest or None,
        days_rest_away=record.away_days_rest or None,
    )


def make_match_id(record: MatchRecord, match_date: str) -> str:
    if record.match_id:
        return str(record.match_id)
    return re.sub(r"[^a-z0-9]", "_", f"{match_date}_{record.home_team}_{record.away_team}", flags=re.I).lower()


def _match_date(record: MatchRecord) -> str:
    if record.date:
        return record.date
    if record.kickoff_time:
        return re.split(r"[ T]", record.kickoff_time.strip())[0]
    return ""


def normalize_quotes(quotes: List[BookmakerQuoteRecord]) -> List[BookmakerMarket]:
    return [
        normalize_bookmaker_market(
            q.bookmaker,
            q.home_win_odds,
            q.draw_odds,
            q.away_win_odds,
            q.btts_yes_odds,
            q.btts_no_odds,
            q.over_2_5_odds,
            q.under_2_5_odds,
        )
        for q in quotes
    ]


def assemble_match_features(
    record: MatchRecord,
    books: Dict[str, List[BookmakerQuoteRecord]],
    home_advantage_factor: float = HOME_ADVANTAGE_FACTOR,
) -> MatchFeatures:
    """Attach matched bookmaker markets, best prices and features to a canonical record."""
    quotes = EventMatcher.find_quotes(books, record.home_team, record.away_team)
    markets = normalize_quotes(quotes)

    # No market means nothing to price: keep probabilities, drop the snapshot
    snapshot = best_odds(markets) if markets else None

    match_date = _match_date(record)
    timestamp = record.kickoff_timestamp or to_unix_timestamp(record.kickoff_time) or 0

    return MatchFeatures(
        match_id=make_match_id(record, match_date),
        date=match_date,
        timestamp=int(timestamp),
        league=record.league or "",
        country=record.country or "",
        home_team=record.home_team,
        away_team=record.away_team,
        h2h_matches=list(record.h2h_matches),
        bookmaker_odds=markets,
        best_odds=snapshot,
        features=build_features(record, markets, home_advantage_factor),
    )


def assemble_all_features(
    records: List[MatchRecord],
    books: Dict[str, List[BookmakerQuoteRecord]],
    home_advantage_factor: float = HOME_ADVANTAGE_FACTOR,
) -> List[MatchFeatures]:
    """Feature every record; a record that fails is logged and left out."""
    matches = []
    for record in records:
        try:
            matches.append(assemble_match_features(record, books, home_advantage_factor))
        except Exception as e:
            logger.warning(f"Skipping features for {record.home_team} vs {record.away_team}: {e}")
    logger.info(f"Built features for {len(matches)}/{len(records)} matches")
    return matches
