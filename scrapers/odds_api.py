"""The Odds API (v4) client: fixtures and per-bookmaker decimal prices."""
import asyncio
import logging
import math
from datetime import date
from typing import Dict, List, Optional, Tuple

from config.leagues import get_league_config
from config.settings import ODDS_API_BASE, ODDS_API_KEY, ODDS_API_REGIONS
from core.http_client import HttpClient
from core.models import BookmakerQuoteRecord, MatchRecord
from matching.team_normalizer import names_match
from utils.datetime_utils import normalize_iso_datetime, same_day, to_unix_timestamp

logger = logging.getLogger(__name__)

GOAL_LINE = 2.5


def _price(outcome: Dict) -> Optional[float]:
    try:
        value = float(outcome.get("price"))
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) and value > 1.0 else None


class OddsApiClient:
    """Client for The Odds API sports odds endpoint."""

    def __init__(self, http: HttpClient, api_key: str = ODDS_API_KEY, base_url: str = ODDS_API_BASE):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        if not self.enabled:
            logger.warning("Odds API key not configured, odds fetching disabled")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @staticmethod
    def parse_h2h(market: Dict, home: str, away: str) -> Dict[str, float]:
        odds = {}
        for outcome in market.get("outcomes", []):
            name = outcome.get("name") or ""
            price = _price(outcome)
            if not price:
                continue
            if name.lower() == "draw":
                odds["draw"] = price
            elif names_match(name, home):
                odds["home"] = price
            elif names_match(name, away):
                odds["away"] = price
        return odds

    @staticmethod
    def parse_totals(market: Dict) -> Dict[str, float]:
        odds = {}
        for outcome in market.get("outcomes", []):
            try:
                point = float(outcome.get("point"))
            except (TypeError, ValueError):
                continue
            if abs(point - GOAL_LINE) > 0.01:
                continue
            label = (outcome.get("name") or "").lower()
            price = _price(outcome)
            if price and label == "over":
                odds["over"] = price
            elif price and label == "under":
                odds["under"] = price
        return odds

    def parse_bookmaker(self, bookmaker: Dict, event: Dict) -> Optional[BookmakerQuoteRecord]:
        home = event.get("home_team") or ""
        away = event.get("away_team") or ""

        h2h, totals = {}, {}
        for market in bookmaker.get("markets", []):
            key = market.get("key")
            if key == "h2h":
                h2h = self.parse_h2h(market, home, away)
            elif key == "totals":
                totals = self.parse_totals(market)

        if not h2h and not totals:
            return None

        return BookmakerQuoteRecord(
            bookmaker=bookmaker.get("key") or bookmaker.get("title") or "unknown",
            home_team=home,
            away_team=away,
            home_win_odds=h2h.get("home"),
            draw_odds=h2h.get("draw"),
            away_win_odds=h2h.get("away"),
            over_2_5_odds=totals.get("over"),
            under_2_5_odds=totals.get("under"),
            kickoff_time=normalize_iso_datetime(event.get("commence_time") or ""),
        )

    @staticmethod
    def parse_fixture(event: Dict, league_key: str) -> Optional[MatchRecord]:
        home = event.get("home_team")
        away = event.get("away_team")
        if not home or not away:
            return None

        league_config = get_league_config(league_key) or {}
        kickoff = normalize_iso_datetime(event.get("commence_time") or "")

        return MatchRecord(
            source="fixtures",
            home_team=home,
            away_team=away,
            date=kickoff[:10] or None,
            kickoff_time=kickoff or None,
            kickoff_timestamp=to_unix_timestamp(kickoff),
            league=league_config.get("display_name") or event.get("sport_title"),
            country=league_config.get("country"),
        )

    async def fetch_league_events(self, league_key: str) -> List[Dict]:
        if not self.enabled:
            return []

        league_config = get_league_config(league_key)
        sport_key = (league_config or {}).get("odds_api_key")
        if not sport_key:
            logger.warning(f"No Odds API sport key for {league_key}")
            return []

        url = f"{self.base_url}/sports/{sport_key}/odds"
        params = {
            "apiKey": self.api_key,
            "regions": ODDS_API_REGIONS,
            "markets": "h2h,totals",
            "oddsFormat": "decimal",
            "dateFormat": "iso",
        }

        data = await self.http.get(url, params=params)
        if not isinstance(data, list):
            logger.warning(f"Odds API returned no events for {league_key}")
            return []
        return data

    async def fetch_matchday(
        self,
        league_keys: List[str],
        day: Optional[date] = None,
    ) -> Tuple[List[MatchRecord], Dict[str, List[BookmakerQuoteRecord]]]:
        """
        Fetch every league concurrently.

        Returns:
            Fixture records, and quote records grouped by bookmaker key
        """
        if not self.enabled:
            return [], {}

        results = await asyncio.gather(
            *(self.fetch_league_events(key) for key in league_keys),
            return_exceptions=True,
        )

        fixtures: List[MatchRecord] = []
        books: Dict[str, List[BookmakerQuoteRecord]] = {}

        for league_key, events in zip(league_keys, results):
            if isinstance(events, Exception):
                logger.error(f"Odds API - {league_key}: {events}")
                continue

            for event in events:
                if day is not None and not same_day(event.get("commence_time") or "", day):
                    continue
                fixture = self.parse_fixture(event, league_key)
                if fixture is None:
                    continue
                fixtures.append(fixture)

                for bookmaker in event.get("bookmakers", []):
                    quote = self.parse_bookmaker(bookmaker, event)
                    if quote:
                        books.setdefault(quote.bookmaker, []).append(quote)

        logger.info(f"Odds API: {len(fixtures)} fixtures, {len(books)} bookmakers")
        return fixtures, books
