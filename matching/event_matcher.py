"""Event matching across providers."""
import logging
from typing import Dict, List

from core.models import BookmakerQuoteRecord, H2HMatch
from matching.team_normalizer import names_match

logger = logging.getLogger(__name__)

class EventMatcher:
    """Match bookmaker quotes and historical meetings to a canonical fixture."""

    @classmethod
    def find_quotes(
        cls,
        books: Dict[str, List[BookmakerQuoteRecord]],
        home_team: str,
        away_team: str,
    ) -> List[BookmakerQuoteRecord]:
        """
        First quote per bookmaker whose home and away teams both match.

        Bookmakers keep the order of `books`, which makes best-price tie-breaks
        deterministic for a given feed order.
        """
        matched = []
        for book_name, quotes in books.items():
            for quote in quotes:
                if names_match(quote.home_team, home_team) and names_match(quote.away_team, away_team):
                    matched.append(quote)
                    break
            else:
                logger.debug(f"{book_name}: no quote for {home_team} vs {away_team}")
        return matched

    @staticmethod
    def involves(meeting: H2HMatch, team: str) -> str:
        """'home', 'away' or '' depending on where `team` played in the meeting."""
        if names_match(meeting.home_team, team):
            return "home"
        if names_match(meeting.away_team, team):
            return "away"
        return ""
