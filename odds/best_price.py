"""Best available price per outcome across bookmakers."""
from typing import List

from core.errors import NoOddsAvailableError
from core.models import BestOddsSnapshot, BestPrice, BookmakerMarket

MANDATORY_OUTCOMES = ("home_win", "draw", "away_win")
OPTIONAL_OUTCOMES = ("btts_yes", "btts_no", "over_2_5", "under_2_5")


def best_odds(markets: List[BookmakerMarket]) -> BestOddsSnapshot:
    """
    Pick the highest decimal price per outcome.

    Linear scan seeded from the first market; a challenger replaces the held
    price only when strictly greater, so ties stay with the first-seen bookmaker.
    Optional outcomes appear once any market quotes them.
    """
    if not markets:
        raise NoOddsAvailableError("No bookmaker odds provided")

    first = markets[0]
    best = {outcome: BestPrice(first.bookmaker, getattr(first, outcome)) for outcome in MANDATORY_OUTCOMES}
    for outcome in OPTIONAL_OUTCOMES:
        quote = getattr(first, outcome)
        if quote is not None:
            best[outcome] = BestPrice(first.bookmaker, quote)

    for market in markets[1:]:
        for outcome in MANDATORY_OUTCOMES + OPTIONAL_OUTCOMES:
            quote = getattr(market, outcome)
            if quote is None:
                continue
            held = best.get(outcome)
            if held is None or quote.decimal > held.odds.decimal:
                best[outcome] = BestPrice(market.bookmaker, quote)

    return BestOddsSnapshot(**best)
