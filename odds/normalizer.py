"""
Odds normalization: decimal prices to every representation, bookmaker
overround and de-vigged fair prices.

All functions here are total. A price that is missing, non-numeric or <= 1.0
is an unquoted price and normalizes to zeros instead of raising.
"""
import logging
import math
from typing import List, Optional, Sequence

from core.models import BookmakerMarket, OddsQuote

logger = logging.getLogger(__name__)

FRACTION_TOLERANCE = 0.001
MAX_DENOMINATOR = 20

# Checked before the denominator search, most readable form first
COMMON_FRACTIONS = [(1, 1), (1, 2), (2, 1), (3, 1), (4, 1), (5, 1), (6, 1), (10, 1)]

UNQUOTED = OddsQuote(decimal=0.0, fractional="0/1", american=0, implied_probability=0.0)


def _as_price(value) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(price):
        return 0.0
    return price if price > 1.0 else 0.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def implied_probability(decimal_odds) -> float:
    """1 / decimal, or 0 for an unquoted price."""
    price = _as_price(decimal_odds)
    return 1.0 / price if price else 0.0


def decimal_from_probability(probability) -> float:
    """Inverse of implied_probability; 0 for probabilities outside (0, 1]."""
    try:
        p = float(probability)
    except (TypeError, ValueError):
        return 0.0
    if not 0.0 < p <= 1.0:
        return 0.0
    return 1.0 / p


def decimal_to_fractional(decimal_odds) -> str:
    """Closest n/d (d <= 20) to the net return, e.g. 3.5 -> "5/2"."""
    price = _as_price(decimal_odds)
    if not price:
        return "0/1"

    net = price - 1.0

    for numerator, denominator in COMMON_FRACTIONS:
        if abs(net - numerator / denominator) < FRACTION_TOLERANCE:
            return f"{numerator}/{denominator}"

    best_numerator, best_denominator = 1, 1
    best_error = abs(net - 1.0)

    for denominator in range(1, MAX_DENOMINATOR + 1):
        numerator = _round_half_up(net * denominator)
        if numerator <= 0:
            continue
        error = abs(net - numerator / denominator)
        if error < best_error:
            best_error = error
            best_numerator, best_denominator = numerator, denominator
            if error < FRACTION_TOLERANCE:
                break

    return f"{best_numerator}/{best_denominator}"


def decimal_to_american(decimal_odds) -> int:
    """Positive (underdog) at 2.0 and above, negative (favourite) below."""
    price = _as_price(decimal_odds)
    if not price:
        return 0
    if price >= 2.0:
        return _round_half_up((price - 1.0) * 100)
    return _round_half_up(-100 / (price - 1.0))


def to_canonical_odds(decimal_odds) -> OddsQuote:
    """Build an OddsQuote from a decimal price."""
    price = _as_price(decimal_odds)
    if not price:
        return UNQUOTED
    return OddsQuote(
        decimal=price,
        fractional=decimal_to_fractional(price),
        american=decimal_to_american(price),
        implied_probability=1.0 / price,
    )


def market_margin(home_odds, draw_odds, away_odds) -> float:
    """
    Bookmaker overround of a 1X2 market as a fraction (0.05 = 5%).

    0 when any of the three prices is unquoted.
    """
    probs = [implied_probability(p) for p in (home_odds, draw_odds, away_odds)]
    if not all(probs):
        return 0.0
    return sum(probs) - 1.0


def fair_odds(decimal_prices: Sequence) -> List[float]:
    """
    Remove the margin proportionally: each implied probability is divided by
    the book total and inverted back to a price.

    Unquoted prices stay 0 and do not contribute to the total.
    """
    probs = [implied_probability(p) for p in decimal_prices]
    total = sum(probs)
    if total <= 0:
        return [0.0 for _ in probs]
    return [decimal_from_probability(p / total) for p in probs]


def _fair_pair(first, second):
    fair_first, fair_second = fair_odds([first, second])
    return to_canonical_odds(fair_first), to_canonical_odds(fair_second)


def normalize_bookmaker_market(
    bookmaker: str,
    home_win_odds,
    draw_odds,
    away_win_odds,
    btts_yes_odds: Optional[float] = None,
    btts_no_odds: Optional[float] = None,
    over_2_5_odds: Optional[float] = None,
    under_2_5_odds: Optional[float] = None,
) -> BookmakerMarket:
    """
    Normalize one bookmaker's raw prices for a match.

    BTTS and over/under are attached only when both sides of the pair are
    quoted; each pair also gets its own de-vigged fair quotes.
    """
    margin = market_margin(home_win_odds, draw_odds, away_win_odds)
    if margin < 0:
        logger.warning(f"{bookmaker}: negative 1X2 overround {margin:.4f}, check source prices")

    fair_home, fair_draw, fair_away = fair_odds([home_win_odds, draw_odds, away_win_odds])

    optional = {}
    if _as_price(btts_yes_odds) and _as_price(btts_no_odds):
        optional["btts_yes"] = to_canonical_odds(btts_yes_odds)
        optional["btts_no"] = to_canonical_odds(btts_no_odds)
        optional["fair_btts_yes"], optional["fair_btts_no"] = _fair_pair(btts_yes_odds, btts_no_odds)

    if _as_price(over_2_5_odds) and _as_price(under_2_5_odds):
        optional["over_2_5"] = to_canonical_odds(over_2_5_odds)
        optional["under_2_5"] = to_canonical_odds(under_2_5_odds)
        optional["fair_over_2_5"], optional["fair_under_2_5"] = _fair_pair(over_2_5_odds, under_2_5_odds)

    return BookmakerMarket(
        bookmaker=bookmaker,
        home_win=to_canonical_odds(home_win_odds),
        draw=to_canonical_odds(draw_odds),
        away_win=to_canonical_odds(away_win_odds),
        margin=margin,
        fair_home_win=to_canonical_odds(fair_home),
        fair_draw=to_canonical_odds(fair_draw),
        fair_away_win=to_canonical_odds(fair_away),
        **optional,
    )
