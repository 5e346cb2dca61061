import logging

import pytest

from odds.normalizer import (
    UNQUOTED,
    decimal_from_probability,
    decimal_to_american,
    decimal_to_fractional,
    fair_odds,
    implied_probability,
    market_margin,
    normalize_bookmaker_market,
    to_canonical_odds,
)


@pytest.mark.parametrize("price, fractional, american", [
    (2.0, "1/1", 100),
    (2.5, "3/2", 150),
    (1.5, "1/2", -200),
    (3.5, "5/2", 250),
    (1.91, "10/11", -110),
    (11.0, "10/1", 1000),
])
def test_canonical_odds(price, fractional, american):
    quote = to_canonical_odds(price)
    assert quote.decimal == price
    assert quote.fractional == fractional
    assert quote.american == american
    assert quote.implied_probability == pytest.approx(1 / price)
    assert quote.is_quoted


@pytest.mark.parametrize("price", [None, "abc", 0, 1.0, -3, float("inf")])
def test_unquoted_prices_degrade_to_zero(price):
    assert to_canonical_odds(price) == UNQUOTED
    assert implied_probability(price) == 0.0
    assert decimal_to_fractional(price) == "0/1"
    assert decimal_to_american(price) == 0


def test_numeric_strings_are_accepted():
    assert to_canonical_odds("2.5").decimal == 2.5


def test_decimal_from_probability():
    assert decimal_from_probability(0.25) == pytest.approx(4.0)
    assert decimal_from_probability(1) == 1.0
    assert decimal_from_probability(0) == 0.0
    assert decimal_from_probability(1.5) == 0.0
    assert decimal_from_probability(None) == 0.0


def test_market_margin():
    margin = market_margin(1.80, 3.60, 4.20)
    assert margin == pytest.approx(1 / 1.8 + 1 / 3.6 + 1 / 4.2 - 1)
    assert margin > 0


def test_market_margin_needs_all_three_prices():
    assert market_margin(1.80, None, 4.20) == 0.0


def test_fair_odds_remove_margin():
    fair = fair_odds([1.80, 3.60, 4.20])
    assert sum(1 / p for p in fair) == pytest.approx(1.0)

    book = 1 / 1.8 + 1 / 3.6 + 1 / 4.2
    assert 1 / fair[0] == pytest.approx((1 / 1.8) / book)


def test_fair_odds_keep_unquoted_as_zero():
    assert fair_odds([2.0, 0, 2.0]) == [pytest.approx(2.0), 0.0, pytest.approx(2.0)]
    assert fair_odds([None, None]) == [0.0, 0.0]


def test_normalize_bookmaker_market_1x2():
    market = normalize_bookmaker_market("pinnacle", 1.80, 3.60, 4.20)

    assert market.bookmaker == "pinnacle"
    assert market.home_win.decimal == 1.80
    assert market.margin == pytest.approx(market_margin(1.80, 3.60, 4.20))
    fair_total = sum(q.implied_probability for q in (market.fair_home_win, market.fair_draw, market.fair_away_win))
    assert fair_total == pytest.approx(1.0)
    assert market.btts_yes is None
    assert market.over_2_5 is None


def test_optional_pairs_need_both_sides():
    market = normalize_bookmaker_market("bet365", 2.0, 3.4, 3.8, btts_yes_odds=1.7, over_2_5_odds=1.9, under_2_5_odds=1.95)

    assert market.btts_yes is None
    assert market.fair_btts_yes is None
    assert market.over_2_5.decimal == 1.9
    assert market.under_2_5.decimal == 1.95
    pair_total = market.fair_over_2_5.implied_probability + market.fair_under_2_5.implied_probability
    assert pair_total == pytest.approx(1.0)


def test_negative_overround_is_logged(caplog):
    with caplog.at_level(logging.WARNING):
        market = normalize_bookmaker_market("broken", 4.0, 4.0, 4.0)

    assert market.margin == pytest.approx(-0.25)
    assert "negative 1X2 overround" in caplog.text


@pytest.mark.parametrize("price", [1.01, 1.5, 2.0, 3.75, 12.0, 101.0])
def test_probability_round_trip(price):
    assert decimal_from_probability(implied_probability(price)) == pytest.approx(price)


@pytest.mark.parametrize("prices", [(1.80, 3.60, 4.20), (1.25, 6.0, 11.0), (2.9, 3.1, 2.6)])
def test_fair_odds_carry_no_margin(prices):
    fair = fair_odds(prices)
    assert sum(1 / p for p in fair) == pytest.approx(1.0, abs=1e-9)
    assert market_margin(*fair) == pytest.approx(0.0, abs=1e-9)
