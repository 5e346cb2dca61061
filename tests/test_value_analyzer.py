import pytest

from analysis.features import assemble_match_features
from analysis.value_analyzer import Candidate, ValueAnalyzer
from config.settings import ValueBettingConfig
from core.models import BookmakerQuoteRecord, H2HMatch, MatchRecord

CONFIG = ValueBettingConfig(edge_threshold=0.08, confidence_threshold=0.65)


def dominant_home_match(books=None):
    record = MatchRecord(
        source="fixtures",
        home_team="Arsenal",
        away_team="Everton",
        date="2024-05-01",
        kickoff_timestamp=1714575600,
        league="Premier League",
        country="England",
        home_form=["W"] * 5,
        away_form=["L"] * 5,
        home_goals_scored_last5=15,
        away_goals_conceded_last5=15,
        h2h_matches=[H2HMatch(f"202{i}-01-01", "Arsenal", "Everton", 2, 0) for i in range(5)],
    )
    if books is None:
        books = {"pinnacle": [BookmakerQuoteRecord("pinnacle", "Arsenal", "Everton", 1.9, 3.8, 4.75)]}
    return assemble_match_features(record, books)


def candidate(bet, model_prob, market_prob, odds=2.0):
    return Candidate(bet=bet, market="1x2", bookmaker="pinnacle", odds=odds, model_prob=model_prob, market_prob=market_prob)


def test_candidate_edge_and_ev():
    c = candidate("1", 0.6, 0.5, odds=2.0)
    assert c.edge == pytest.approx(0.1)
    assert c.ev == pytest.approx(0.2)


def test_edge_without_confidence_is_not_recommended():
    # 10% edge, but 55% is under the 65% confidence bar
    assert ValueAnalyzer.pick_best([candidate("1", 0.55, 0.45)], CONFIG) is None


def test_confidence_without_edge_is_not_recommended():
    assert ValueAnalyzer.pick_best([candidate("1", 0.70, 0.65)], CONFIG) is None


def test_largest_edge_wins_and_ties_keep_first():
    candidates = [
        candidate("1", 0.70, 0.60),
        candidate("BTTS Yes", 0.80, 0.60),
        candidate("Over 2.5", 0.80, 0.60),
    ]
    assert ValueAnalyzer.pick_best(candidates, CONFIG).bet == "BTTS Yes"


def test_thresholds_are_strict():
    config = ValueBettingConfig(edge_threshold=0.25, confidence_threshold=0.75)
    # Confidence exactly at the bar
    assert ValueAnalyzer.pick_best([candidate("1", 0.75, 0.25)], config) is None
    # Edge exactly at the bar
    assert ValueAnalyzer.pick_best([candidate("1", 0.875, 0.625)], config) is None
    assert ValueAnalyzer.pick_best([candidate("1", 0.875, 0.5)], config).bet == "1"


def test_1x2_probabilities_are_normalized():
    probs = ValueAnalyzer.predict_1x2(dominant_home_match())

    assert sum(probs.values()) == pytest.approx(1.0)
    assert probs["home"] > probs["draw"] > probs["away"]


def test_btts_and_over_under_are_complementary():
    match = dominant_home_match()
    btts = ValueAnalyzer.predict_btts(match)
    ou = ValueAnalyzer.predict_over_under(match)

    assert btts["yes"] + btts["no"] == pytest.approx(1.0)
    assert 0.1 <= btts["yes"] <= 0.9
    assert ou["over_2_5"] + ou["under_2_5"] == pytest.approx(1.0)
    # 3.0 scored x 3.0 conceded x 1.2 home advantage, away side scores nothing
    assert ou["expected_goals"] == pytest.approx(10.8)


def test_dominant_home_side_is_recommended():
    result = ValueAnalyzer.predict_match(dominant_home_match(), CONFIG)
    rec = result.recommendation

    assert rec is not None
    assert rec.bet == "1"
    assert rec.market == "1x2"
    assert rec.bookmaker == "pinnacle"
    assert rec.odds == 1.9
    assert rec.confidence > 0.65
    assert rec.edge > 0.15
    assert rec.ev == pytest.approx(rec.confidence * 1.9 - 1)
    assert rec.key_factors == ["Excellent Form", "Home Advantage", "H2H Dominance", "Market Edge"]
    assert rec.reasoning.startswith("Arsenal has superior recent form.")
    assert result.best_bookmaker == "pinnacle"
    assert result.kickoff_time == "2024-05-01T15:00:00Z"


def test_no_odds_means_probabilities_but_no_recommendation():
    result = ValueAnalyzer.predict_match(dominant_home_match(books={}), CONFIG)

    assert result.recommendation is None
    assert result.best_bookmaker == ""
    assert result.best_odds == 0.0
    assert sum(result.model_prob_1x2.values()) == pytest.approx(1.0)


def test_predict_matches_skips_failures():
    good = dominant_home_match()
    broken = dominant_home_match()
    broken.features = None

    results = ValueAnalyzer.predict_matches([broken, good], CONFIG)

    assert len(results) == 1
    assert results[0].match_id == good.match_id


def test_prediction_to_dict_rounds_recommendation():
    data = ValueAnalyzer.predict_match(dominant_home_match(), CONFIG).to_dict()

    assert data["recommendation"]["confidence"] == round(data["recommendation"]["confidence"], 4)
    assert data["raw_features"]["home_form_points"] == 15
