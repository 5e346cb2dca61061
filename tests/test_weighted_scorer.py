from datetime import date

import pytest

from analysis.weighted_scorer import FactorScores, WeightedFactorScorer
from config.settings import ScoringConfig
from core.models import BetCategory, BetType, Injury, InjurySeverity, ScheduledFixture, TeamSnapshot
from storage.prediction_store import JsonPredictionStore


def team(team_id, name, **kwargs):
    return TeamSnapshot(id=team_id, name=name, **kwargs)


def strong_fixture(fixture_id=1, **kwargs):
    base = dict(
        id=fixture_id,
        start_time="2025-03-01T15:00:00Z",
        home_team=team(10, "Arsenal", form_points=15, home_win_rate=0.8, position=1),
        away_team=team(20, "Everton", form_points=0, away_win_rate=0.2, position=10),
        league="Premier League",
        h2h_home_wins=3,
        h2h_draws=1,
        h2h_away_wins=1,
        home_odds=1.8,
        away_odds=4.5,
    )
    base.update(kwargs)
    return ScheduledFixture(**base)


def even_fixture(fixture_id=2, **kwargs):
    base = dict(
        id=fixture_id,
        start_time="2025-03-01T17:30:00Z",
        home_team=team(30, "Leeds"),
        away_team=team(40, "Burnley"),
        league="Championship",
    )
    base.update(kwargs)
    return ScheduledFixture(**base)


def test_form_score():
    home, away = team(1, "A", form_points=15), team(2, "B", form_points=0)
    assert WeightedFactorScorer.form_score(home, away) == 100.0
    assert WeightedFactorScorer.form_score(away, home) == 0.0
    assert WeightedFactorScorer.form_score(team(1, "A", form_points=9), team(2, "B", form_points=6)) == pytest.approx(60.0)


def test_home_away_score():
    home = team(1, "A", home_win_rate=0.8)
    away = team(2, "B", away_win_rate=0.2)
    assert WeightedFactorScorer.home_away_score(home, away) == pytest.approx(80.0)


def test_h2h_score():
    assert WeightedFactorScorer.h2h_score(even_fixture()) == 50.0
    assert WeightedFactorScorer.h2h_score(strong_fixture()) == pytest.approx(60.0)


def test_injury_impact():
    healthy = team(1, "A")
    hit = team(2, "B", injuries=[Injury("Striker", InjurySeverity.SEVERE), Injury("Keeper", InjurySeverity.DOUBTFUL)])

    assert WeightedFactorScorer.injury_impact(healthy, hit) == pytest.approx(85.0)
    assert WeightedFactorScorer.injury_impact(hit, healthy) == pytest.approx(15.0)

    crisis = team(3, "C", injuries=[Injury(str(i), InjurySeverity.SEVERE) for i in range(3)])
    assert WeightedFactorScorer.injury_impact(crisis, healthy) == pytest.approx(-40.0)
    assert WeightedFactorScorer.injury_impact(healthy, crisis) == pytest.approx(140.0)


def test_injury_crisis_lifts_confidence_over_minimum():
    fixture = even_fixture(
        home_team=team(30, "Leeds", home_win_rate=0.5),
        away_team=team(40, "Burnley", away_win_rate=0.5,
                       injuries=[Injury(str(i), InjurySeverity.SEVERE) for i in range(3)]),
    )
    scorer = WeightedFactorScorer(ScoringConfig())

    # 15 + 12.5 + 10 + 21 + 5 = 63.5
    predictions = scorer.generate_predictions([fixture])

    assert len(predictions) == 1
    assert predictions[0].injury_impact == pytest.approx(140.0)
    assert predictions[0].confidence_score == 64
    assert predictions[0].bet_type == BetType.HOME_WIN


def test_league_motivation():
    title_race = team(1, "A", position=2)
    mid_table = team(2, "B", position=10)
    relegation = team(3, "C", position=18)

    assert WeightedFactorScorer.league_motivation(title_race, mid_table) == 55.0
    assert WeightedFactorScorer.league_motivation(mid_table, relegation) == 45.0
    assert WeightedFactorScorer.league_motivation(team(4, "D"), team(5, "E")) == 50.0


def test_confidence_score_rounds_weighted_sum():
    scorer = WeightedFactorScorer(ScoringConfig())
    # 24 + 18.75 + 13 + 9 + 5.5 = 70.25
    assert scorer.confidence_score(FactorScores(80, 75, 65, 60, 55)) == 70
    assert scorer.confidence_score(FactorScores(100, 100, 100, 100, 100)) == 100
    assert scorer.confidence_score(FactorScores(0, 0, 0, 0, 0)) == 0


def test_confidence_score_rounds_halves_up():
    config = ScoringConfig(form_weight=0.5, home_away_weight=0.5, head_to_head_weight=0.0,
                           injury_weight=0.0, league_position_weight=0.0)
    assert WeightedFactorScorer(config).confidence_score(FactorScores(60, 61, 0, 0, 0)) == 61


@pytest.mark.parametrize("form, home_away, h2h, goals, expected", [
    (70, 70, 50, 0.0, BetType.HOME_WIN),
    (30, 50, 30, 0.0, BetType.AWAY_WIN),
    (45, 45, 50, 2.0, BetType.BTTS),
    (55, 50, 50, 0.0, BetType.HOME_WIN),
    (45, 45, 50, 0.0, None),
])
def test_determine_recommendation(form, home_away, h2h, goals, expected):
    home = team(1, "Home", avg_goals_scored=goals)
    away = team(2, "Away", avg_goals_scored=goals)
    pick = WeightedFactorScorer.determine_recommendation(FactorScores(form, home_away, h2h, 50, 50), home, away)

    if expected is None:
        assert pick is None
    else:
        chosen, bet_type = pick
        assert bet_type == expected
        assert chosen is (away if expected == BetType.AWAY_WIN else home)


def test_odds_value():
    fixture = strong_fixture()
    # 70% at 1.8: EV 0.26
    assert WeightedFactorScorer.odds_value(fixture, fixture.home_team, 70) == pytest.approx(26.0)
    # 20% at 4.5 is below the implied 22%
    assert WeightedFactorScorer.odds_value(fixture, fixture.away_team, 20) == 0.0
    assert WeightedFactorScorer.odds_value(strong_fixture(away_odds=None), fixture.home_team, 70) == 0.0


@pytest.mark.parametrize("confidence, odds_value, home_odds, expected", [
    (80, 0.0, 1.8, BetCategory.SAFE_BET),
    (80, 0.0, None, BetCategory.SAFE_BET),
    (70, 15.0, 2.5, BetCategory.VALUE_BET),
    (65, 0.0, 3.5, BetCategory.RISKY_BET),
    (70, 0.0, 2.5, BetCategory.VALUE_BET),
    (80, 0.0, 2.5, BetCategory.VALUE_BET),
])
def test_bet_category(confidence, odds_value, home_odds, expected):
    fixture = even_fixture(home_odds=home_odds)
    assert WeightedFactorScorer.bet_category(confidence, odds_value, fixture) == expected


def test_analyze_strong_fixture():
    rec = WeightedFactorScorer(ScoringConfig()).analyze_fixture(strong_fixture())

    # 30 + 20 + 12 + 7.5 + 5.5
    assert rec.confidence_score == 75
    assert rec.bet_type == BetType.HOME_WIN
    assert rec.recommended_team_id == 10
    assert rec.category == BetCategory.SAFE_BET
    assert rec.odds_value == pytest.approx(35.0)
    assert rec.key_factors == ["Excellent Form", "Home Advantage"]
    assert rec.reasoning == "Arsenal has superior recent form. Strong home advantage for Arsenal."


def test_generic_reasoning_when_no_factor_stands_out():
    fixture = even_fixture(home_team=team(30, "Leeds", home_win_rate=0.5), away_team=team(40, "Burnley", away_win_rate=0.4))
    rec = WeightedFactorScorer(ScoringConfig()).analyze_fixture(fixture)

    assert rec.bet_type == BetType.HOME_WIN
    assert rec.key_factors == []
    assert rec.reasoning == "Based on statistical analysis, Leeds has a favorable profile for this match."


def test_generate_predictions_filters_sorts_and_stores(tmp_path):
    store = JsonPredictionStore(tmp_path / "store.json")
    scorer = WeightedFactorScorer(ScoringConfig(), store)

    very_strong = strong_fixture(3, h2h_home_wins=5, h2h_draws=0, h2h_away_wins=0)
    fixtures = [
        even_fixture(),                                          # below minimum confidence
        strong_fixture(1),
        very_strong,
        strong_fixture(4, status="FINISHED"),
        strong_fixture(5, start_time="2025-03-02T15:00:00Z"),
    ]

    predictions = scorer.generate_predictions(fixtures, day=date(2025, 3, 1))

    assert [p.match_id for p in predictions] == [3, 1]
    assert predictions[0].confidence_score > predictions[1].confidence_score
    assert [row["match_id"] for row in store.list_active()] == [3, 1]


def test_generate_predictions_league_filter():
    scorer = WeightedFactorScorer(ScoringConfig())
    fixtures = [strong_fixture(1), strong_fixture(2, league="La Liga")]

    predictions = scorer.generate_predictions(fixtures, league="la liga")

    assert [p.match_id for p in predictions] == [2]


def test_generate_predictions_isolates_failures():
    scorer = WeightedFactorScorer(ScoringConfig())
    broken = strong_fixture(9)
    broken.home_team = None

    predictions = scorer.generate_predictions([broken, strong_fixture(1)])

    assert [p.match_id for p in predictions] == [1]
