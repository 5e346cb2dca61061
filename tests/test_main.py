import asyncio
import json
import logging

import pytest

import main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    # setup_logging attaches file handlers under tmp_path; detach them again
    for name in (None, "recommendation_tracker", "performance"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def run(argv):
    return asyncio.run(main.main(main.parse_arguments(argv)))


def test_parse_arguments_defaults():
    args = main.parse_arguments([])
    assert not (args.fetch or args.predict or args.report)
    assert args.top_n == 10
    assert args.edge_threshold is None


def test_offline_run_writes_all_outputs(workdir):
    raw = workdir / "data" / "raw" / "20250301"
    write(raw / "fixtures.json", [{
        "home_team": "Arsenal", "away_team": "Everton", "date": "2025-03-01",
        "kickoff_time": "2025-03-01T15:00:00Z", "league": "Premier League",
        "home_form": ["W", "W", "W", "W", "W"], "away_form": ["L", "L", "L", "L", "L"],
    }])
    write(raw / "stats.json", [{
        "home_team": "Arsenal FC", "away_team": "Everton FC",
        "home_goals_scored_last5": 15, "away_goals_conceded_last5": 15,
    }])
    write(raw / "odds_pinnacle.json", [{
        "home_team": "Arsenal", "away_team": "Everton",
        "home_win_odds": 1.9, "draw_odds": 3.8, "away_win_odds": 4.75,
    }])

    assert run(["--date", "2025-03-01", "--offline"]) == 0

    output = workdir / "output"
    predictions = json.loads((output / "predictions-20250301.json").read_text(encoding="utf-8"))
    assert len(predictions) == 1
    assert predictions[0]["recommendation"]["bet"] == "1"
    assert (output / "summary-20250301.csv").exists()
    assert (output / "report-20250301.html").exists()


def test_predict_without_raw_data_fails(workdir):
    assert run(["--date", "2025-03-01", "--predict"]) == 1


def test_report_without_predictions_fails(workdir):
    assert run(["--date", "2025-03-01", "--report"]) == 1


def test_invalid_threshold_is_a_config_error(workdir):
    assert run(["--date", "2025-03-01", "--offline", "--edge-threshold", "2"]) == 2


def test_invalid_date(workdir):
    assert run(["--date", "01/03/2025"]) == 2


def test_operational_fixtures_mode(workdir):
    write(workdir / "ops.json", [{
        "id": 1,
        "start_time": "2025-03-01T15:00:00Z",
        "league": "Premier League",
        "home_team": {"id": 10, "name": "Arsenal", "form_points": 15, "home_win_rate": 0.8, "position": 1},
        "away_team": {"id": 20, "name": "Everton", "form_points": 0, "away_win_rate": 0.2, "position": 10},
        "h2h_home_wins": 3, "h2h_draws": 1, "h2h_away_wins": 1,
        "home_odds": 1.8, "away_odds": 4.5,
    }])

    assert run(["--date", "2025-03-01", "--fixtures", "ops.json"]) == 0

    recommendations = json.loads((workdir / "output" / "recommendations-20250301.json").read_text(encoding="utf-8"))
    assert recommendations[0]["category"] == "SAFE_BET"
    assert recommendations[0]["confidence_score"] == 75
    store = json.loads((workdir / "output" / "prediction_store.json").read_text(encoding="utf-8"))
    assert store["1"]["is_active"] is True
