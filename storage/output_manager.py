"""Output management for predictions and reports."""
import json
import csv
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Union

from core.models import PredictionResult, Recommendation
from config.settings import OUTPUT_DIR

CSV_HEADER = [
    "Match ID", "Date", "Kickoff Time (UTC)", "League", "Country",
    "Home Team", "Away Team", "Home Win Prob", "Draw Prob", "Away Win Prob",
    "BTTS Yes Prob", "Over 2.5 Prob", "Expected Goals",
    "Recommendation", "Bookmaker", "Odds", "Confidence", "Edge", "Expected Value",
]


def as_prediction_dict(prediction: Union[PredictionResult, Dict]) -> Dict:
    return prediction.to_dict() if isinstance(prediction, PredictionResult) else prediction


def _fixed(value, places: int) -> str:
    return f"{value:.{places}f}" if value else ""


class OutputManager:
    """Manage output files and reports."""

    def __init__(self, output_dir: str = OUTPUT_DIR):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def stamp(day: date) -> str:
        return day.strftime("%Y%m%d")

    def save_json(self, filename: str, data: Any) -> Path:
        """Save data as JSON file."""
        path = self.output_dir / filename
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        return path

    def predictions_path(self, day: date) -> Path:
        return self.output_dir / f"predictions-{self.stamp(day)}.json"

    def save_predictions_json(self, day: date, predictions: List[PredictionResult]) -> Path:
        data = [as_prediction_dict(p) for p in predictions]
        return self.save_json(self.predictions_path(day).name, data)

    def load_predictions(self, day: date) -> List[Dict]:
        with open(self.predictions_path(day), "r", encoding="utf-8") as f:
            return json.load(f)

    def save_predictions_csv(self, day: date, predictions: List[Union[PredictionResult, Dict]]) -> Path:
        """Save the per-match summary as CSV for easy analysis in Excel."""
        path = self.output_dir / f"summary-{self.stamp(day)}.csv"

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)

            for p in map(as_prediction_dict, predictions):
                rec = p.get("recommendation") or {}
                ou = p["model_prob_over_under"]
                writer.writerow([
                    p["match_id"],
                    p["date"],
                    p["kickoff_time"],
                    p["league"],
                    p["country"],
                    p["home_team"],
                    p["away_team"],
                    f"{p['model_prob_1x2']['home']:.4f}",
                    f"{p['model_prob_1x2']['draw']:.4f}",
                    f"{p['model_prob_1x2']['away']:.4f}",
                    f"{p['model_prob_btts']['yes']:.4f}",
                    f"{ou['over_2_5']:.4f}",
                    f"{ou['expected_goals']:.2f}",
                    rec.get("bet", ""),
                    rec.get("bookmaker", ""),
                    rec.get("odds", ""),
                    _fixed(rec.get("confidence"), 4),
                    _fixed(rec.get("edge"), 4),
                    _fixed(rec.get("ev"), 4),
                ])
        return path

    def save_recommendations_json(self, day: date, recommendations: List[Recommendation]) -> Path:
        data = [r.to_dict() for r in recommendations]
        return self.save_json(f"recommendations-{self.stamp(day)}.json", data)

    def print_summary(self, predictions: List[Union[PredictionResult, Dict]], top_n: int = 10):
        """Print the top recommendations by confidence to console."""
        picks = [p for p in map(as_prediction_dict, predictions) if p.get("recommendation")]
        picks.sort(key=lambda p: p["recommendation"]["confidence"], reverse=True)

        print("\n" + "=" * 100)
        print(f"TOP {top_n} RECOMMENDATIONS ({len(picks)} of {len(predictions)} matches)")
        print("=" * 100)

        for i, p in enumerate(picks[:top_n], 1):
            rec = p["recommendation"]
            print(f"\n{i}. {p['home_team']} vs {p['away_team']}")
            print(f"   League: {p['league']} | Kickoff: {p['kickoff_time'] or '-'}")
            print(f"   Bet: {rec['bet']} @ {rec['odds']:.2f} ({rec['bookmaker']})")
            print(f"   Confidence: {rec['confidence']*100:.1f}% | Edge: {rec['edge']*100:.1f}% | EV: {rec['ev']:.2f}")
            print(f"   {rec['reasoning']}")

        print("\n" + "=" * 100)

    def print_recommendations(self, recommendations: List[Recommendation], top_n: int = 10):
        print("\n" + "=" * 100)
        print(f"TOP {top_n} FIXTURE RECOMMENDATIONS")
        print("=" * 100)

        for i, rec in enumerate(recommendations[:top_n], 1):
            print(f"\n{i}. Match {rec.match_id}: {rec.recommended_team} ({rec.bet_type.value})")
            print(f"   Confidence: {rec.confidence_score} | Category: {rec.category.value} | Odds value: {rec.odds_value:.1f}")
            print(f"   {rec.reasoning}")

        print("\n" + "=" * 100)
