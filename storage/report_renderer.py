"""HTML report for a day's predictions."""
import logging
from datetime import date, datetime
from html import escape
from pathlib import Path
from typing import Dict, List, Union

from core.models import PredictionResult
from storage.output_manager import as_prediction_dict
from utils.datetime_utils import parse_datetime

logger = logging.getLogger(__name__)

GREEN = "#c8f7c5"
AMBER = "#fff4cc"
RED = "#ffd6d6"

TOP_PICK_CONFIDENCE = 0.7
TOP_PICK_LIMIT = 5

STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; margin: 0; padding: 20px; color: #333; }
    .container { max-width: 1200px; margin: 0 auto; }
    header { background-color: #f8f9fa; padding: 20px; margin-bottom: 20px; border-left: 5px solid #007bff; }
    .disclaimer { background-color: #f8d7da; border-left: 5px solid #dc3545; padding: 10px 20px; margin-bottom: 20px; }
    .summary { display: flex; flex-wrap: wrap; margin-bottom: 20px; }
    .summary-box { background-color: #e9ecef; padding: 15px; flex: 1; margin: 0 10px 10px 0; min-width: 200px; text-align: center; }
    .summary-box p { font-size: 24px; font-weight: bold; margin: 10px 0 0; }
    table { width: 100%; border-collapse: collapse; margin-bottom: 30px; }
    th, td { padding: 12px 15px; text-align: left; border-bottom: 1px solid #ddd; }
    th { background-color: #007bff; color: white; }
    .top-picks { background-color: #e9ecef; padding: 20px; margin-bottom: 30px; }
    .footer { text-align: center; margin-top: 30px; color: #6c757d; }
"""


def row_colour(confidence: float) -> str:
    if confidence >= 0.8:
        return GREEN
    if confidence >= 0.65:
        return AMBER
    return RED


def _confidence(prediction: Dict) -> float:
    rec = prediction.get("recommendation")
    return rec["confidence"] if rec else 0.0


def _kickoff(kickoff_time: str) -> str:
    if not kickoff_time:
        return "-"
    try:
        return parse_datetime(kickoff_time).strftime("%d/%m/%Y %H:%M")
    except ValueError:
        return escape(kickoff_time)


def _pick_text(rec: Dict) -> str:
    return f"{escape(rec['bet'])} @ {rec['odds']:.2f} ({escape(rec['bookmaker'])})"


def _match_row(p: Dict) -> str:
    rec = p.get("recommendation")
    colour = row_colour(rec["confidence"]) if rec else RED
    one_x_two = p["model_prob_1x2"]
    ou = p["model_prob_over_under"]
    edge = f"{rec['edge']*100:.1f}%" if rec else "-"
    ev = f"{rec['ev']:.2f}" if rec else "-"
    pick = _pick_text(rec) if rec else "No Recommendation"

    return f"""
        <tr style="background-color: {colour}">
          <td>{escape(p['league'])}</td>
          <td>{_kickoff(p['kickoff_time'])}</td>
          <td>{escape(p['home_team'])} vs {escape(p['away_team'])}</td>
          <td>{one_x_two['home']*100:.1f}% / {one_x_two['draw']*100:.1f}% / {one_x_two['away']*100:.1f}%</td>
          <td>{p['model_prob_btts']['yes']*100:.1f}%</td>
          <td>{ou['over_2_5']*100:.1f}% ({ou['expected_goals']:.1f})</td>
          <td>{pick}</td>
          <td>{edge}</td>
          <td>{ev}</td>
        </tr>"""


def _top_picks(ordered: List[Dict]) -> str:
    picks = [p for p in ordered if p.get("recommendation") and _confidence(p) >= TOP_PICK_CONFIDENCE]
    picks = picks[:TOP_PICK_LIMIT]

    if not picks:
        return '<div class="top-picks"><h2>Top Picks</h2><p>No high-confidence picks for today.</p></div>'

    items = ""
    for p in picks:
        rec = p["recommendation"]
        items += f"""
          <li>
            <strong>{escape(p['home_team'])} vs {escape(p['away_team'])}</strong> - {_pick_text(rec)}<br>
            <small>Confidence: {rec['confidence']*100:.1f}% | Edge: {rec['edge']*100:.1f}% | EV: {rec['ev']:.2f}</small><br>
            <small>Reasoning: {escape(rec.get('reasoning', ''))}</small>
          </li>"""
    return f'<div class="top-picks"><h2>Top Picks</h2><ul>{items}\n        </ul></div>'


def render_html_report(day: date, predictions: List[Union[PredictionResult, Dict]]) -> str:
    """Report ordered by recommendation confidence; matches without one sort last."""
    rows = [as_prediction_dict(p) for p in predictions]
    ordered = sorted(rows, key=_confidence, reverse=True)

    recommended = [p for p in rows if p.get("recommendation")]
    avg_edge = sum(p["recommendation"]["edge"] for p in recommended) / (len(recommended) or 1)
    stamp = day.strftime("%Y%m%d")

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Football Predictions - {day.isoformat()}</title>
  <style>{STYLE}</style>
</head>
<body>
  <div class="container">
    <header>
      <h1>Football Match Predictions - {day.isoformat()}</h1>
      <p>Model probabilities compared with the best available bookmaker prices</p>
    </header>
    <div class="disclaimer">
      <p>This report provides probabilistic signals only. Past performance is not a guarantee of future results.</p>
    </div>
    <div class="summary">
      <div class="summary-box"><h3>Total Matches</h3><p>{len(rows)}</p></div>
      <div class="summary-box"><h3>Recommended Bets</h3><p>{len(recommended)}</p></div>
      <div class="summary-box"><h3>Average Edge</h3><p>{avg_edge*100:.1f}%</p></div>
    </div>
    {_top_picks(ordered)}
    <h2>All Matches</h2>
    <table>
      <thead>
        <tr>
          <th>League</th><th>Kickoff</th><th>Match</th><th>1X2 Probabilities</th><th>BTTS Yes</th>
          <th>Over 2.5 (xG)</th><th>Recommendation</th><th>Edge</th><th>EV</th>
        </tr>
      </thead>
      <tbody>{''.join(_match_row(p) for p in ordered)}
      </tbody>
    </table>
    <p>
      <a href="summary-{stamp}.csv">Download CSV</a> |
      <a href="predictions-{stamp}.json">Download JSON</a>
    </p>
    <div class="footer">Generated on {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}</div>
  </div>
</body>
</html>
"""


def write_html_report(output_dir: Path, day: date, predictions: List[Union[PredictionResult, Dict]]) -> Path:
    path = Path(output_dir) / f"report-{day.strftime('%Y%m%d')}.html"
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_html_report(day, predictions))
    logger.info(f"HTML report saved to {path}")
    return path
