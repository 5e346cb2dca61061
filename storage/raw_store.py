"""
Raw per-source persistence under data/raw/YYYYMMDD/.

Each feed lives in its own JSON file: match feeds are named after the source
(fixtures.json, tips.json, stats.json) and bookmaker feeds are odds_<bookmaker>.json.
Loaders are tolerant: a malformed row is skipped with a warning, the rest of
the file is kept.
"""
import json
import logging
import math
from dataclasses import asdict, is_dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.settings import DATA_DIR, MATCH_SOURCE_PRECEDENCE, ODDS_FILE_PREFIX
from core.models import (
    BookmakerQuoteRecord,
    H2HMatch,
    Injury,
    InjurySeverity,
    MatchRecord,
    ScheduledFixture,
    TeamSnapshot,
)

logger = logging.getLogger(__name__)


def _as_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _as_int(value, default=0):
    number = _as_float(value)
    return int(number) if number is not None else default


def _as_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def raw_dir(day: date, data_dir: str = DATA_DIR) -> Path:
    return Path(data_dir) / "raw" / day.strftime("%Y%m%d")


def read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_source(folder: Path, name: str, rows: List[Any]) -> Path:
    """Write one feed's rows (dataclasses or dicts) as a JSON array."""
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f"{name}.json"
    data = [asdict(row) if is_dataclass(row) else row for row in rows]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    logger.debug(f"Saved {len(data)} rows to {path}")
    return path


def _rows(path: Path) -> List[Dict]:
    data = read_json(path)
    if not isinstance(data, list):
        logger.warning(f"{path.name}: expected a JSON array, got {type(data).__name__}")
        return []
    return data


# -------- Match feeds --------

def _parse_h2h(rows) -> List[H2HMatch]:
    meetings = []
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        home, away = _as_text(row.get("home_team")), _as_text(row.get("away_team"))
        if not home or not away:
            continue
        meetings.append(H2HMatch(
            date=_as_text(row.get("date")) or "",
            home_team=home,
            away_team=away,
            home_score=_as_int(row.get("home_score")),
            away_score=_as_int(row.get("away_score")),
            competition=_as_text(row.get("competition")) or "",
        ))
    return meetings


def _parse_form(value) -> List[str]:
    if isinstance(value, str):
        return [c for c in value.upper() if c in "WDL"]
    if isinstance(value, list):
        return [str(c).strip().upper() for c in value if str(c).strip()]
    return []


def parse_match_record(row: Dict, source: str) -> MatchRecord:
    home, away = _as_text(row.get("home_team")), _as_text(row.get("away_team"))
    if not home or not away:
        raise ValueError("home_team and away_team are required")

    tips = row.get("tips")
    if not isinstance(tips, dict):
        tip = _as_text(row.get("tip") or row.get("prediction"))
        tips = {source: tip} if tip else {}

    timestamp = _as_float(row.get("kickoff_timestamp"))

    return MatchRecord(
        source=source,
        home_team=home,
        away_team=away,
        match_id=_as_text(row.get("match_id")),
        date=_as_text(row.get("date")),
        kickoff_time=_as_text(row.get("kickoff_time")),
        kickoff_timestamp=int(timestamp) if timestamp else None,
        league=_as_text(row.get("league")),
        country=_as_text(row.get("country")),
        home_form=_parse_form(row.get("home_form")),
        away_form=_parse_form(row.get("away_form")),
        home_goals_scored_last5=_as_int(row.get("home_goals_scored_last5")),
        home_goals_conceded_last5=_as_int(row.get("home_goals_conceded_last5")),
        away_goals_scored_last5=_as_int(row.get("away_goals_scored_last5")),
        away_goals_conceded_last5=_as_int(row.get("away_goals_conceded_last5")),
        h2h_matches=_parse_h2h(row.get("h2h_matches")),
        home_odds=_as_float(row.get("home_odds")),
        draw_odds=_as_float(row.get("draw_odds")),
        away_odds=_as_float(row.get("away_odds")),
        home_elo=_as_float(row.get("home_elo")),
        away_elo=_as_float(row.get("away_elo")),
        home_days_rest=_as_int(row.get("home_days_rest"), None),
        away_days_rest=_as_int(row.get("away_days_rest"), None),
        tips={str(k): str(v) for k, v in tips.items()},
    )


def load_match_records(path: Path, source: Optional[str] = None) -> List[MatchRecord]:
    source = source or path.stem
    records = []
    for i, row in enumerate(_rows(path)):
        try:
            records.append(parse_match_record(row, source))
        except (AttributeError, ValueError) as e:
            logger.warning(f"{path.name}: skipping row {i}: {e}")
    return records


def load_sources(folder: Path, precedence: List[str] = MATCH_SOURCE_PRECEDENCE) -> List[List[MatchRecord]]:
    """Match feeds present in `folder`, in precedence order."""
    sources = []
    for name in precedence:
        path = folder / f"{name}.json"
        if not path.exists():
            logger.info(f"No {name} feed in {folder}")
            continue
        records = load_match_records(path, name)
        logger.info(f"Loaded {len(records)} {name} records")
        sources.append(records)
    return sources


# -------- Bookmaker feeds --------

def parse_quote_record(row: Dict, bookmaker: str) -> BookmakerQuoteRecord:
    home, away = _as_text(row.get("home_team")), _as_text(row.get("away_team"))
    if not home or not away:
        raise ValueError("home_team and away_team are required")

    quote = BookmakerQuoteRecord(
        bookmaker=_as_text(row.get("bookmaker")) or bookmaker,
        home_team=home,
        away_team=away,
        home_win_odds=_as_float(row.get("home_win_odds")),
        draw_odds=_as_float(row.get("draw_odds")),
        away_win_odds=_as_float(row.get("away_win_odds")),
        btts_yes_odds=_as_float(row.get("btts_yes_odds")),
        btts_no_odds=_as_float(row.get("btts_no_odds")),
        over_2_5_odds=_as_float(row.get("over_2_5_odds")),
        under_2_5_odds=_as_float(row.get("under_2_5_odds")),
        kickoff_time=_as_text(row.get("kickoff_time")),
    )
    if row.get("scraped_at"):
        quote.scraped_at = str(row["scraped_at"])
    return quote


def load_odds_files(folder: Path) -> Dict[str, List[BookmakerQuoteRecord]]:
    """Quote records per bookmaker from every odds_<bookmaker>.json, in file-name order."""
    books = {}
    for path in sorted(folder.glob(f"{ODDS_FILE_PREFIX}*.json")):
        bookmaker = path.stem[len(ODDS_FILE_PREFIX):]
        quotes = []
        for i, row in enumerate(_rows(path)):
            try:
                quotes.append(parse_quote_record(row, bookmaker))
            except (AttributeError, ValueError) as e:
                logger.warning(f"{path.name}: skipping row {i}: {e}")
        books[bookmaker] = quotes
        logger.info(f"Loaded {len(quotes)} quotes from {bookmaker}")
    return books


def save_books(folder: Path, books: Dict[str, List[BookmakerQuoteRecord]]):
    for bookmaker, quotes in books.items():
        save_source(folder, f"{ODDS_FILE_PREFIX}{bookmaker}", quotes)


# -------- Operational fixtures --------

def _parse_team(row: Dict) -> TeamSnapshot:
    name = _as_text(row.get("name"))
    if name is None or row.get("id") is None:
        raise ValueError("team id and name are required")

    injuries = []
    for item in row.get("injuries") or []:
        if not isinstance(item, dict):
            continue
        severity = _as_text(item.get("severity"))
        try:
            level = InjurySeverity(severity.upper()) if severity else None
        except ValueError:
            logger.debug(f"Unknown injury severity {severity!r} for {name}")
            level = None
        injuries.append(Injury(player=_as_text(item.get("player")) or "", severity=level))

    position = _as_int(row.get("position"), None)

    return TeamSnapshot(
        id=row["id"],
        name=name,
        form_points=_as_float(row.get("form_points")) or 0.0,
        home_win_rate=_as_float(row.get("home_win_rate")) or 0.0,
        away_win_rate=_as_float(row.get("away_win_rate")) or 0.0,
        avg_goals_scored=_as_float(row.get("avg_goals_scored")) or 0.0,
        position=position,
        injuries=injuries,
    )


def parse_fixture(row: Dict) -> ScheduledFixture:
    start_time = _as_text(row.get("start_time"))
    if row.get("id") is None or not start_time:
        raise ValueError("id and start_time are required")

    return ScheduledFixture(
        id=row["id"],
        start_time=start_time,
        home_team=_parse_team(row.get("home_team") or {}),
        away_team=_parse_team(row.get("away_team") or {}),
        league=_as_text(row.get("league")) or "",
        status=(_as_text(row.get("status")) or "SCHEDULED").upper(),
        h2h_home_wins=_as_int(row.get("h2h_home_wins")),
        h2h_draws=_as_int(row.get("h2h_draws")),
        h2h_away_wins=_as_int(row.get("h2h_away_wins")),
        home_odds=_as_float(row.get("home_odds")),
        draw_odds=_as_float(row.get("draw_odds")),
        away_odds=_as_float(row.get("away_odds")),
    )


def load_fixtures(path: Path) -> List[ScheduledFixture]:
    fixtures = []
    for i, row in enumerate(_rows(path)):
        try:
            fixtures.append(parse_fixture(row))
        except (AttributeError, ValueError) as e:
            logger.warning(f"{path.name}: skipping fixture {i}: {e}")
    return fixtures
