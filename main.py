"""
Matchday Odds Engine
Main application entry point
"""
import asyncio
import argparse
import logging
import sys
import time
from datetime import date, datetime, timezone
from pathlib import Path

# Core imports
from core.errors import ConfigError
from core.http_client import HttpClient
from config.settings import (
    HTTP_TIMEOUT, HTTP_CONCURRENCY, HTTP_RETRIES, HOME_ADVANTAGE_FACTOR,
    DATA_DIR, OUTPUT_DIR, load_scoring_config, load_value_config,
)
from config.leagues import get_leagues_by_priority

# Scrapers
from scrapers.odds_api import OddsApiClient

# Matching & analysis
from matching.source_reconciler import reconcile_sources
from analysis.features import assemble_all_features
from analysis.value_analyzer import ValueAnalyzer
from analysis.weighted_scorer import WeightedFactorScorer

# Storage
from storage import raw_store
from storage.output_manager import OutputManager
from storage.prediction_store import JsonPredictionStore
from storage.report_renderer import write_html_report

# Utils
from utils.logging_config import setup_logging, log_performance_metric

logger = logging.getLogger(__name__)


async def fetch(day: date, folder: Path, max_priority: int):
    """Pull fixtures and bookmaker prices for the day and persist them as raw feeds."""
    league_keys = list(get_leagues_by_priority(min_priority=1, max_priority=max_priority))
    logger.info(f"Fetching {len(league_keys)} leagues: {', '.join(league_keys)}")

    start_time = time.time()
    async with HttpClient(timeout=HTTP_TIMEOUT, concurrency=HTTP_CONCURRENCY, retries=HTTP_RETRIES) as http:
        client = OddsApiClient(http)
        fixtures, books = await client.fetch_matchday(league_keys, day)
    log_performance_metric("fetch_time", time.time() - start_time, "seconds")

    if not fixtures:
        logger.warning("No fixtures fetched; existing raw data is left untouched")
        return

    raw_store.save_source(folder, "fixtures", fixtures)
    raw_store.save_books(folder, books)
    logger.info(f"Raw data saved to {folder}")


def predict(folder: Path, value_config):
    """Reconcile raw feeds, build features and score every match."""
    if not folder.exists():
        raise FileNotFoundError(f"No raw data for this date: {folder}")

    start_time = time.time()
    sources = raw_store.load_sources(folder)
    records = reconcile_sources(sources)
    log_performance_metric("reconcile_time", time.time() - start_time, "seconds")
    logger.info(f"Reconciled {sum(len(s) for s in sources)} source rows into {len(records)} matches")

    books = raw_store.load_odds_files(folder)

    start_time = time.time()
    matches = assemble_all_features(records, books, HOME_ADVANTAGE_FACTOR)
    log_performance_metric("feature_time", time.time() - start_time, "seconds")

    start_time = time.time()
    predictions = ValueAnalyzer.predict_matches(matches, value_config)
    log_performance_metric("scoring_time", time.time() - start_time, "seconds")
    return predictions


def score_fixtures(args, day: date, output_manager: OutputManager):
    """Operational mode: weighted-factor scoring of a fixtures file."""
    scoring_config = load_scoring_config(min_confidence=args.min_confidence)
    fixtures = raw_store.load_fixtures(Path(args.fixtures))
    logger.info(f"Loaded {len(fixtures)} fixtures from {args.fixtures}")

    store = JsonPredictionStore(Path(OUTPUT_DIR) / "prediction_store.json")
    scorer = WeightedFactorScorer(scoring_config, store)
    recommendations = scorer.generate_predictions(fixtures, day=day, league=args.league)

    path = output_manager.save_recommendations_json(day, recommendations)
    logger.info(f"{len(recommendations)} recommendations saved to {path}")
    output_manager.print_recommendations(recommendations, top_n=args.top_n)


async def main(args) -> int:
    """Main application logic."""
    session_timestamp = setup_logging("matchday")
    start_time = time.time()

    try:
        day = datetime.strptime(args.date, "%Y-%m-%d").date() if args.date else datetime.now(timezone.utc).date()
    except ValueError:
        logger.error(f"Invalid --date {args.date!r}, expected YYYY-MM-DD")
        return 2

    run_all = not (args.fetch or args.predict or args.report)
    folder = raw_store.raw_dir(day, DATA_DIR)
    output_manager = OutputManager()

    logger.info("=" * 100)
    logger.info(f"MATCHDAY ODDS ENGINE - {day.isoformat()} (session {session_timestamp})")
    logger.info("=" * 100)

    try:
        if args.fixtures:
            score_fixtures(args, day, output_manager)
            return 0

        value_config = load_value_config(
            edge_threshold=args.edge_threshold,
            confidence_threshold=args.confidence_threshold,
        )

        if args.fetch or run_all:
            if args.offline:
                logger.info("Offline mode: skipping fetch, using existing raw data")
            else:
                await fetch(day, folder, args.max_priority)

        predictions = None
        if args.predict or run_all:
            predictions = predict(folder, value_config)
            json_path = output_manager.save_predictions_json(day, predictions)
            csv_path = output_manager.save_predictions_csv(day, predictions)
            logger.info(f"Predictions saved to {json_path} and {csv_path}")
            output_manager.print_summary(predictions, top_n=args.top_n)

        if args.report or run_all:
            if predictions is None:
                predictions = output_manager.load_predictions(day)
            write_html_report(output_manager.output_dir, day, predictions)

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except (OSError, ValueError) as e:
        logger.error(f"Run failed: {e}")
        return 1

    total_duration = time.time() - start_time
    log_performance_metric("total_runtime", total_duration, "seconds")
    logger.info(f"Total runtime: {total_duration:.1f} seconds")
    return 0


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Football odds reconciliation and recommendation engine")

    parser.add_argument("--date", help="Match day as YYYY-MM-DD (default: today, UTC)")
    parser.add_argument("--fetch", action="store_true", help="Fetch fixtures and odds into raw storage")
    parser.add_argument("--predict", action="store_true", help="Reconcile raw feeds and score matches")
    parser.add_argument("--report", action="store_true", help="Render the HTML report")
    parser.add_argument("--offline", action="store_true", help="Never hit the network; use existing raw data")

    parser.add_argument(
        "--fixtures",
        metavar="FILE",
        help="Score an operational fixtures JSON file with the weighted-factor engine",
    )
    parser.add_argument("--league", help="Restrict operational scoring to one league")

    parser.add_argument(
        "--edge-threshold",
        type=float,
        help="Minimum model-minus-market edge (default: EDGE_THRESHOLD or 0.08)",
    )
    parser.add_argument(
        "--confidence-threshold",
        type=float,
        help="Minimum model probability (default: CONFIDENCE_THRESHOLD or 0.65)",
    )
    parser.add_argument(
        "--min-confidence",
        type=float,
        help="Minimum weighted-factor confidence, 0-100 (default: MIN_CONFIDENCE_THRESHOLD or 60)",
    )

    parser.add_argument(
        "--max-priority",
        type=int,
        default=2,
        help="Maximum league priority to fetch (1=top leagues, 2=includes secondary, default: 2)"
    )

    parser.add_argument(
        "--top-n",
        type=int,
        default=10,
        help="Number of top recommendations to display (default: 10)"
    )

    return parser.parse_args(argv)


def cli():
    args = parse_arguments()
    sys.exit(asyncio.run(main(args)))


if __name__ == "__main__":
    cli()
