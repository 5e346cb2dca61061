"""Logging configuration for recommendation tracking and analysis."""
import logging
import sys
from pathlib import Path
from datetime import datetime
from config.settings import LOGS_DIR, DEBUG_MODE

def _pipe_file_handler(path: Path) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s|%(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    return handler

def setup_logging(session_name: str = "matchday", logs_dir: str = LOGS_DIR):
    """Setup structured logging for the application."""
    logs_path = Path(logs_dir)
    logs_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)
    root_logger.handlers = []

    # Console handler - INFO level
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    root_logger.addHandler(console_handler)

    # File handler - DEBUG level for main log
    main_log_file = logs_path / f"{session_name}_{timestamp}.log"
    file_handler = logging.FileHandler(main_log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root_logger.addHandler(file_handler)

    # Recommendation tracking - separate file for analysis
    rec_logger = logging.getLogger('recommendation_tracker')
    rec_logger.setLevel(logging.INFO)
    rec_logger.propagate = False
    rec_logger.handlers = []
    rec_log_file = logs_path / f"recommendations_{timestamp}.log"
    rec_logger.addHandler(_pipe_file_handler(rec_log_file))

    # Performance logger
    perf_logger = logging.getLogger('performance')
    perf_logger.setLevel(logging.INFO)
    perf_logger.propagate = False
    perf_logger.handlers = []
    perf_logger.addHandler(_pipe_file_handler(logs_path / f"performance_{timestamp}.log"))

    logging.info(f"Logging initialized - Session: {session_name}_{timestamp}")
    logging.info(f"Main log: {main_log_file}")
    logging.info(f"Recommendation log: {rec_log_file}")

    return timestamp

def log_recommendation(
    league: str,
    match: str,
    bookmaker: str,
    bet: str,
    odds: float,
    confidence: float,
    edge: float,
    ev: float
):
    """Log an emitted recommendation in structured format for analysis."""
    logger = logging.getLogger('recommendation_tracker')
    logger.info(
        f"{league}|{match}|{bookmaker}|{bet}|"
        f"{odds:.3f}|{confidence:.4f}|{edge:.4f}|{ev:.4f}"
    )

def log_performance_metric(metric_name: str, value: float, unit: str = ""):
    """Log performance metrics."""
    logger = logging.getLogger('performance')
    logger.info(f"{metric_name}|{value:.3f}|{unit}")
