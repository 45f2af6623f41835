"""
Configuration constants for the BetBot proxy
Centralizes tunables and logger setup so modules stay free of magic numbers
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from .constants import (
    CACHE_DURATIONS,
    FALLBACK_CONFIDENCE,
    LOG_FORMAT,
    MAX_DESCRIPTION_LENGTH,
    MAX_KEY_FACTORS,
    MIN_KEY_FACTORS,
)


API_TIMEOUT = float(os.getenv("API_TIMEOUT", 10))
"""Default timeout (seconds) for outbound API calls."""

AI_PARSE_TIMEOUT = float(os.getenv("AI_PARSE_TIMEOUT", 30))
"""Timeout (seconds) for the language-model parse request."""

ODDS_MAX_ATTEMPTS = int(os.getenv("ODDS_MAX_ATTEMPTS", 3))
ODDS_BASE_DELAY = float(os.getenv("ODDS_BASE_DELAY", 0.5))
ODDS_JITTER = float(os.getenv("ODDS_JITTER", 0.25))

DEFAULT_SPORT = os.getenv("BETBOT_DEFAULT_SPORT", "nba").strip().lower() or None
"""Sport assumed when a bet names a player or team but no sport keyword."""

__all__ = [
    "AI_PARSE_TIMEOUT",
    "API_TIMEOUT",
    "CACHE_DURATIONS",
    "DEFAULT_SPORT",
    "FALLBACK_CONFIDENCE",
    "MAX_DESCRIPTION_LENGTH",
    "MAX_KEY_FACTORS",
    "MIN_KEY_FACTORS",
    "ODDS_BASE_DELAY",
    "ODDS_JITTER",
    "ODDS_MAX_ATTEMPTS",
    "setup_logger",
]


def setup_logger(name: str) -> logging.Logger:
    """Create or retrieve a configured logger for the application."""

    logger = logging.getLogger(name)

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    logger.setLevel(log_level)

    if logging.getLogger().handlers:
        logger.propagate = True
        return logger

    if not logger.handlers:
        log_file = os.path.join(os.path.dirname(os.path.dirname(__file__)), "betbot.log")
        handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3)
        formatter = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        logger.addHandler(handler)
        logger.propagate = False

    return logger
