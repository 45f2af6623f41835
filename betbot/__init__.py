"""BetBot proxy: bet parsing, odds and stats lookup, key-factor summaries."""

import logging
import os

from .constants import LOG_FORMAT

__version__ = "0.1.0"

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format=LOG_FORMAT,
    )

# Connection-pool chatter drowns out the retry warnings at INFO
for _noisy in ("urllib3", "requests"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
