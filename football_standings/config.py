"""
Runtime tunables for the Football Standings proxy.
Numeric knobs are read from the environment once at import time.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from .constants import STANDINGS_CACHE_TTL as _DEFAULT_CACHE_TTL


USE_LEGACY_RESPONSES = True  # Proxy routes return the upstream document unwrapped

API_TIMEOUT = float(os.getenv("API_TIMEOUT", 10))
"""Timeout (seconds) for the upstream standings request."""

API_MAX_RETRIES = max(int(os.getenv("API_MAX_RETRIES", 1)), 1)
"""Upstream attempts per cache miss. 1 means a single attempt with no retry."""

API_BACKOFF_FACTOR = float(os.getenv("API_BACKOFF_FACTOR", 0.5))
"""urllib3 backoff factor used between upstream attempts when retries > 1."""

CACHE_TIMEOUT = float(os.getenv("CACHE_TIMEOUT", 2))
"""Socket connect/read timeout (seconds) for the cache store."""

STANDINGS_CACHE_TTL = int(os.getenv("STANDINGS_CACHE_TTL", _DEFAULT_CACHE_TTL))
"""Expiry (seconds) applied to every cached standings document."""


def setup_logger(name: str) -> logging.Logger:
    """Create or retrieve a configured logger for the application."""

    logger = logging.getLogger(name)

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    logger.setLevel(log_level)

    logger.propagate = True

    log_file = os.getenv("LOG_FILE")
    if log_file:
        _attach_file_handler(log_file, log_level)

    return logger


def _attach_file_handler(log_file: str, log_level: int) -> RotatingFileHandler:
    """Attach one rotating file handler to the package logger; module loggers propagate to it."""

    package_logger = logging.getLogger(__package__)
    path = os.path.abspath(log_file)
    for existing in package_logger.handlers:
        if isinstance(existing, RotatingFileHandler) and existing.baseFilename == path:
            return existing

    os.makedirs(os.path.dirname(path), exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=3)
    handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))
    handler.setLevel(log_level)
    package_logger.addHandler(handler)
    return handler
