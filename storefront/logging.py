"""
Logging setup for the storefront.

Importing this module attaches one stdout handler to the root logger
(unless something else already did) and hands out named loggers:

    from storefront.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Cart persisted")
    logger.error("Failed to load catalog", exc_info=True)

Anything derived from a request (session ids, search terms, emails) goes
through the sanitize_* helpers before it reaches a log line.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# supabase-py and upstash-redis both talk over httpx, which logs every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")

# Newlines and tabs would let a crafted value forge extra log entries (CWE-117)
_LOG_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})

ID_LOG_LENGTH = 8


def _get_log_level() -> int:
    """LOG_LEVEL from the environment; unknown names fall back to INFO."""
    return getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = _get_log_level()
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    # Vercel stamps each line itself
    on_vercel = os.environ.get("VERCEL") == "1"
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if on_vercel else LOG_FORMAT))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """Named logger, usually get_logger(__name__)."""
    return logging.getLogger(name)


def _clean(value: object) -> str:
    return str(value).translate(_LOG_ESCAPES)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    Shorten an id (session, user, product) to a log-safe prefix.

    Session ids double as cart bearer tokens, so only the first
    ID_LOG_LENGTH characters are ever logged. Empty values become "N/A".
    """
    if not id_value:
        return "N/A"
    return _clean(id_value)[:ID_LOG_LENGTH]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Escape a free-form value and cut it at max_length, marking the cut with "..."."""
    if not value:
        return "N/A"
    safe_value = _clean(value)
    if len(safe_value) > max_length:
        return safe_value[:max_length] + "..."
    return safe_value


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
