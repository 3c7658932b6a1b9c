"""
Logging configuration for the Vite & Gourmand application.

Usage:
    from vite_gourmand.logging_config import setup_logging
    setup_logging()  # Call once at application startup

Every line carries the ID of the request being served (the X-Request-ID set
by RequestIDMiddleware), or ``-`` outside a request:

    2026-06-15 10:00:00 - vite_gourmand.services.order - INFO - [3f2a...] Order VG-... created

Environment variables:
    LOG_LEVEL: Set to DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)
"""
import logging
import os
import sys
from contextvars import ContextVar
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "vite_gourmand"

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Quieted to WARNING unless running at DEBUG
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3", "sqlalchemy.engine")

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Attach the current request ID to every record as ``request_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def resolve_level(level: Optional[str] = None) -> str:
    """Return a valid level name from ``level`` or LOG_LEVEL, defaulting to INFO."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()
    return level if level in VALID_LEVELS else "INFO"


def setup_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> str:
    """
    Configure logging for the application.

    Installs one stream handler on the root logger; calling it again replaces
    that handler instead of adding a second one.

    Args:
        level: Log level string. If not provided, reads LOG_LEVEL.
        stream: Output stream (default: stdout)

    Returns:
        The level name that was applied.
    """
    level = resolve_level(level)
    numeric_level = getattr(logging, level)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(numeric_level)

    logging.getLogger("vite_gourmand").setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if level == "DEBUG" else logging.WARNING)

    logging.getLogger(__name__).debug("Logging configured at %s level", level)
    return level
