"""
logging.py — Log stream setup for the dashboard backend

Purpose:
- One console stream for API requests, brapi.dev imports and DB writes.
- Level comes from settings.LOG_LEVEL; unknown names fall back to INFO.
- Chatty libraries (urllib3 connection pool, SQLAlchemy engine echo) are held
  at WARNING unless the app itself runs at DEBUG.

Format:
    2024-05-02 10:31:07,412 | INFO | findash.services.financials | Stored 2024TRI1 for company 3
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Library loggers that flood INFO with per-request noise
_QUIET_LOGGERS = ("urllib3", "sqlalchemy.engine")


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger. Call once, from main.py.

    `force=True` replaces handlers installed earlier (e.g. by uvicorn's
    reloader) so the format above is the one in effect.
    """
    numeric_level = _resolve_level(level)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    logging.getLogger(__name__).info("Logging initialized with level %s", logging.getLevelName(numeric_level))


def get_logger(name: str) -> logging.Logger:
    """
    Module logger. Usage:

        from findash.core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
