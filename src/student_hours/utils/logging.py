"""Structured logging framework using structlog.

Every module logs through :func:`get_logger`; events are dotted names
(``student_search.started``, ``workbook_scan.sheet_failed``) rendered as one
JSON object per line on stderr, so stdout stays free for CLI output.

Configuration:
- LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO
- LOG_TO_FILE: Also write to a daily-rotated file (1, true, yes). Default: disabled
- LOG_FILE_DIR: Directory for log files. Default: logs/

Usage:
    >>> from student_hours.utils.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("student_search.started", root_path="/data", identifier="12345")
"""

import logging
import os
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, List

import structlog
from structlog.types import Processor

from student_hours.config import get_settings

LOG_FILE_PREFIX = "student-hours"


def _get_log_level() -> int:
    """Get log level from settings, falling back to the raw environment."""
    try:
        level_name = get_settings().LOG_LEVEL.upper()
    except Exception:
        # Settings may fail to load on a malformed .env; logging must still work
        level_name = os.getenv("LOG_LEVEL", "INFO").upper()

    return getattr(logging, level_name, logging.INFO)


def _should_log_to_file() -> bool:
    return os.getenv("LOG_TO_FILE", "").lower() in ("1", "true", "yes")


def _get_log_file_path() -> Path:
    """Daily log file, e.g. ``logs/student-hours-20240301.log``."""
    log_dir = Path(os.getenv("LOG_FILE_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"{LOG_FILE_PREFIX}-{datetime.now():%Y%m%d}.log"


def _build_handlers(level: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if _should_log_to_file():
        handlers.append(
            TimedRotatingFileHandler(
                filename=str(_get_log_file_path()),
                when="midnight",
                backupCount=30,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def _configure_structlog() -> None:
    """Route structlog through stdlib logging and render events as JSON."""
    level = _get_log_level()
    logging.basicConfig(format="%(message)s", level=level, handlers=[])
    for handler in _build_handlers(level):
        logging.root.addHandler(handler)

    processors: List[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        # Spanish headers and file names stay readable
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


_configure_structlog()


def get_logger(name: str) -> Any:
    """Get a structlog BoundLogger named after the calling module."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> Any:
    """Create a logger with bound context fields.

    Example:
        >>> logger = bind_context(identifier="12345", root_path="/data")
        >>> logger.info("workbook_scan.started", file="Reporte.xlsx")
    """
    return structlog.get_logger().bind(**kwargs)
