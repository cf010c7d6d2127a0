"""
Logging for the fleetsync backend.

Three sinks, each with its own level:
  console               → LOG_LEVEL
  logs/fleetsync.log    → LOG_FILE_LEVEL, everything
  logs/audit.log        → INFO, only the fleetsync.services.audit_service logger,
                          i.e. one line per committed field change
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from fleetsync.config import settings

LOG_DIR = settings.LOG_DIR or os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs"
)
AUDIT_LOGGER = "fleetsync.services.audit_service"

_configured = False


def _rotating(filename: str, level: str, fmt: logging.Formatter) -> RotatingFileHandler:
    # 10 × 5MB per file
    handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, filename),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def _configure_logging():
    global _configured
    if _configured:
        return
    _configured = True
    os.makedirs(LOG_DIR, exist_ok=True)

    console_level = settings.LOG_LEVEL.upper()
    file_level = settings.LOG_FILE_LEVEL.upper()
    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(fmt)

    root = logging.getLogger()
    # The root passes the most verbose of the two levels; handlers filter the rest
    root.setLevel(min(logging.getLevelName(console_level), logging.getLevelName(file_level)))
    root.addHandler(console)
    root.addHandler(_rotating("fleetsync.log", file_level, fmt))

    audit_fmt = logging.Formatter(fmt="%(asctime)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    logging.getLogger(AUDIT_LOGGER).addHandler(_rotating("audit.log", "INFO", audit_fmt))


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_logging()
    return logging.getLogger(name)
