"""Logging setup for the command line.

Trace output owns stdout, so diagnostics only ever go to stderr or a file.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES = 5_000_000
LOG_FILE_BACKUPS = 3

# Transport libraries that log every request.
HTTP_LOGGERS = ("httpx", "httpcore")


def _build_handlers(log_file: Optional[Path]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS))
    return handlers


def quiet_http_loggers(debug: bool) -> None:
    """Show httpx request lines only when debugging; httpcore stays at WARNING."""

    for name in HTTP_LOGGERS:
        level = logging.INFO if debug and name == "httpx" else logging.WARNING
        logging.getLogger(name).setLevel(level)


def configure_logging(debug: bool = False, log_file: Optional[Path] = None) -> None:
    """Replace the root handlers with stderr and an optional rotating file."""

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in _build_handlers(log_file):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    quiet_http_loggers(debug)


__all__ = ["LOG_FORMAT", "configure_logging", "quiet_http_loggers"]
