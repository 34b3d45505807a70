"""Logging setup for mcpr processes.

Modules log through ``logging.getLogger(__name__)``; this module only
decides where the ``mcpr`` logger tree writes.  It never writes to stdout:
on the stdio transport stdout carries protocol messages, and a stray byte
there breaks the client connection.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "mcpr"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LEVELS = ("debug", "info", "warning", "error")


def configure_logging(
    level: str = "info",
    *,
    log_file: str | Path | None = None,
    quiet: bool = False,
) -> logging.Logger:
    """Attach exactly one handler to the ``mcpr`` logger.

    Args:
        level: One of ``debug``, ``info``, ``warning`` (``warn``), ``error``.
        log_file: Append to this file instead of stderr.
        quiet: Discard all records (ignored when *log_file* is set).
    """
    name = "warning" if level.lower() == "warn" else level.lower()
    if name not in LEVELS:
        msg = f"Unknown log level: {level!r} (expected one of {', '.join(LEVELS)})"
        raise ValueError(msg)

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    elif quiet:
        handler = logging.NullHandler()
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(name.upper())
    logger.propagate = False
    return logger
