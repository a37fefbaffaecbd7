"""Logging setup for the command-line entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(level: str = "WARNING") -> None:
    """Send ``formscli`` log records to stderr at *level*.

    Safe to call more than once; the handler is only installed the first time.
    """
    logger = logging.getLogger("formscli")
    logger.setLevel(level.upper())
    if not any(getattr(h, "_formscli", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._formscli = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.propagate = False
