"""Logging setup shared by the CLI and the test suite."""
# @file purpose: Configure stdlib logging with a rich console handler.

from __future__ import annotations

import logging

from rich.logging import RichHandler

ROOT_LOGGER = "webauto"


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Attach a RichHandler to the package logger once and set its level.
    Calling it again only updates the level.
    """
    log = logging.getLogger(ROOT_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    log.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in log.handlers):
        handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="%H:%M:%S"))
        log.addHandler(handler)
    return log
