"""Logging configuration for roster-cards.

Sets up standard Python logging on the root logger with a Rich handler, so
log records share the terminal with the rendered cards.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_FORMAT = "%(name)s: %(message)s"


def setup_logging(level: str | int = logging.WARNING, *, console: Console | None = None) -> None:
    """Configure the root logger for the application.

    Args:
        level: Minimum level, either a name ("DEBUG") or a logging constant.
        console: Optional Rich console to write to (stderr by default).
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    root_logger.addHandler(handler)

    # httpx logs every request at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)

    logging.getLogger(__name__).debug("Logging configured. Level=%s", logging.getLevelName(level))
