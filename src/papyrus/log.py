"""Logging setup for the papyrus command line."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "papyrus"
FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def log_file_path(log_dir: Path, day: date | None = None) -> Path:
    day = day or date.today()
    return log_dir / f"papyrus-{day.isoformat()}.log"


def configure_logging(
    level: str = "info",
    log_dir: Path | None = None,
    *,
    console: Console | None = None,
) -> logging.Logger:
    """Attach a rich console handler (and optionally a daily log file).

    Calling it again replaces the handlers installed by a previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
    )
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path(log_dir), encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
    return logger
