from __future__ import annotations

import io
import logging
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from papyrus.log import configure_logging, log_file_path


def test_log_file_name_is_daily(tmp_path: Path) -> None:
    assert log_file_path(tmp_path, date(2024, 3, 5)) == tmp_path / "papyrus-2024-03-05.log"


def test_configure_logging_console_and_file(tmp_path: Path) -> None:
    buf = io.StringIO()
    logger = configure_logging("debug", tmp_path / "logs", console=Console(file=buf, width=200))
    assert logger.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in logger.handlers)

    logging.getLogger("papyrus.expander").warning("depth reached")
    for handler in logger.handlers:
        handler.flush()

    assert "depth reached" in buf.getvalue()
    text = log_file_path(tmp_path / "logs").read_text(encoding="utf-8")
    assert "[WARNING] papyrus.expander: depth reached" in text


def test_configure_logging_replaces_handlers() -> None:
    configure_logging("info", console=Console(file=io.StringIO()))
    logger = configure_logging("error", console=Console(file=io.StringIO()))
    assert len(logger.handlers) == 1
    assert logger.level == logging.ERROR
