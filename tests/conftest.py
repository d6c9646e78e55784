from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from papyrus.expander import Expander


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PAPYRUS_STATE_DIR", "PAPYRUS_ROOT", "PAPYRUS_MAX_DEPTH", "PAPYRUS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def notes(tmp_path: Path) -> Path:
    root = tmp_path / "notes"
    root.mkdir()
    (root / "intro.md").write_text("Intro text", encoding="utf-8")
    (root / "guide.txt").write_text("See {{intro.md}}", encoding="utf-8")
    (root / "image.png").write_bytes(b"\x89PNG")
    return root


@pytest.fixture
def make_expander(notes: Path) -> Callable[..., Expander]:
    def factory(substitutes: dict[str, str] | None = None, root: str | Path | None = None, **kwargs) -> Expander:
        subs = dict(substitutes or {})
        root_path = str(notes if root is None else root)
        return Expander(lambda: subs, lambda: root_path, **kwargs)

    return factory


@pytest.fixture(autouse=True)
def _restore_papyrus_logger():
    logger = logging.getLogger("papyrus")
    level = logger.level
    handlers = list(logger.handlers)
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.setLevel(level)
