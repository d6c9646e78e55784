"""State directory and low-level JSON storage helpers."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


STATE_DIR_NAME = ".papyrus"


class StoreError(ValueError):
    pass


def resolve_state_dir(cwd: Path | None = None, *, create: bool = True) -> Path:
    """Return the papyrus state directory, creating it if needed.

    Resolution order:
    1. PAPYRUS_STATE_DIR
    2. nearest existing .papyrus directory from cwd upward
    3. cwd/.papyrus
    """
    raw = os.environ.get("PAPYRUS_STATE_DIR", "").strip()
    if raw:
        state_dir = Path(raw).expanduser().resolve()
    else:
        start = (cwd or Path.cwd()).resolve()
        state_dir = start / STATE_DIR_NAME
        for base in (start, *start.parents):
            candidate = base / STATE_DIR_NAME
            if candidate.exists() and candidate.is_dir():
                state_dir = candidate
                break

    if create:
        state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


def read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise StoreError(f"{path} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise StoreError(f"malformed JSON in {path}: {exc}") from exc


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    os.replace(tmp, path)
