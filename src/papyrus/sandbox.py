"""Confine link paths to the configured root directory."""

from __future__ import annotations

import os
from pathlib import Path

from .failures import PATH_ESCAPES_ROOT, LinkFailure, root_not_configured


def _canonical(path: Path) -> Path:
    return Path(os.path.realpath(path))


def is_within(root: Path, candidate: Path) -> bool:
    """True when ``candidate`` is ``root`` or lies beneath it.

    Both paths must already be canonical. ``Path.relative_to`` compares whole
    components, so ``/root-evil`` is never treated as inside ``/root``.
    """
    try:
        candidate.relative_to(root)
    except ValueError:
        return False
    return True


def resolve(root_dir: str | Path | None, user_path: str) -> Path | LinkFailure:
    if root_dir is None or not str(root_dir).strip():
        return root_not_configured(user_path)

    try:
        root = _canonical(Path(str(root_dir).strip()).expanduser())
        raw = Path(user_path)
        candidate = _canonical(raw if raw.is_absolute() else root / raw)
    except (OSError, ValueError) as exc:
        # realpath rejects embedded NUL bytes with ValueError
        return LinkFailure(
            PATH_ESCAPES_ROOT,
            user_path,
            f"Invalid path: {user_path!r} - {exc}",
            cause=exc,
        )

    if not is_within(root, candidate):
        return LinkFailure(
            PATH_ESCAPES_ROOT,
            user_path,
            f"Path outside root directory: {user_path}",
        )
    return candidate
