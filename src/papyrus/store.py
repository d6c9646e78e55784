"""JSON-backed store for substitutes and the sandbox root path."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .cycles import find_cycles, format_cycle
from .state import StoreError, read_json, write_json


BACKUPS_DIR_NAME = "backups"

_log = logging.getLogger(__name__)


@dataclass
class DataStore:
    """Substitutes and root path kept as JSON files in the state directory.

    Every read goes back to disk, so a caller always gets the last complete
    write. Writes replace the file atomically.
    """

    root: Path

    @property
    def substitutes_path(self) -> Path:
        return self.root / "substitutes.json"

    @property
    def root_path_path(self) -> Path:
        return self.root / "root_path.json"

    # -- substitutes ---------------------------------------------------------

    def get_substitutes(self) -> dict[str, str]:
        data = read_json(self.substitutes_path, {})
        if not isinstance(data, dict):
            raise StoreError(f"{self.substitutes_path} must contain a JSON object")
        for name, value in data.items():
            if not isinstance(value, str):
                raise StoreError(
                    f"substitute {name!r} in {self.substitutes_path} must be a string, "
                    f"got {type(value).__name__}"
                )
        return dict(data)

    def save_substitutes(self, substitutes: dict[str, str]) -> None:
        for name in substitutes:
            _check_name(name)
        write_json(self.substitutes_path, dict(substitutes))
        _log.info("Saved %d substitutes", len(substitutes))

    def set_substitute(self, name: str, text: str) -> None:
        _check_name(name)
        subs = self.get_substitutes()
        subs[name] = text
        self.save_substitutes(subs)

    def remove_substitute(self, name: str) -> bool:
        subs = self.get_substitutes()
        if name not in subs:
            return False
        del subs[name]
        self.save_substitutes(subs)
        return True

    # -- root path -----------------------------------------------------------

    def get_root_path(self) -> str:
        value = read_json(self.root_path_path, "")
        return value if isinstance(value, str) else ""

    def save_root_path(self, root_path: str | Path) -> Path:
        path = Path(root_path).expanduser().resolve()
        if not path.exists():
            raise StoreError(f"Root path does not exist: {root_path}")
        if not path.is_dir():
            raise StoreError(f"Root path is not a directory: {root_path}")
        write_json(self.root_path_path, str(path))
        _log.info("Root path set to: %s", path)
        return path

    # -- backups -------------------------------------------------------------

    @property
    def backups_dir(self) -> Path:
        return self.root / BACKUPS_DIR_NAME

    def backup(self, *, now: datetime | None = None) -> Path:
        """Copy the state directory into a timestamped folder under backups/."""
        stamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        target = self.backups_dir / stamp
        shutil.copytree(
            self.root, target, ignore=shutil.ignore_patterns(BACKUPS_DIR_NAME, "*.tmp")
        )
        _log.info("Backup created: %s", target)
        return target

    # -- validation ----------------------------------------------------------

    def validate(self) -> list[str]:
        issues: list[str] = []
        for cycle in find_cycles(self.get_substitutes()):
            issues.append(
                f"Circular reference detected in substitutes: {format_cycle(cycle)}"
            )

        root_path = self.get_root_path()
        if root_path and not Path(root_path).exists():
            issues.append(f"Root path does not exist: {root_path}")

        _log.info("Data validation completed. Issues found: %d", len(issues))
        for issue in issues:
            _log.warning("Validation issue: %s", issue)
        return issues


def _check_name(name: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise StoreError("substitute names must be non-empty strings")
