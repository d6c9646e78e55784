from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomllib

from .expander import MAX_DEPTH
from .state import resolve_state_dir


CONFIG_FILE = "config.toml"
LOG_LEVELS = ("error", "warning", "info", "debug")


@dataclass(frozen=True)
class PapyrusConfig:
    state_dir: Path
    root_path: str = ""
    max_depth: int = MAX_DEPTH
    log_level: str = "info"
    log_dir: Path | None = None


class ConfigError(ValueError):
    pass


def _as_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped:
        return None
    return stripped


def _parse_max_depth(value: object, *, field: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{field} must be a non-negative integer")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ConfigError(f"{field} must be a non-negative integer") from None
    if not isinstance(value, int) or value < 0:
        raise ConfigError(f"{field} must be a non-negative integer")
    return value


def _parse_log_level(value: object, *, field: str) -> str:
    text = _as_str(value)
    level = text.lower() if text else None
    if level == "warn":
        level = "warning"
    if level not in LOG_LEVELS:
        raise ConfigError(f"{field} must be one of: {', '.join(LOG_LEVELS)}")
    return level


def _read_table(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    table = raw.get("papyrus", {})
    if not isinstance(table, dict):
        raise ConfigError(f"{path}: [papyrus] must be a table")
    return table


def load_config(cwd: Path | None = None) -> PapyrusConfig:
    """Build the effective config.

    Priority, lowest first: defaults, ``<state_dir>/config.toml``, then the
    PAPYRUS_ROOT / PAPYRUS_MAX_DEPTH / PAPYRUS_LOG_LEVEL environment variables.
    """
    state_dir = resolve_state_dir(cwd, create=False)
    path = state_dir / CONFIG_FILE
    table = _read_table(path)

    root_path = _as_str(table.get("root_path")) or ""
    max_depth = MAX_DEPTH
    if "max_depth" in table:
        max_depth = _parse_max_depth(table["max_depth"], field="[papyrus].max_depth")
    log_level = "info"
    if "log_level" in table:
        log_level = _parse_log_level(table["log_level"], field="[papyrus].log_level")
    log_dir: Path | None = None
    raw_log_dir = _as_str(table.get("log_dir"))
    if raw_log_dir:
        log_dir = Path(raw_log_dir).expanduser()
        if not log_dir.is_absolute():
            log_dir = state_dir / log_dir

    env_root = _as_str(os.environ.get("PAPYRUS_ROOT"))
    if env_root:
        root_path = env_root
    env_depth = _as_str(os.environ.get("PAPYRUS_MAX_DEPTH"))
    if env_depth:
        max_depth = _parse_max_depth(env_depth, field="PAPYRUS_MAX_DEPTH")
    env_level = _as_str(os.environ.get("PAPYRUS_LOG_LEVEL"))
    if env_level:
        log_level = _parse_log_level(env_level, field="PAPYRUS_LOG_LEVEL")

    return PapyrusConfig(
        state_dir=state_dir,
        root_path=root_path,
        max_depth=max_depth,
        log_level=log_level,
        log_dir=log_dir,
    )


def default_config_text() -> str:
    return (
        "[papyrus]\n"
        "# Sandbox root for file and folder links. Overrides `papyrus root`.\n"
        '# root_path = "/path/to/notes"\n'
        f"max_depth = {MAX_DEPTH}\n"
        'log_level = "info"\n'
        '# log_dir = "logs"\n'
    )
