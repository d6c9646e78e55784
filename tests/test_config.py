from __future__ import annotations

from pathlib import Path

import pytest

from papyrus.config import ConfigError, default_config_text, load_config


def _write_config(tmp_path: Path, body: str) -> None:
    path = tmp_path / ".papyrus" / "config.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body.strip() + "\n", encoding="utf-8")


def test_defaults_without_config_file(tmp_path: Path) -> None:
    cfg = load_config(tmp_path)
    assert cfg.state_dir == tmp_path.resolve() / ".papyrus"
    assert cfg.root_path == ""
    assert cfg.max_depth == 10
    assert cfg.log_level == "info"
    assert cfg.log_dir is None


def test_values_from_config_file(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[papyrus]
root_path = "/srv/notes"
max_depth = 4
log_level = "DEBUG"
log_dir = "logs"
""",
    )
    cfg = load_config(tmp_path)
    assert cfg.root_path == "/srv/notes"
    assert cfg.max_depth == 4
    assert cfg.log_level == "debug"
    assert cfg.log_dir == tmp_path.resolve() / ".papyrus" / "logs"


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_config(tmp_path, '[papyrus]\nroot_path = "/from/file"\nmax_depth = 3\n')
    monkeypatch.setenv("PAPYRUS_ROOT", "/from/env")
    monkeypatch.setenv("PAPYRUS_MAX_DEPTH", "7")
    monkeypatch.setenv("PAPYRUS_LOG_LEVEL", "warn")

    cfg = load_config(tmp_path)
    assert cfg.root_path == "/from/env"
    assert cfg.max_depth == 7
    assert cfg.log_level == "warning"


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("[papyrus]\nmax_depth = -1\n", r"\[papyrus\].max_depth"),
        ('[papyrus]\nmax_depth = "deep"\n', r"\[papyrus\].max_depth"),
        ("[papyrus]\nmax_depth = true\n", r"\[papyrus\].max_depth"),
        ('[papyrus]\nlog_level = "loud"\n', r"\[papyrus\].log_level"),
        ("papyrus = 3\n", r"\[papyrus\] must be a table"),
        ("[papyrus\n", "invalid TOML"),
    ],
)
def test_invalid_config_raises(tmp_path: Path, body: str, message: str) -> None:
    _write_config(tmp_path, body)
    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)


def test_invalid_env_depth_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAPYRUS_MAX_DEPTH", "lots")
    with pytest.raises(ConfigError, match="PAPYRUS_MAX_DEPTH"):
        load_config(tmp_path)


def test_default_config_text_is_loadable(tmp_path: Path) -> None:
    _write_config(tmp_path, default_config_text())
    cfg = load_config(tmp_path)
    assert cfg.max_depth == 10
    assert cfg.root_path == ""
