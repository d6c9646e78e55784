from __future__ import annotations

import os
from pathlib import Path

from papyrus import sandbox
from papyrus.failures import PATH_ESCAPES_ROOT, ROOT_NOT_CONFIGURED, LinkFailure


def test_relative_path_is_joined_onto_root(tmp_path: Path) -> None:
    result = sandbox.resolve(tmp_path, "docs/a.md")
    assert result == (tmp_path / "docs" / "a.md").resolve()


def test_missing_root_is_reported(tmp_path: Path) -> None:
    for root in ("", "   ", None):
        result = sandbox.resolve(root, "a.md")
        assert isinstance(result, LinkFailure)
        assert result.kind == ROOT_NOT_CONFIGURED


def test_parent_traversal_escapes_root() -> None:
    result = sandbox.resolve("/data/root", "../../etc/passwd")
    assert isinstance(result, LinkFailure)
    assert result.kind == PATH_ESCAPES_ROOT
    assert result.reference == "../../etc/passwd"


def test_absolute_path_outside_root_is_rejected(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    result = sandbox.resolve(root, str(tmp_path / "other.md"))
    assert isinstance(result, LinkFailure)
    assert result.kind == PATH_ESCAPES_ROOT


def test_absolute_path_inside_root_is_allowed(tmp_path: Path) -> None:
    target = tmp_path / "a.md"
    assert sandbox.resolve(tmp_path, str(target)) == target.resolve()


def test_sibling_with_shared_prefix_is_rejected(tmp_path: Path) -> None:
    root = tmp_path / "root"
    evil = tmp_path / "root-evil"
    root.mkdir()
    evil.mkdir()
    result = sandbox.resolve(root, "../root-evil/x.md")
    assert isinstance(result, LinkFailure)
    assert result.kind == PATH_ESCAPES_ROOT


def test_dot_segments_that_stay_inside_are_allowed(tmp_path: Path) -> None:
    result = sandbox.resolve(tmp_path, "a/../b/./c.md")
    assert result == (tmp_path / "b" / "c.md").resolve()


def test_root_itself_is_within_root(tmp_path: Path) -> None:
    assert sandbox.resolve(tmp_path, "") == tmp_path.resolve()


def test_symlink_out_of_root_is_rejected(tmp_path: Path) -> None:
    root = tmp_path / "root"
    outside = tmp_path / "outside"
    root.mkdir()
    outside.mkdir()
    (outside / "secret.md").write_text("secret", encoding="utf-8")
    os.symlink(outside / "secret.md", root / "link.md")
    os.symlink(outside, root / "linked-dir")

    for reference in ("link.md", "linked-dir", "linked-dir/secret.md"):
        result = sandbox.resolve(root, reference)
        assert isinstance(result, LinkFailure)
        assert result.kind == PATH_ESCAPES_ROOT


def test_symlink_within_root_is_followed(tmp_path: Path) -> None:
    (tmp_path / "real.md").write_text("x", encoding="utf-8")
    os.symlink(tmp_path / "real.md", tmp_path / "alias.md")
    assert sandbox.resolve(tmp_path, "alias.md") == (tmp_path / "real.md").resolve()


def test_nul_byte_is_an_invalid_path(tmp_path: Path) -> None:
    result = sandbox.resolve(tmp_path, "a\x00b.md")
    assert isinstance(result, LinkFailure)
    assert result.kind == PATH_ESCAPES_ROOT
    assert result.message.startswith("Invalid path:")
    assert isinstance(result.cause, ValueError)
