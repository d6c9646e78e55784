"""Resolve a single link reference to its raw, unexpanded content."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path, PurePath

from . import sandbox
from .failures import (
    NOT_A_DIRECTORY,
    NOT_FOUND,
    READ_FAILURE,
    UNSUPPORTED_EXTENSION,
    LinkFailure,
    Resolution,
    Resolved,
)
from .fs import FileSystem, LocalFileSystem
from .links import WILDCARD_SUFFIX


SUPPORTED_EXTENSIONS = (".md", ".txt")

_log = logging.getLogger(__name__)


def is_supported(name: str | PurePath) -> bool:
    return PurePath(name).suffix.lower() in SUPPORTED_EXTENSIONS


def file_heading(name: str) -> str:
    return f"\n--- {name} ---\n"


def _access_failure(reference: str, exc: OSError) -> LinkFailure:
    return LinkFailure(
        READ_FAILURE, reference, f"Cannot access path: {reference} - {exc}", cause=exc
    )


class LinkResolver:
    """Turn one reference into text, or a :class:`LinkFailure`.

    Substitute keys win over paths. Nested markers in the returned text are
    left alone; re-expansion is the expander's job.
    """

    def __init__(
        self,
        fs: FileSystem | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.fs = fs or LocalFileSystem()
        self.log = logger or _log

    def resolve(
        self,
        reference: str,
        substitutes: Mapping[str, str],
        root_dir: str | Path | None,
    ) -> Resolution:
        if reference in substitutes:
            self.log.debug("Found substitute: %s", reference)
            return Resolved(substitutes[reference], "substitute")
        if reference.endswith(WILDCARD_SUFFIX):
            return self.resolve_directory(reference, root_dir)
        return self.resolve_file(reference, root_dir)

    def resolve_file(self, reference: str, root_dir: str | Path | None) -> Resolution:
        path = sandbox.resolve(root_dir, reference)
        if isinstance(path, LinkFailure):
            return path

        try:
            found = self.fs.exists(path)
        except OSError as exc:
            return _access_failure(reference, exc)
        if not found:
            return LinkFailure(NOT_FOUND, reference, f"File not found: {reference}")

        if not is_supported(path):
            ext = path.suffix.lower() or "(none)"
            return LinkFailure(
                UNSUPPORTED_EXTENSION,
                reference,
                f"Unsupported file type: {ext}. Only .md and .txt files are supported.",
            )

        try:
            content = self.fs.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            return LinkFailure(
                READ_FAILURE,
                reference,
                f"Failed to read file: {reference} - {exc}",
                cause=exc,
            )
        self.log.debug("Read file: %s (%d characters)", path, len(content))
        return Resolved(content, "file", path)

    def resolve_directory(self, reference: str, root_dir: str | Path | None) -> Resolution:
        folder = reference[: -len(WILDCARD_SUFFIX)]
        path = sandbox.resolve(root_dir, folder)
        if isinstance(path, LinkFailure):
            return path

        try:
            found = self.fs.exists(path)
            is_dir = found and self.fs.is_dir(path)
        except OSError as exc:
            return _access_failure(reference, exc)
        if not found:
            return LinkFailure(NOT_FOUND, reference, f"Folder not found: {folder}")
        if not is_dir:
            return LinkFailure(
                NOT_A_DIRECTORY, reference, f"Path is not a directory: {folder}"
            )

        try:
            entries = self.fs.list_entries(path)
        except OSError as exc:
            return LinkFailure(
                READ_FAILURE,
                reference,
                f"Failed to read folder: {folder} - {exc}",
                cause=exc,
            )

        names = sorted(name for name in entries if is_supported(name))
        if not names:
            self.log.warning("No supported files (.md, .txt) found in folder: %s", folder)
            return Resolved(f"[No supported files found in {folder}]", "directory", path)

        self.log.debug("Found %d files in folder: %s", len(names), folder)
        parts: list[str] = []
        for name in names:
            try:
                content = self.fs.read_text(path / name)
            except (OSError, UnicodeDecodeError) as exc:
                self.log.error("Failed to read file %s from folder %s: %s", name, folder, exc)
                parts.append(f"{file_heading(name)}[ERROR: Failed to read file - {exc}]\n")
                continue
            parts.append(file_heading(name))
            parts.append(content)
        return Resolved("".join(parts), "directory", path)
