from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Read-only file access used by the resolver.

    Paths handed to these methods have already passed the sandbox check.
    """

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def list_entries(self, path: Path) -> list[str]: ...

    def read_text(self, path: Path) -> str: ...


class LocalFileSystem:
    # os.path.exists/isdir report False for unreachable paths instead of
    # raising (ENAMETOOLONG, EACCES on a parent).
    def exists(self, path: Path) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: Path) -> bool:
        return os.path.isdir(path)

    def list_entries(self, path: Path) -> list[str]:
        return [child.name for child in path.iterdir() if child.is_file()]

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")
