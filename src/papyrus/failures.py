"""Typed resolution results.

Resolution never raises for an unresolvable link. The resolver and sandbox
return a :class:`LinkFailure` value instead, and the expander renders it
inline next to the marker that produced it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


ROOT_NOT_CONFIGURED = "RootNotConfigured"
PATH_ESCAPES_ROOT = "PathEscapesRoot"
NOT_FOUND = "NotFound"
UNSUPPORTED_EXTENSION = "UnsupportedExtension"
NOT_A_DIRECTORY = "NotADirectory"
READ_FAILURE = "ReadFailure"


@dataclass(frozen=True)
class LinkFailure:
    kind: str
    reference: str
    message: str
    cause: BaseException | None = None

    def summary(self) -> str:
        return f"{self.kind}: {self.message}"

    def annotate(self, marker: str) -> str:
        """Inert form of ``marker`` carrying this failure."""
        return f"{marker} [ERROR: {self.summary()}]"


@dataclass(frozen=True)
class Resolved:
    text: str
    kind: str  # "substitute", "file", "directory"
    path: Path | None = None


Resolution = Union[Resolved, LinkFailure]


def root_not_configured(reference: str) -> LinkFailure:
    return LinkFailure(
        ROOT_NOT_CONFIGURED,
        reference,
        "Root path not set. Use `papyrus root <path>` to set the root directory.",
    )
