"""Recursive link expansion.

``Expander.expand`` resolves every ``{{...}}`` marker in a text, expands the
resolved content the same way, and splices the results back in. Recursion
stops at ``max_depth``; beyond it text is returned as-is, which is what keeps
cyclic substitutes from looping forever. A link that cannot be resolved is
left in place with an ``[ERROR: ...]`` annotation and the rest of the text is
still expanded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .failures import NOT_FOUND, LinkFailure, Resolution
from .fs import FileSystem
from .links import LINK_RE, Link, scan
from .resolver import LinkResolver


MAX_DEPTH = 10
PREVIEW_CHARS = 100

SubstitutesProvider = Callable[[], Mapping[str, str]]
RootPathProvider = Callable[[], str]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkValidation:
    reference: str
    valid: bool
    kind: str | None = None  # resolved kind, or failure kind when invalid
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "link": self.reference,
            "valid": self.valid,
            "kind": self.kind,
            "error": self.error,
        }


@dataclass
class DependencyLink:
    name: str
    type: str  # "substitute", "file", "directory", "missing", "error", "circular"
    path: Path | None = None
    error: str | None = None
    children: DependencyNode | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "type": self.type}
        if self.path is not None:
            out["path"] = str(self.path)
        if self.error is not None:
            out["error"] = self.error
        out["children"] = self.children.to_dict() if self.children else None
        return out


@dataclass
class DependencyNode:
    content: str
    links: list[DependencyLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content, "links": [link.to_dict() for link in self.links]}


def _preview(text: str) -> str:
    if len(text) > PREVIEW_CHARS:
        return text[:PREVIEW_CHARS] + "..."
    return text


class Expander:
    def __init__(
        self,
        get_substitutes: SubstitutesProvider,
        get_root_path: RootPathProvider,
        *,
        fs: FileSystem | None = None,
        resolver: LinkResolver | None = None,
        max_depth: int = MAX_DEPTH,
        logger: logging.Logger | None = None,
    ) -> None:
        self.get_substitutes = get_substitutes
        self.get_root_path = get_root_path
        self.log = logger or _log
        self.resolver = resolver or LinkResolver(fs, logger=self.log)
        self.max_depth = max_depth

    def _snapshot(self) -> tuple[dict[str, str], str]:
        return dict(self.get_substitutes()), self.get_root_path() or ""

    # -- expansion -----------------------------------------------------------

    def expand(self, text: str, depth: int = 0) -> str:
        substitutes, root = self._snapshot()
        return self._expand(text, depth, substitutes, root)

    def _expand(
        self,
        text: str,
        depth: int,
        substitutes: Mapping[str, str],
        root: str,
    ) -> str:
        if depth > self.max_depth:
            self.log.warning(
                "Maximum recursion depth (%d) reached while processing links",
                self.max_depth,
            )
            return text

        links = scan(text)
        if not links:
            return text
        self.log.debug("Processing %d links at depth %d", len(links), depth)

        # Resolve everything before touching the text.
        replacements: dict[str, str] = {}
        for link in links:
            if link.marker in replacements:
                continue
            resolution = self.resolver.resolve(link.reference, substitutes, root)
            if isinstance(resolution, LinkFailure):
                self.log.error(
                    "Failed to resolve link: %s (%s)", link.reference, resolution.summary()
                )
                replacements[link.marker] = resolution.annotate(link.marker)
                continue
            expanded = self._expand(resolution.text, depth + 1, substitutes, root)
            self.log.debug("Resolved link: %s -> %.100s", link.reference, expanded)
            replacements[link.marker] = expanded

        def repl(match) -> str:
            return replacements.get(match.group(0), match.group(0))

        return LINK_RE.sub(repl, text)

    # -- read-only helpers ---------------------------------------------------

    def extract_links(self, text: str) -> list[Link]:
        return scan(text)

    def validate_links(self, text: str) -> list[LinkValidation]:
        """Resolve each top-level link once, without expanding nested links."""
        substitutes, root = self._snapshot()
        results: list[LinkValidation] = []
        for link in scan(text):
            resolution = self.resolver.resolve(link.reference, substitutes, root)
            if isinstance(resolution, LinkFailure):
                results.append(
                    LinkValidation(
                        link.reference, False, resolution.kind, resolution.summary()
                    )
                )
            else:
                results.append(LinkValidation(link.reference, True, resolution.kind))
        return results

    def dependency_tree(self, text: str) -> DependencyNode:
        substitutes, root = self._snapshot()
        return self._tree(text, substitutes, root, frozenset())

    def _tree(
        self,
        text: str,
        substitutes: Mapping[str, str],
        root: str,
        ancestors: frozenset[str],
    ) -> DependencyNode:
        node = DependencyNode(_preview(text))
        for link in scan(text):
            name = link.reference
            if name in ancestors:
                node.links.append(DependencyLink(name, "circular"))
                continue

            resolution: Resolution = self.resolver.resolve(name, substitutes, root)
            if isinstance(resolution, LinkFailure):
                kind = "missing" if resolution.kind == NOT_FOUND else "error"
                node.links.append(
                    DependencyLink(name, kind, error=resolution.summary())
                )
                continue

            children = self._tree(resolution.text, substitutes, root, ancestors | {name})
            node.links.append(
                DependencyLink(name, resolution.kind, path=resolution.path, children=children)
            )
        return node
