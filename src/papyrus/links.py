"""Marker scanning: find ``{{...}}`` links in text."""

from __future__ import annotations

from dataclasses import dataclass
import re


LINK_RE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
WILDCARD_SUFFIX = "/*"


@dataclass(frozen=True)
class Link:
    marker: str  # literal "{{ ... }}" text as it appears in the source
    reference: str  # trimmed inner text
    offset: int

    @property
    def is_wildcard(self) -> bool:
        return self.reference.endswith(WILDCARD_SUFFIX)


def scan(text: str) -> list[Link]:
    """Return every marker in ``text``, left to right.

    Matching is shortest-span: a marker runs from ``{{`` to the first ``}}``
    after it. Markers with a blank reference are skipped.
    """
    links: list[Link] = []
    for match in LINK_RE.finditer(text):
        reference = match.group(1).strip()
        if not reference:
            continue
        links.append(Link(marker=match.group(0), reference=reference, offset=match.start()))
    return links


def references(text: str) -> list[str]:
    return [link.reference for link in scan(text)]
