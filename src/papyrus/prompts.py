"""Prompt library: markdown files with optional YAML frontmatter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import yaml

from .state import StoreError


RESERVED_NAMES = frozenset(
    {"init", "expand", "links", "validate", "tree", "cycles", "subs", "root", "prompts", "check"}
)
_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


@dataclass(frozen=True)
class Prompt:
    name: str
    description: str
    body: str
    path: Path


def prompts_dir(state_dir: Path) -> Path:
    return state_dir / "prompts"


def _split_frontmatter(text: str) -> tuple[dict, str]:
    """Split optional YAML frontmatter from markdown body."""
    if not text.startswith("---"):
        return {}, text
    parts = text.split("---", 2)
    if len(parts) < 3:
        return {}, text
    try:
        meta = yaml.safe_load(parts[1]) or {}
    except yaml.YAMLError:
        return {}, text
    if not isinstance(meta, dict):
        return {}, text
    return meta, parts[2].lstrip("\n")


def _first_non_empty_line(text: str) -> str:
    for line in text.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped
    return ""


def _description(meta: dict, body: str) -> str:
    raw = meta.get("description")
    desc = raw.strip() if isinstance(raw, str) else ""
    return desc or _first_non_empty_line(body)


def check_prompt_name(name: str) -> str:
    name = name.strip()
    if name in RESERVED_NAMES:
        raise StoreError(f'Prompt name "{name}" is reserved and cannot be used')
    if not _NAME_RE.match(name):
        raise StoreError(f"invalid prompt name: {name!r}")
    return name


def read_prompt(state_dir: Path, name: str) -> Prompt | None:
    path = prompts_dir(state_dir) / f"{name}.md"
    if not path.is_file():
        return None
    meta, body = _split_frontmatter(path.read_text(encoding="utf-8"))
    return Prompt(name=name, description=_description(meta, body), body=body, path=path)


def list_prompts(state_dir: Path) -> list[Prompt]:
    directory = prompts_dir(state_dir)
    if not directory.is_dir():
        return []
    out: list[Prompt] = []
    for path in sorted(directory.glob("*.md")):
        prompt = read_prompt(state_dir, path.stem)
        if prompt is not None:
            out.append(prompt)
    return out


def save_prompt(state_dir: Path, name: str, body: str, *, description: str = "") -> Prompt:
    name = check_prompt_name(name)
    path = prompts_dir(state_dir) / f"{name}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    text = body
    if description:
        front = yaml.safe_dump({"description": description}, sort_keys=False)
        text = f"---\n{front}---\n{body}"
    path.write_text(text, encoding="utf-8")
    return Prompt(name=name, description=description or _first_non_empty_line(body), body=body, path=path)
