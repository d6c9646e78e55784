"""Static cycle detection over the substitute reference graph."""

from __future__ import annotations

from collections.abc import Mapping

from .links import references


def substitute_edges(substitutes: Mapping[str, str]) -> dict[str, list[str]]:
    """Map each substitute name to the substitute names its value links to.

    File and directory links are not edges. Order follows marker order.
    """
    graph: dict[str, list[str]] = {}
    for name, text in substitutes.items():
        targets: list[str] = []
        for ref in references(text or ""):
            if ref in substitutes and ref not in targets:
                targets.append(ref)
        graph[name] = targets
    return graph


def find_cycles(substitutes: Mapping[str, str]) -> list[list[str]]:
    """Return every cycle reached by a depth-first walk of the substitutes.

    Each cycle starts and ends with the same name, e.g. ``["A", "B", "A"]``.
    A name that has been fully explored is never walked again, so each cycle
    is reported once, from the first name that reaches it.
    """
    graph = substitute_edges(substitutes)
    visited: set[str] = set()
    on_stack: set[str] = set()
    cycles: list[list[str]] = []

    def dfs(name: str, path: list[str]) -> None:
        if name in on_stack:
            start = path.index(name)
            cycles.append(path[start:] + [name])
            return
        if name in visited:
            return

        visited.add(name)
        on_stack.add(name)
        path.append(name)
        for target in graph.get(name, ()):
            dfs(target, path)
        path.pop()
        on_stack.discard(name)

    for name in graph:
        if name not in visited:
            dfs(name, [])
    return cycles


def format_cycle(cycle: list[str]) -> str:
    return " -> ".join(cycle)
