from __future__ import annotations

from typing import TYPE_CHECKING

__all__ = [
    "__version__",
    "DataStore",
    "Expander",
    "LinkFailure",
    "LinkResolver",
    "find_cycles",
    "scan",
]

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .cycles import find_cycles
    from .expander import Expander
    from .failures import LinkFailure
    from .links import scan
    from .resolver import LinkResolver
    from .store import DataStore


def __getattr__(name: str):
    if name == "Expander":
        from .expander import Expander

        return Expander
    if name == "LinkResolver":
        from .resolver import LinkResolver

        return LinkResolver
    if name == "LinkFailure":
        from .failures import LinkFailure

        return LinkFailure
    if name == "DataStore":
        from .store import DataStore

        return DataStore
    if name == "find_cycles":
        from .cycles import find_cycles

        return find_cycles
    if name == "scan":
        from .links import scan

        return scan
    raise AttributeError(f"module 'papyrus' has no attribute {name!r}")
