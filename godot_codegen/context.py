#!/usr/bin/env python3
"""
Class registry for type resolution.

The type mapper only needs to know whether a name denotes an engine class.
Anything providing `is_engine_class(name) -> bool` can be injected; `Context`
is the default, built from the class list of the engine's API dump.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Iterable, List, Mapping, Protocol


def api_section(api: Mapping[str, Any], key: str) -> List[Any]:
    """
    A list-valued top-level section of the API dump; missing or null means empty.
    Raises ValueError if the section is present but not a list.
    """
    section = api.get(key)
    if section is None:
        return []
    if not isinstance(section, list):
        raise ValueError(f"API section '{key}' must be a list, got {type(section).__name__}")
    return section


class ClassRegistry(Protocol):
    def is_engine_class(self, name: str) -> bool:
        ...


class Context:
    """
    Read-only set of engine class names. Safe to share between threads.
    """

    def __init__(self, engine_classes: Iterable[str] = ()) -> None:
        self._engine_classes: FrozenSet[str] = frozenset(engine_classes)

    @staticmethod
    def from_api(api: Mapping[str, Any]) -> "Context":
        """
        Collect class names from an API dump ({"classes": [{"name": ...}, ...]}).
        Entries without a name are ignored; a malformed "classes" section raises ValueError.
        """
        names = [c["name"] for c in api_section(api, "classes") if isinstance(c, Mapping) and c.get("name")]
        return Context(names)

    def is_engine_class(self, name: str) -> bool:
        return name in self._engine_classes

    def __contains__(self, name: object) -> bool:
        return name in self._engine_classes

    def __len__(self) -> int:
        return len(self._engine_classes)


__all__ = [
    "api_section",
    "ClassRegistry",
    "Context",
]
