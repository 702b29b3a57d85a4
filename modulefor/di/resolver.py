"""
Resolvers - where default factories come from.

A resolver is any object with ``resolve(full_name)`` returning a factory
or ``None``. Registries fall back to the module-level default resolver
when a module does not configure its own.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Protocol, runtime_checkable

from ..names import normalize_full_name


@runtime_checkable
class Resolver(Protocol):
    """Maps a normalized full name to a factory."""

    def resolve(self, full_name: str) -> Optional[Any]:
        ...


class MappingResolver:
    """
    Resolver backed by a ``{full_name: factory}`` mapping.

    Keys are normalized once, when the mapping is installed.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[str, Any]] = None):
        self._entries: Mapping[str, Any] = MappingProxyType({})
        if entries:
            self.seed(entries)

    def seed(self, entries: Mapping[str, Any]) -> None:
        """Replace every entry with *entries*."""
        normalized = {normalize_full_name(name): factory for name, factory in entries.items()}
        self._entries = MappingProxyType(normalized)

    def resolve(self, full_name: str) -> Optional[Any]:
        return self._entries.get(full_name)

    def known_names(self) -> Iterable[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({sorted(self._entries)!r})"


class DefaultResolver(MappingResolver):
    """The shared resolver used when a module has no ``resolver`` option."""

    def reset(self) -> None:
        self._entries = MappingProxyType({})


_default_resolver = DefaultResolver()


def get_default_resolver() -> DefaultResolver:
    return _default_resolver


def set_resolver_registry(entries: Mapping[str, Any]) -> None:
    """
    Seed the default resolver.

    Typically called from a module's ``before_setup``. The seeded entries
    are read-only for tests; per-test changes go through ``register``.
    """
    _default_resolver.seed(entries)


def create_custom_resolver(entries: Mapping[str, Any]) -> MappingResolver:
    """Build a standalone resolver for a module's ``resolver`` option."""
    return MappingResolver(entries)
