"""
Registry - full name to factory mapping for a single test.

Default entries come from a resolver and are shared between tests.
Overrides registered during a test shadow them and disappear together
with the registry, which is rebuilt for every test.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from .diagnostics import DIDiagnostics, DIEventType
from .providers import provider_for
from .resolver import Resolver, get_default_resolver
from ..names import normalize_full_name


class Registry:
    """
    Per-test registry with override support.

    Usage::

        registry = Registry(resolver)
        registry.register("service:blah", Blah)
        provider = registry.resolve("service:blah")
    """

    __slots__ = ("_resolver", "_overrides", "_resolved", "_diagnostics")

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        *,
        diagnostics: Optional[DIDiagnostics] = None,
    ):
        self._resolver = resolver if resolver is not None else get_default_resolver()
        self._overrides: Dict[str, Any] = {}
        self._resolved: Dict[str, Any] = {}  # providers built from resolver defaults
        self._diagnostics = diagnostics or DIDiagnostics()

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    @property
    def overrides(self) -> Mapping[str, Any]:
        """Read-only view of the providers registered during this test."""
        return MappingProxyType(self._overrides)

    def register(
        self,
        full_name: str,
        factory: Any,
        *,
        instantiate: bool = True,
        singleton: bool = True,
    ) -> str:
        """
        Insert or replace an override for *full_name*.

        Args:
            full_name: ``kind:identifier`` key
            factory: Callable building the instance, or the value itself
                when ``instantiate=False``
            instantiate: If False, lookups return *factory* unchanged
            singleton: If False, every lookup builds a new instance

        Returns:
            The normalized full name
        """
        name = normalize_full_name(full_name)
        self._overrides[name] = provider_for(
            name,
            factory,
            instantiate=instantiate,
            singleton=singleton,
            source="override",
        )
        self._diagnostics.emit(DIEventType.REGISTRATION, full_name=name)
        return name

    def unregister(self, full_name: str) -> bool:
        """Drop the override for *full_name*; defaults are untouched."""
        return self._overrides.pop(normalize_full_name(full_name), None) is not None

    def is_overridden(self, full_name: str) -> bool:
        return normalize_full_name(full_name) in self._overrides

    def resolve(self, full_name: str):
        """
        Find the provider for *full_name*.

        Overrides win over resolver defaults. Returns ``None`` when
        neither knows the name.
        """
        name = normalize_full_name(full_name)

        provider = self._overrides.get(name)
        if provider is not None:
            return provider

        provider = self._resolved.get(name)
        if provider is not None:
            return provider

        factory = self._resolver.resolve(name)
        if factory is None:
            return None

        provider = provider_for(name, factory, instantiate=callable(factory))
        self._resolved[name] = provider
        return provider

    def has(self, full_name: str) -> bool:
        return self.resolve(full_name) is not None

    def known_names(self) -> List[str]:
        """Every name this registry can resolve, for error messages."""
        names = set(self._overrides)
        known = getattr(self._resolver, "known_names", None)
        if callable(known):
            names.update(known())
        return sorted(names)
