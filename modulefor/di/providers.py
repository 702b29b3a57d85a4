"""
Provider implementations for the two registration strategies.

A provider wraps whatever a resolver or ``register`` call supplied for a
full name and knows how to turn it into an instance.
"""

from typing import Any, Dict, Mapping, TYPE_CHECKING

from .decorators import Inject, declared_injections

if TYPE_CHECKING:
    from .core import Container


class FactoryProvider:
    """
    Provider that calls a factory with keyword properties.

    Factories exposing a ``create`` classmethod are built through it
    (host framework convention); anything else is called directly.
    Dependencies declared with ``Inject`` markers are looked up through
    the container and assigned on the new instance unless a property of
    the same name was supplied.
    """

    __slots__ = ("full_name", "factory", "singleton", "source", "_injections")

    owned = True

    def __init__(
        self,
        full_name: str,
        factory: Any,
        *,
        singleton: bool = True,
        source: str = "default",
    ):
        if not callable(factory):
            raise TypeError(
                f"Factory for {full_name} must be callable, got {type(factory).__name__}; "
                f"register it with instantiate=False to use it as a value"
            )
        self.full_name = full_name
        self.factory = factory
        self.singleton = singleton
        self.source = source
        self._injections: Dict[str, Inject] = declared_injections(factory)

    @property
    def injections(self) -> Mapping[str, Inject]:
        return dict(self._injections)

    def instantiate(self, container: "Container", props: Mapping[str, Any]) -> Any:
        """Build an instance, resolving declared dependencies first."""
        resolved = {}
        for attr, marker in self._injections.items():
            if attr in props:
                continue
            resolved[attr] = container.lookup(marker.full_name)

        create = getattr(self.factory, "create", None)
        if isinstance(self.factory, type) and callable(create):
            instance = create(**props)
        else:
            instance = self.factory(**props)

        for attr, value in resolved.items():
            setattr(instance, attr, value)

        return instance

    def __repr__(self) -> str:
        return f"FactoryProvider({self.full_name!r}, source={self.source!r})"


class ValueProvider:
    """
    Provider that hands out a pre-built value as-is.

    The value is not owned by the container and is never destroyed by it.
    """

    __slots__ = ("full_name", "factory", "source")

    owned = False
    singleton = True

    def __init__(self, full_name: str, value: Any, *, source: str = "default"):
        self.full_name = full_name
        self.factory = value
        self.source = source

    def instantiate(self, container: "Container", props: Mapping[str, Any]) -> Any:
        return self.factory

    def __repr__(self) -> str:
        return f"ValueProvider({self.full_name!r}, source={self.source!r})"


def provider_for(
    full_name: str,
    factory: Any,
    *,
    instantiate: bool = True,
    singleton: bool = True,
    source: str = "default",
):
    """Wrap *factory* in the provider matching the registration options."""
    if not instantiate:
        return ValueProvider(full_name, factory, source=source)
    return FactoryProvider(full_name, factory, singleton=singleton, source=source)
