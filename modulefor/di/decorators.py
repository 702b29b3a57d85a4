"""
Injection markers declared on factory classes.

Usage:
    class Greeter(ManagedObject):
        other_thing = inject.service()          # -> service:other-thing
        store = inject.service("data-store")    # -> service:data-store
        main = inject("controller", "main")     # -> controller:main
"""

from typing import Any, Dict, Optional

from ..names import full_name_for


class Inject:
    """
    Injection metadata marker (a non-data descriptor).

    The container assigns the dependency on the instance when it builds
    it. Instances created outside a container resolve the dependency on
    first access through their owner, if they have one.
    """

    __slots__ = ("kind", "name", "attr")

    def __init__(self, kind: str, name: Optional[str] = None):
        self.kind = kind
        self.name = name
        self.attr: Optional[str] = None

    def __set_name__(self, owner: type, attr: str) -> None:
        self.attr = attr

    @property
    def full_name(self) -> str:
        identifier = self.name or self.attr
        if identifier is None:
            raise AttributeError("Inject marker is not bound to a class attribute")
        return full_name_for(self.kind, identifier)

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            return self

        from .core import get_owner

        container = get_owner(instance)
        value = container.lookup(self.full_name) if container is not None else None
        instance.__dict__[self.attr] = value
        return value

    def __repr__(self) -> str:
        return f"Inject({self.kind!r}, {self.name or self.attr!r})"


class _InjectFactory:
    """Callable namespace: ``inject(kind, name)``, ``inject.service(name)``."""

    def __call__(self, kind: str, name: Optional[str] = None) -> Inject:
        return Inject(kind, name)

    def service(self, name: Optional[str] = None) -> Inject:
        return Inject("service", name)

    def controller(self, name: Optional[str] = None) -> Inject:
        return Inject("controller", name)


inject = _InjectFactory()


def declared_injections(factory: Any) -> Dict[str, Inject]:
    """Map attribute name -> marker for every ``Inject`` on *factory*'s MRO."""
    if not isinstance(factory, type):
        return {}

    found: Dict[str, Inject] = {}
    for klass in reversed(factory.__mro__):
        for attr, value in vars(klass).items():
            if isinstance(value, Inject):
                found[attr] = value
            elif attr in found:
                # Shadowed by a plain attribute further down the MRO
                del found[attr]
    return found
