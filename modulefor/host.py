"""
Default host object for factories.

Any callable accepting keyword properties works as a factory; this base
class adds the destroy protocol the container drives at teardown.
"""

from typing import Any


class ManagedObject:
    """
    Keyword-constructed object with a destroy hook.

    Usage::

        Thing = ManagedObject.extend(from_default_registry=True)
        thing = Thing(name="Max")
        thing.destroy()
        assert thing.is_destroyed
    """

    is_destroying = False
    is_destroyed = False

    def __init__(self, **props: Any):
        for key, value in props.items():
            setattr(self, key, value)

    @classmethod
    def create(cls, **props: Any) -> "ManagedObject":
        return cls(**props)

    @classmethod
    def extend(cls, **attrs: Any) -> type:
        """Return a subclass carrying *attrs* as class attributes."""
        return type(cls.__name__, (cls,), attrs)

    def will_destroy(self) -> None:
        """Hook for subclasses; runs once, before the object is marked destroyed."""

    def destroy(self) -> None:
        if self.is_destroyed or self.is_destroying:
            return
        self.is_destroying = True
        try:
            self.will_destroy()
        finally:
            self.is_destroying = False
            self.is_destroyed = True

    def __repr__(self) -> str:
        state = " (destroyed)" if self.is_destroyed else ""
        return f"<{type(self).__name__}{state}>"
