"""
Render surface collaborator.

Whatever shared rendering area tests write into (a DOM fixture element,
a terminal buffer, ...) is captured when a test is set up and restored
when it is torn down. The harness only drives the protocol.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RenderSurface(Protocol):
    def capture(self) -> Any:
        """Return an opaque snapshot of the surface."""
        ...

    def restore(self, state: Any) -> None:
        """Put the surface back to *state*."""
        ...


class FixtureSurface:
    """In-memory surface holding a single markup string."""

    def __init__(self, content: str = ""):
        self.content = content

    def capture(self) -> str:
        return self.content

    def restore(self, state: str) -> None:
        self.content = state

    def __repr__(self) -> str:
        return f"FixtureSurface({self.content!r})"
