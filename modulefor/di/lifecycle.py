"""
Deterministic disposal of container-owned instances.
"""

from typing import Any, Callable, List, Tuple
from dataclasses import dataclass
from enum import Enum
import inspect
import logging


logger = logging.getLogger("modulefor.di.lifecycle")


class DisposalStrategy(str, Enum):
    """Strategy for disposing instances."""

    LIFO = "lifo"  # Last in, first out (default)
    FIFO = "fifo"  # First in, first out


@dataclass
class Finalizer:
    """A named cleanup callback; may return an awaitable."""

    name: str
    callback: Callable[[], Any]


class Lifecycle:
    """
    Collects finalizers and runs them in a deterministic order.

    A failing finalizer never prevents the remaining ones from running;
    failures are returned to the caller.
    """

    __slots__ = ("_finalizers", "_disposal_strategy")

    def __init__(self, disposal_strategy: DisposalStrategy = DisposalStrategy.LIFO):
        self._finalizers: List[Finalizer] = []
        self._disposal_strategy = disposal_strategy

    def __len__(self) -> int:
        return len(self._finalizers)

    def register_finalizer(self, callback: Callable[[], Any], *, name: str = "finalizer") -> None:
        """
        Register finalizer for cleanup.

        Args:
            callback: Sync or async callable
            name: Name used in failure reports
        """
        self._finalizers.append(Finalizer(name=name, callback=callback))

    async def run_finalizers(self) -> List[Tuple[str, BaseException]]:
        """
        Run and forget all finalizers according to the disposal strategy.

        Returns:
            ``(name, error)`` pairs for every finalizer that raised
        """
        if self._disposal_strategy == DisposalStrategy.LIFO:
            ordered = list(reversed(self._finalizers))
        else:
            ordered = list(self._finalizers)
        self._finalizers.clear()

        errors = []
        for finalizer in ordered:
            try:
                result = finalizer.callback()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(f"Finalizer '{finalizer.name}' failed: {e!r}")
                errors.append((finalizer.name, e))
        return errors

    def clear(self) -> None:
        """Drop all finalizers without running them."""
        self._finalizers.clear()
