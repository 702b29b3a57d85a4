"""
Core DI types for the per-test container.

A Container is built at the start of a test and destroyed at its end.
It caches singletons for the duration of the test, owns everything it
instantiates and can answer "which container owns this object".
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple
import inspect
import logging
import weakref

from .diagnostics import DIDiagnostics, DIEventType
from .errors import DIError, DependencyCycleError, DestroyError, FactoryNotFoundError
from .lifecycle import Lifecycle
from .registry import Registry
from ..names import normalize_full_name


logger = logging.getLogger("modulefor.di.core")

# Containers that have not been destroyed yet; ownership queries scan these.
_live_containers: "weakref.WeakSet[Container]" = weakref.WeakSet()


def get_owner(obj: Any) -> Optional["Container"]:
    """
    Return the live container owning *obj*, or ``None``.

    Ownership is an index kept by each container, not a pointer stored on
    the object.
    """
    for container in list(_live_containers):
        if container.owns(obj):
            return container
    return None


class ResolveCtx:
    """
    Tracks the instantiation stack for cycle detection.

    Uses __slots__ for minimal allocation overhead.
    """
    __slots__ = ("container", "stack")

    def __init__(self, container: "Container"):
        self.container = container
        self.stack: List[str] = []

    def push(self, full_name: str) -> None:
        self.stack.append(full_name)

    def pop(self) -> None:
        self.stack.pop()

    def in_cycle(self, full_name: str) -> bool:
        return full_name in self.stack

    def get_trace(self) -> List[str]:
        return self.stack.copy()


class Container:
    """
    Per-test container over a :class:`Registry`.

    Visibility rules: in integration mode every name the registry resolves
    is visible. Otherwise only the subject's name, the names listed in
    ``needs`` and names overridden during this test are; anything else is a
    lookup miss and yields ``None``.
    """

    __slots__ = (
        "_registry",
        "_cache",
        "_owned",
        "_visible",
        "_integration",
        "_lifecycle",
        "_ctx",
        "_diagnostics",
        "_destroyed",
        "__weakref__",
    )

    def __init__(
        self,
        registry: Registry,
        *,
        subject_name: Optional[str] = None,
        needs: Iterable[str] = (),
        integration: bool = False,
        diagnostics: Optional[DIDiagnostics] = None,
    ):
        self._registry = registry
        self._cache: Dict[str, Any] = {}  # {full_name: instance}
        self._owned: Dict[int, Tuple[str, Any]] = {}  # {id(instance): (full_name, instance)}
        visible = set(normalize_full_name(name) for name in needs)
        if subject_name is not None:
            visible.add(normalize_full_name(subject_name))
        self._visible = frozenset(visible)
        self._integration = bool(integration)
        self._lifecycle = Lifecycle()
        self._ctx = ResolveCtx(self)
        self._diagnostics = diagnostics or DIDiagnostics()
        self._destroyed = False
        _live_containers.add(self)

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def is_integration(self) -> bool:
        return self._integration

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def is_visible(self, full_name: str) -> bool:
        name = normalize_full_name(full_name)
        return (
            self._integration
            or name in self._visible
            or self._registry.is_overridden(name)
        )

    def register(self, full_name: str, factory: Any, **options: Any) -> str:
        """
        Register an override and drop any instance cached under its name.

        Raises:
            DIError: If the container has been destroyed
        """
        self._ensure_alive("register", full_name)
        name = self._registry.register(full_name, factory, **options)
        self._cache.pop(name, None)
        return name

    def factory_for(self, full_name: str) -> Optional[Any]:
        """Return the visible factory for *full_name*, or ``None``."""
        if self._destroyed:
            return None
        provider = self._visible_provider(normalize_full_name(full_name))
        return provider.factory if provider is not None else None

    def lookup(self, full_name: str) -> Optional[Any]:
        """
        Return the instance for *full_name*, building it on first use.

        A name that is not visible or not resolvable is a miss, not an
        error: the result is ``None``. A destroyed container misses
        every lookup.
        """
        if self._destroyed:
            return None
        name = normalize_full_name(full_name)

        if name in self._cache:
            self._diagnostics.emit(DIEventType.LOOKUP_HIT, full_name=name)
            return self._cache[name]

        provider = self._visible_provider(name)
        if provider is None:
            return None

        instance = self._instantiate(name, provider, {})
        if provider.singleton:
            self._cache[name] = instance
        return instance

    def create(self, full_name: str, **props: Any) -> Any:
        """
        Build a fresh, uncached, owned instance with *props* applied.

        Raises:
            FactoryNotFoundError: If *full_name* is not visible or unknown
            DIError: If the container has been destroyed
        """
        self._ensure_alive("create", full_name)
        name = normalize_full_name(full_name)
        provider = self._visible_provider(name)
        if provider is None:
            candidates = [n for n in self._registry.known_names() if self.is_visible(n)]
            raise FactoryNotFoundError(
                name,
                candidates=candidates,
                requested_by=self._ctx.stack[-1] if self._ctx.stack else None,
            )
        return self._instantiate(name, provider, props)

    def adopt(self, obj: Any, full_name: str = "-adopted") -> Any:
        """
        Record *obj* as owned without scheduling its destruction.

        Used for objects the harness builds itself, such as the test
        context, so that ownership queries succeed on them.
        """
        self._owned[id(obj)] = (full_name, obj)
        return obj

    def owns(self, obj: Any) -> bool:
        entry = self._owned.get(id(obj))
        return entry is not None and entry[1] is obj

    def owner_of(self, obj: Any) -> Optional["Container"]:
        return self if self.owns(obj) else None

    def cached(self) -> Dict[str, Any]:
        """Snapshot of the singleton cache."""
        return dict(self._cache)

    async def destroy(self) -> None:
        """
        Destroy every owned instance in LIFO order, then forget them.

        Idempotent. Hook failures do not stop the remaining disposals;
        they are raised together as :class:`DestroyError` afterwards.
        """
        if self._destroyed:
            return
        self._destroyed = True
        _live_containers.discard(self)

        errors = await self._lifecycle.run_finalizers()

        self._cache.clear()
        self._owned.clear()

        if errors:
            raise DestroyError(errors)

    # ── internals ──────────────────────────────────────────────────────

    def _ensure_alive(self, operation: str, full_name: str) -> None:
        if self._destroyed:
            raise DIError(f"Cannot {operation} {full_name}: container has been destroyed")

    def _visible_provider(self, name: str):
        if not self.is_visible(name):
            self._diagnostics.emit(
                DIEventType.LOOKUP_MISS, full_name=name, metadata={"reason": "not visible"}
            )
            return None

        provider = self._registry.resolve(name)
        if provider is None:
            self._diagnostics.emit(
                DIEventType.LOOKUP_MISS, full_name=name, metadata={"reason": "unresolved"}
            )
        return provider

    def _instantiate(self, name: str, provider: Any, props: Dict[str, Any]) -> Any:
        if self._ctx.in_cycle(name):
            raise DependencyCycleError(self._ctx.get_trace() + [name])

        self._ctx.push(name)
        try:
            with self._diagnostics.measure(DIEventType.INSTANTIATION, full_name=name):
                instance = provider.instantiate(self, props)
        finally:
            self._ctx.pop()

        if provider.owned:
            self._own(name, instance)
        return instance

    def _own(self, name: str, instance: Any) -> None:
        self._owned[id(instance)] = (name, instance)

        hook = getattr(instance, "destroy", None)
        if not callable(hook):
            hook = getattr(instance, "shutdown", None)
        if callable(hook):
            self._lifecycle.register_finalizer(self._finalizer_for(name, hook), name=name)

    def _finalizer_for(self, name: str, hook):
        diagnostics = self._diagnostics

        async def finalize() -> None:
            try:
                result = hook()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                diagnostics.emit(DIEventType.DESTROY, full_name=name, error=e)
                raise
            diagnostics.emit(DIEventType.DESTROY, full_name=name)

        return finalize

    def __repr__(self) -> str:
        state = "destroyed" if self._destroyed else f"{len(self._owned)} owned"
        mode = "integration" if self._integration else "isolated"
        return f"<Container {mode} {state}>"
