"""
TestContext - the object test bodies and setup/teardown callbacks receive.
"""

from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from .config import get_settings
from .di.core import Container, get_owner
from .names import full_name_for

if TYPE_CHECKING:
    from .lifecycle import TestModule


logger = logging.getLogger("modulefor.context")

# Module attributes a context can still read through the deprecated path.
MODULE_PROPERTIES = frozenset(
    ("subject_name", "description", "is_integration", "is_legacy", "cache")
)

_UNSET = object()


def deprecate(message: str, *, stacklevel: int = 3) -> None:
    """Emit a deprecation according to the ``deprecations`` setting."""
    mode = get_settings().deprecations
    logger.debug(f"Deprecation ({mode}): {message}")
    if mode == "ignore":
        return
    if mode == "error":
        raise DeprecationWarning(message)
    warnings.warn(message, DeprecationWarning, stacklevel=stacklevel)


class ContextInjector:
    """
    ``ctx.inject.service("blah")`` looks up ``service:blah`` and stores
    the result on the context as ``blah``.
    """

    __slots__ = ("_context",)

    def __init__(self, context: "TestContext"):
        self._context = context

    def __call__(self, kind: str, name: str, as_: Optional[str] = None) -> Any:
        value = self._context.container.lookup(full_name_for(kind, name))
        self._context.set(as_ or name, value)
        return value

    def service(self, name: str, as_: Optional[str] = None) -> Any:
        return self("service", name, as_)

    def controller(self, name: str, as_: Optional[str] = None) -> Any:
        return self("controller", name, as_)


class TestContext:
    """
    Per-test context bound to one module run.

    Properties set by the test are read back directly. Reading a name the
    test never set falls back to the module's callbacks record and then to
    public module attributes; both fallbacks are deprecated and emit a
    ``DeprecationWarning``.
    """

    __test__ = False

    def __init__(self, module: "TestModule", container: Container):
        self._module = module
        self._container: Optional[Container] = container
        self._props: Dict[str, Any] = {}
        self._subject: Any = _UNSET
        self._mirror: Any = None
        self._replaced: Optional[Dict[str, Any]] = None
        self.inject = ContextInjector(self)
        container.adopt(self, "-test-context")

    # ── read-only views ───────────────────────────────────────────────

    @property
    def full_name(self) -> str:
        return self._module.subject_name

    @property
    def module(self) -> "TestModule":
        return self._module

    @property
    def callbacks(self):
        return self._module.callbacks

    @property
    def container(self) -> Container:
        if self._container is None:
            raise AttributeError(f"{self} has been torn down")
        return self._container

    # ── subject ───────────────────────────────────────────────────────

    @property
    def has_subject(self) -> bool:
        return self._subject is not _UNSET

    def subject(self, **props: Any) -> Any:
        """
        Return the subject, creating it on the first call.

        Only the first call's *props* are applied; later calls return the
        same instance and ignore theirs.
        """
        if self._subject is _UNSET:
            self._subject = self.container.create(self.full_name, **props)
            self._module.cache["subject"] = self._subject
        return self._subject

    # ── registry access ───────────────────────────────────────────────

    def register(self, full_name: str, factory: Any, **options: Any) -> str:
        """Register an override visible for the rest of this test only."""
        return self.container.register(full_name, factory, **options)

    def factory(self, full_name: str) -> Optional[Any]:
        return self.container.factory_for(full_name)

    def get_owner(self) -> Optional[Container]:
        return get_owner(self)

    # ── properties ────────────────────────────────────────────────────

    def mirror_onto(self, target: Any, replaced: Dict[str, Any]) -> None:
        """
        Also assign properties set on this context onto *target*.

        The value each name had on *target* before is recorded in
        *replaced* (``_UNSET`` when absent) so it can be put back.
        """
        self._mirror = target
        self._replaced = replaced

    def set(self, name: str, value: Any) -> Any:
        self._props[name] = value
        if self._mirror is not None:
            if name not in self._replaced:
                self._replaced[name] = getattr(self._mirror, name, _UNSET)
            setattr(self._mirror, name, value)
        return value

    def has(self, name: str) -> bool:
        return name in self._props

    def get(self, name: str, default: Any = None) -> Any:
        """
        Two-tier property lookup.

        1. Properties set on this context (no signal).
        2. The callbacks record, then public module attributes (deprecated).
        """
        if name in self._props:
            return self._props[name]

        if self.callbacks.has(name):
            deprecate(f'Accessing the callbacks property "{name}" from the test context is deprecated.')
            return self.callbacks.get(name)

        if name in MODULE_PROPERTIES:
            deprecate(f'Accessing the test module property "{name}" from a callback is deprecated.')
            return getattr(self._module, name)

        return default

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke a helper function declared in the module options, with this
        context as its first argument.

        Helpers are bound to the context the same way setup and teardown
        are, so calling one is not a deprecated access.
        """
        helper: Optional[Callable[..., Any]] = self.callbacks.extras.get(name)
        if helper is None:
            helper = self._props.get(name)
        if not callable(helper):
            raise AttributeError(f"{self} has no callable helper {name!r}")
        return helper(self, *args, **kwargs)

    # ── teardown ──────────────────────────────────────────────────────

    def clear(self) -> None:
        """Drop everything this context references."""
        self._props.clear()
        self._subject = _UNSET
        self._container = None
        self._mirror = None
        self._replaced = None

    def __str__(self) -> str:
        return f"test context for: {self.full_name}"

    def __repr__(self) -> str:
        return f"<TestContext {self.full_name}>"
