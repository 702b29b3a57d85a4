"""
TestModule - the lifecycle state machine around a single test.

Phases run strictly in order::

    IDLE -> BEFORE_SETUP -> SETUP -> TEST_RUNNING -> TEARDOWN -> AFTER_TEARDOWN -> IDLE

``before_setup`` and ``after_teardown`` receive the module itself.
``setup``, the test body and ``teardown`` receive the test context (or
the external object installed with :meth:`TestModule.set_context`).
``after_teardown`` runs exactly once per setup, whatever failed before it.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from .callbacks import LifecycleCallbacks
from .config import get_settings
from .context import _UNSET, TestContext
from .di.core import Container
from .di.diagnostics import ConsoleDiagnosticListener, DIDiagnostics, DiagnosticListener
from .di.registry import Registry
from .faults import LifecycleFault
from .surface import RenderSurface
from .validation import validate_options


logger = logging.getLogger("modulefor.lifecycle")

# Helpers copied onto an external context for the duration of a test.
CONTEXT_HELPERS = ("subject", "register", "factory", "inject", "container")


class LifecyclePhase(Enum):
    """Lifecycle phases."""
    IDLE = "idle"
    BEFORE_SETUP = "before_setup"
    SETUP = "setup"
    TEST_RUNNING = "test_running"
    TEARDOWN = "teardown"
    AFTER_TEARDOWN = "after_teardown"


@dataclass
class LifecycleEvent:
    """Event emitted on every phase transition and on callback failures."""
    phase: LifecyclePhase
    subject_name: str
    message: Optional[str] = None
    error: Optional[BaseException] = None


@dataclass
class _RunState:
    """Everything one test run owns; dropped before ``after_teardown``."""
    context: TestContext
    target: Any
    surface_state: Any = None
    attached: Dict[str, Any] = field(default_factory=dict)


class TestModule:
    """
    Runs lifecycle callbacks around tests of one subject.

    Usage::

        module = TestModule("component:x-foo", "x-foo", {
            "before_setup": lambda module: set_resolver_registry(REGISTRY),
            "setup": lambda ctx: ctx.subject(name="Max"),
        })

        await module.run(lambda ctx: ...)
    """

    __test__ = False

    allow_legacy_integration = False

    def __init__(
        self,
        subject_name: str,
        description: Optional[str | Mapping[str, Any]] = None,
        callbacks: Optional[Mapping[str, Any]] = None,
        *,
        surface: Optional[RenderSurface] = None,
    ):
        if isinstance(description, Mapping) and callbacks is None:
            callbacks, description = description, None

        self.callbacks: LifecycleCallbacks = validate_options(
            subject_name,
            callbacks or {},
            allow_legacy=self.allow_legacy_integration,
            module_type=type(self).__name__,
        )
        self.subject_name = subject_name
        self.description = description or subject_name
        self.is_integration = self.callbacks.is_integration
        self.is_legacy = self.callbacks.is_legacy
        self.resolver = self.callbacks.resolver
        self.surface = surface

        self.phase = LifecyclePhase.IDLE
        self.cache: Dict[str, Any] = {}
        self.context: Any = None
        self.registry: Optional[Registry] = None
        self.container: Optional[Container] = None

        self._run: Optional[_RunState] = None
        self._external: Any = None
        self._event_handlers: List[Callable[[LifecycleEvent], None]] = []
        self._listeners: List[DiagnosticListener] = []
        self.logger = logger

    # ── configuration ─────────────────────────────────────────────────

    def on_event(self, handler: Callable[[LifecycleEvent], None]) -> None:
        """Register a lifecycle event handler."""
        self._event_handlers.append(handler)

    def add_diagnostic_listener(self, listener: DiagnosticListener) -> None:
        """Attach *listener* to the container of every subsequent run."""
        self._listeners.append(listener)

    def set_context(self, context: Any) -> None:
        """
        Use *context* instead of a fresh test context for the next run.

        ``setup``, the body and ``teardown`` then receive *context*; the
        harness attaches its helpers (``subject``, ``register``, ...) to it.
        Properties set through those helpers, such as
        ``inject.service("blah")``, land on *context* as well. All of them
        are removed again at teardown.
        """
        if self.phase is not LifecyclePhase.IDLE:
            raise LifecycleFault("set the context of", self.phase.value, self.subject_name)
        self._external = context

    def get_context(self) -> Optional[TestContext]:
        """The context of the run in progress, if any."""
        return self._run.context if self._run is not None else None

    # ── phases ────────────────────────────────────────────────────────

    async def setup(self) -> None:
        """
        Run ``before_setup``, build the per-test container and context,
        then run ``setup``.

        If this raises, :meth:`teardown` must still be awaited; it runs
        the remaining cleanup and ``after_teardown``.
        """
        if self.phase is not LifecyclePhase.IDLE:
            raise LifecycleFault("set up", self.phase.value, self.subject_name)

        self.cache = {}
        self._transition(LifecyclePhase.BEFORE_SETUP)
        await self._invoke("before_setup", self)

        self._build_run()
        self._transition(LifecyclePhase.SETUP)
        await self._invoke("setup", self._run.target)

        self._transition(LifecyclePhase.TEST_RUNNING)

    async def run_body(self, body: Callable[[Any], Any]) -> Any:
        """Run a test body against the active context."""
        if self.phase is not LifecyclePhase.TEST_RUNNING:
            raise LifecycleFault("run a test body in", self.phase.value, self.subject_name)
        try:
            return await _call(body, self._run.target)
        except Exception as e:
            self.logger.debug(f"Test body failed for '{self.description}': {e!r}")
            self._emit(LifecycleEvent(self.phase, self.subject_name, "test body failed", e))
            raise

    async def teardown(self) -> None:
        """
        Run ``teardown``, destroy the container, drop the context and run
        ``after_teardown``.

        Every step runs even if an earlier one fails; the first failure is
        raised once ``after_teardown`` has completed.
        """
        if self.phase is LifecyclePhase.IDLE:
            raise LifecycleFault("tear down", self.phase.value, self.subject_name)

        run = self._run
        errors: List[BaseException] = []

        try:
            self._transition(LifecyclePhase.TEARDOWN)
            if run is not None:
                await self._collect(errors, self._invoke("teardown", run.target))

            if self.container is not None:
                await self._collect(errors, self.container.destroy())

            self._release(run)
            if run is not None and self.surface is not None:
                try:
                    self.surface.restore(run.surface_state)
                except Exception as e:
                    self.logger.error(f"Surface restore failed for '{self.description}': {e!r}")
                    errors.append(e)

            self._transition(LifecyclePhase.AFTER_TEARDOWN)
            await self._collect(errors, self._invoke("after_teardown", self))
        finally:
            if run is not None:
                run.context.clear()
            self._release(None)
            self._transition(LifecyclePhase.IDLE)

        if errors:
            for extra in errors[1:]:
                self.logger.error(f"Additional teardown failure for '{self.description}': {extra!r}")
            raise errors[0]

    async def run(self, body: Callable[[Any], Any]) -> Any:
        """
        Full lifecycle around *body*.

        A failure in ``setup`` or the body is raised after teardown has
        completed; teardown failures are then only logged.
        """
        if self.phase is not LifecyclePhase.IDLE:
            raise LifecycleFault("run a test in", self.phase.value, self.subject_name)
        try:
            await self.setup()
            result = await self.run_body(body)
        except BaseException:
            try:
                await self.teardown()
            except Exception as teardown_error:
                self.logger.error(
                    f"Teardown also failed for '{self.description}': {teardown_error!r}"
                )
            raise
        await self.teardown()
        return result

    def test(self, body: Callable[[Any], Any]) -> Callable[[], Awaitable[Any]]:
        """
        Wrap *body* into a coroutine function running the full lifecycle.

        The wrapper keeps the body's name so pytest collects it::

            @pytest.mark.asyncio
            @x_foo.test
            async def test_subject(ctx):
                assert ctx.subject().name == "Max"
        """
        module = self

        async def run_test():
            return await module.run(body)

        run_test.__name__ = getattr(body, "__name__", "run_test")
        run_test.__qualname__ = getattr(body, "__qualname__", run_test.__name__)
        run_test.__doc__ = body.__doc__
        run_test.__module__ = getattr(body, "__module__", __name__)
        run_test.test_module = module
        return run_test

    def get_status(self) -> Dict[str, Any]:
        return {
            "subject_name": self.subject_name,
            "phase": self.phase.value,
            "integration": self.is_integration,
            "has_context": self._run is not None,
        }

    # ── internals ─────────────────────────────────────────────────────

    def _build_run(self) -> None:
        diagnostics = DIDiagnostics()
        if get_settings().diagnostics:
            diagnostics.add_listener(ConsoleDiagnosticListener())
        for listener in self._listeners:
            diagnostics.add_listener(listener)

        self.registry = Registry(self.resolver, diagnostics=diagnostics)
        self.container = Container(
            self.registry,
            subject_name=self.subject_name,
            needs=self.callbacks.needs or (),
            integration=self.is_integration,
            diagnostics=diagnostics,
        )
        context = TestContext(self, self.container)

        target = context
        attached: Dict[str, Any] = {}
        if self._external is not None:
            target = self._external
            for name in CONTEXT_HELPERS:
                attached[name] = getattr(target, name, _UNSET)
                setattr(target, name, getattr(context, name))
            context.mirror_onto(target, attached)

        surface_state = self.surface.capture() if self.surface is not None else None
        self._run = _RunState(context, target, surface_state, attached)
        self.context = target

    def _release(self, run: Optional[_RunState]) -> None:
        """Forget the run: context handles, container, external helpers."""
        if run is not None and run.attached:
            for name, previous in run.attached.items():
                if previous is _UNSET:
                    # The attribute may already be gone if the body removed it
                    run.target.__dict__.pop(name, None)
                else:
                    setattr(run.target, name, previous)
            run.attached.clear()
        self._run = None
        self.context = None
        self.container = None
        self.registry = None
        self._external = None

    async def _invoke(self, name: str, target: Any) -> None:
        hook = self.callbacks.hook(name)
        if hook is None:
            return
        self.logger.debug(f"  ↳ {name} for '{self.description}'")
        try:
            await _call(hook, target)
        except Exception as e:
            self.logger.error(f"     ✗ {name} failed for '{self.description}': {e!r}")
            self._emit(LifecycleEvent(self.phase, self.subject_name, f"{name} failed", e))
            raise

    async def _collect(self, errors: List[BaseException], step: Awaitable[Any]) -> None:
        try:
            await step
        except Exception as e:
            errors.append(e)

    def _transition(self, phase: LifecyclePhase) -> None:
        self.phase = phase
        self.logger.debug(f"'{self.description}' -> {phase.value}")
        self._emit(LifecycleEvent(phase, self.subject_name))

    def _emit(self, event: LifecycleEvent) -> None:
        for handler in self._event_handlers:
            try:
                handler(event)
            except Exception as e:
                self.logger.error(f"Event handler error: {e}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.subject_name} phase={self.phase.value}>"


async def _call(fn: Callable[[Any], Any], target: Any) -> Any:
    result = fn(target)
    if inspect.isawaitable(result):
        result = await result
    return result


def module_for(
    subject_name: str,
    description: Optional[str | Mapping[str, Any]] = None,
    *,
    surface: Optional[RenderSurface] = None,
    **options: Any,
) -> TestModule:
    """
    Define a test module for *subject_name*.

    Options are validated here, so an invalid combination fails at
    definition time with a ConfigurationError.
    """
    if isinstance(description, Mapping):
        options = {**description, **options}
        description = None
    return TestModule(subject_name, description, options, surface=surface)
