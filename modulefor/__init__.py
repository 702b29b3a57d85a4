"""
modulefor - per-test dependency injection and lifecycle harness.

Each test gets a fresh registry and container, a lazily created subject
and a context object; lifecycle callbacks run in a fixed order and
``after_teardown`` always runs, whatever failed before it.

Usage:
    from modulefor import module_for, set_resolver_registry, ManagedObject

    x_foo = module_for(
        "component:x-foo",
        before_setup=lambda module: set_resolver_registry({
            "component:x-foo": ManagedObject.extend(),
        }),
        setup=lambda ctx: ctx.subject(name="Max"),
    )

    @pytest.mark.asyncio
    @x_foo.test
    async def test_subject(ctx):
        assert ctx.subject().name == "Max"
"""

__version__ = "0.1.0"

from .lifecycle import (
    TestModule,
    LifecyclePhase,
    LifecycleEvent,
    module_for,
)
from .component import ComponentTestModule, module_for_component
from .context import TestContext, ContextInjector
from .callbacks import LifecycleCallbacks, LEGACY
from .validation import validate_options
from .host import ManagedObject
from .names import FullName, parse_full_name, normalize_full_name, dasherize
from .surface import RenderSurface, FixtureSurface
from .config import (
    HarnessSettings,
    ConfigLoader,
    ConfigError,
    get_settings,
    set_settings,
    load_settings,
    override_settings,
)
from .faults import (
    Fault,
    FaultDomain,
    Severity,
    ConfigurationError,
    InvalidFullNameFault,
    ConflictingOptionsFault,
    UnsupportedIntegrationFault,
    InvalidOptionFault,
    LifecycleFault,
)
from .di import (
    Container,
    Registry,
    get_owner,
    inject,
    Inject,
    set_resolver_registry,
    create_custom_resolver,
    get_default_resolver,
    FactoryNotFoundError,
    DependencyCycleError,
    DestroyError,
)

__all__ = [
    # Lifecycle
    "TestModule",
    "LifecyclePhase",
    "LifecycleEvent",
    "module_for",
    "ComponentTestModule",
    "module_for_component",
    # Context
    "TestContext",
    "ContextInjector",
    "LifecycleCallbacks",
    "LEGACY",
    "validate_options",
    # Host objects
    "ManagedObject",
    # Names
    "FullName",
    "parse_full_name",
    "normalize_full_name",
    "dasherize",
    # Collaborators
    "RenderSurface",
    "FixtureSurface",
    # Settings
    "HarnessSettings",
    "ConfigLoader",
    "ConfigError",
    "get_settings",
    "set_settings",
    "load_settings",
    "override_settings",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ConfigurationError",
    "InvalidFullNameFault",
    "ConflictingOptionsFault",
    "UnsupportedIntegrationFault",
    "InvalidOptionFault",
    "LifecycleFault",
    # DI
    "Container",
    "Registry",
    "get_owner",
    "inject",
    "Inject",
    "set_resolver_registry",
    "create_custom_resolver",
    "get_default_resolver",
    "FactoryNotFoundError",
    "DependencyCycleError",
    "DestroyError",
]
