"""
modulefor dependency injection - the per-test object graph.

Key pieces:
- Registry: full name -> factory, resolver defaults plus per-test overrides
- Container: visibility rules, singleton cache, ownership index, disposal
- Inject markers for dependencies declared on factory classes
- Diagnostics events for registrations, lookups and disposals
"""

from .core import Container, ResolveCtx, get_owner
from .registry import Registry
from .providers import FactoryProvider, ValueProvider, provider_for
from .resolver import (
    Resolver,
    MappingResolver,
    DefaultResolver,
    get_default_resolver,
    set_resolver_registry,
    create_custom_resolver,
)
from .decorators import Inject, inject, declared_injections
from .lifecycle import Lifecycle, DisposalStrategy
from .diagnostics import (
    DIDiagnostics,
    DIEvent,
    DIEventType,
    ConsoleDiagnosticListener,
    RecordingDiagnosticListener,
)
from .errors import DIError, FactoryNotFoundError, DependencyCycleError, DestroyError

__all__ = [
    # Core
    "Container",
    "ResolveCtx",
    "get_owner",
    "Registry",
    # Providers
    "FactoryProvider",
    "ValueProvider",
    "provider_for",
    # Resolvers
    "Resolver",
    "MappingResolver",
    "DefaultResolver",
    "get_default_resolver",
    "set_resolver_registry",
    "create_custom_resolver",
    # Injection
    "Inject",
    "inject",
    "declared_injections",
    # Lifecycle
    "Lifecycle",
    "DisposalStrategy",
    # Diagnostics
    "DIDiagnostics",
    "DIEvent",
    "DIEventType",
    "ConsoleDiagnosticListener",
    "RecordingDiagnosticListener",
    # Errors
    "DIError",
    "FactoryNotFoundError",
    "DependencyCycleError",
    "DestroyError",
]
