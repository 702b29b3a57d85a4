"""
LifecycleCallbacks - the immutable configuration record of a test module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from .di.resolver import Resolver


HOOK_NAMES = ("before_setup", "setup", "teardown", "after_teardown")
OPTION_NAMES = HOOK_NAMES + ("needs", "integration", "resolver")

LEGACY = "legacy"

# Read once into ``TestModule.is_integration``; not exposed through has/get.
CONSUMED_OPTIONS = ("integration",)


@dataclass(frozen=True)
class LifecycleCallbacks:
    """
    Options recognised by a test module.

    Anything else supplied at definition time lands in ``extras``: helper
    functions and constants that test contexts can still reach through
    the deprecated fallback lookup.
    """

    before_setup: Optional[Callable[..., Any]] = None
    setup: Optional[Callable[..., Any]] = None
    teardown: Optional[Callable[..., Any]] = None
    after_teardown: Optional[Callable[..., Any]] = None
    needs: Optional[Tuple[str, ...]] = None
    integration: Union[bool, str] = False
    resolver: Optional[Resolver] = None
    extras: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "LifecycleCallbacks":
        """Split *options* into recognised fields and extras."""
        known = {k: v for k, v in options.items() if k in OPTION_NAMES}
        extras = {k: v for k, v in options.items() if k not in OPTION_NAMES}
        if known.get("needs") is not None:
            known["needs"] = tuple(known["needs"])
        return cls(**known, extras=MappingProxyType(extras))

    @property
    def is_integration(self) -> bool:
        return self.integration is True

    @property
    def is_legacy(self) -> bool:
        return self.integration == LEGACY

    def hook(self, name: str) -> Optional[Callable[..., Any]]:
        return getattr(self, name)

    def has(self, name: str) -> bool:
        if name in self.extras:
            return True
        if name not in OPTION_NAMES or name in CONSUMED_OPTIONS:
            return False
        return getattr(self, name) is not None

    def get(self, name: str, default: Any = None) -> Any:
        if name in self.extras:
            return self.extras[name]
        if name in OPTION_NAMES and name not in CONSUMED_OPTIONS:
            value = getattr(self, name)
            return default if value is None else value
        return default
