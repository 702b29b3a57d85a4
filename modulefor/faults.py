"""
Harness faults - typed fault signals raised by the harness itself.

Defines:
- Fault base class (structured fault objects)
- FaultDomain (explicit fault domains)
- Severity levels
- Configuration and lifecycle faults

Failures raised by user callbacks and test bodies are never wrapped in a
Fault; they propagate unchanged so the outer runner reports them as the
test failure.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """
    Fault severity levels.

    Determines logging level for the fault.
    """
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the functional area where a fault occurred.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


FaultDomain.CONFIG = FaultDomain("config", "Module definition errors")
FaultDomain.LIFECYCLE = FaultDomain("lifecycle", "Lifecycle state machine errors")


DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: Severity.FATAL,
    FaultDomain.LIFECYCLE: Severity.ERROR,
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class - structured, typed fault object.

    Attributes:
        code: Stable machine-readable identifier (e.g., "CONFLICTING_OPTIONS")
        message: Human-readable summary
        domain: Fault domain (CONFIG, LIFECYCLE)
        severity: Fault severity, defaulted from the domain
        metadata: Additional context data

    Example:
        ```python
        raise Fault(
            code="NEEDS_WITH_INTEGRATION",
            message="`needs` cannot be combined with `integration: True`",
            domain=FaultDomain.CONFIG,
        )
        ```
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        domain: FaultDomain,
        severity: Optional[Severity] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.domain = domain
        self.severity = severity or DOMAIN_DEFAULTS.get(domain, Severity.ERROR)
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, "
            f"domain={self.domain.value}, severity={self.severity.value})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize fault to dictionary.

        Returns:
            Dictionary representation suitable for logging
        """
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "metadata": self.metadata,
        }


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigurationError(Fault):
    """
    Base class for module definition faults.

    Raised synchronously while a module is being defined; no module is
    registered and no test runs.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=Severity.FATAL,
            metadata=metadata,
        )


class InvalidFullNameFault(ConfigurationError):
    """A full name does not have the shape ``kind:identifier``."""

    def __init__(self, full_name: Any, **kwargs):
        super().__init__(
            code="INVALID_FULL_NAME",
            message=(
                f"Invalid full name {full_name!r}: expected "
                f"'<kind>:<identifier>' with two non-empty segments"
            ),
            metadata={"full_name": full_name, **kwargs.get("metadata", {})},
        )


class ConflictingOptionsFault(ConfigurationError):
    """Two module options were supplied that cannot be combined."""

    def __init__(self, first: str, second: str, subject_name: str, **kwargs):
        super().__init__(
            code="CONFLICTING_OPTIONS",
            message=(
                f"Module for '{subject_name}' cannot combine `{first}` "
                f"with `{second}`"
            ),
            metadata={
                "options": [first, second],
                "subject_name": subject_name,
                **kwargs.get("metadata", {}),
            },
        )


class UnsupportedIntegrationFault(ConfigurationError):
    """The ``integration`` option has a value this module does not accept."""

    def __init__(self, value: Any, subject_name: str, module_type: str, **kwargs):
        super().__init__(
            code="UNSUPPORTED_INTEGRATION",
            message=(
                f"`integration: {value!r}` is not supported by {module_type} "
                f"(module for '{subject_name}')"
            ),
            metadata={
                "value": value,
                "subject_name": subject_name,
                "module_type": module_type,
                **kwargs.get("metadata", {}),
            },
        )


class InvalidOptionFault(ConfigurationError):
    """A module option has the wrong type."""

    def __init__(self, option: str, reason: str, **kwargs):
        super().__init__(
            code="INVALID_OPTION",
            message=f"Module option `{option}` is invalid: {reason}",
            metadata={"option": option, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# LIFECYCLE Faults
# ============================================================================

class LifecycleFault(Fault):
    """An operation was attempted in a phase that does not allow it."""

    def __init__(self, operation: str, phase: str, subject_name: str, **kwargs):
        super().__init__(
            code="ILLEGAL_TRANSITION",
            message=(
                f"Cannot {operation} module for '{subject_name}' "
                f"while in phase '{phase}'"
            ),
            domain=FaultDomain.LIFECYCLE,
            metadata={
                "operation": operation,
                "phase": phase,
                "subject_name": subject_name,
                **kwargs.get("metadata", {}),
            },
        )
