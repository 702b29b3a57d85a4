"""
DI-specific error types with rich diagnostics.
"""

from typing import List, Optional


class DIError(Exception):
    """Base exception for DI errors."""
    pass


class FactoryNotFoundError(DIError):
    """No factory could be resolved for a name that must exist."""

    def __init__(
        self,
        full_name: str,
        candidates: Optional[List[str]] = None,
        requested_by: Optional[str] = None,
    ):
        self.full_name = full_name
        self.candidates = candidates or []
        self.requested_by = requested_by

        msg = f"No factory found for full_name={full_name}"

        if requested_by:
            msg += f"\nRequested by: {requested_by}"

        if self.candidates:
            msg += "\n\nCandidates found:"
            for candidate in self.candidates:
                msg += f"\n  - {candidate}"

        msg += "\n\nSuggested fixes:"
        msg += f"\n  - Register a factory for {full_name} in before_setup or setup"
        msg += f"\n  - Add {full_name} to the module's `needs`"
        msg += "\n  - Use `integration: True` to see every registered factory"

        super().__init__(msg)


class DependencyCycleError(DIError):
    """Circular dependency detected while instantiating."""

    def __init__(self, cycle: List[str]):
        self.cycle = cycle

        msg = "Detected dependency cycle:"
        for i, name in enumerate(cycle):
            arrow = " -> " if i < len(cycle) - 1 else ""
            msg += f"\n  {name}{arrow}"

        msg += "\n\nSuggested fixes:"
        msg += "\n  - Look the dependency up lazily via get_owner(self).lookup(...)"
        msg += "\n  - Restructure dependencies to remove cycle"

        super().__init__(msg)


class DestroyError(DIError):
    """One or more owned instances failed to destroy."""

    def __init__(self, failures: List[tuple[str, BaseException]]):
        self.failures = failures

        msg = f"{len(failures)} instance(s) failed to destroy:"
        for name, error in failures:
            msg += f"\n  - {name}: {error!r}"

        super().__init__(msg)
