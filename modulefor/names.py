"""
Full names - ``kind:identifier`` keys for registrable factories.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .faults import InvalidFullNameFault


_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


@dataclass(frozen=True, slots=True)
class FullName:
    """A parsed full name."""

    kind: str
    identifier: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.identifier}"


def parse_full_name(value: str) -> FullName:
    """
    Split *value* into its kind and identifier.

    Raises:
        InvalidFullNameFault: If *value* is not a string of exactly two
            non-empty segments separated by ``:``.
    """
    if not isinstance(value, str):
        raise InvalidFullNameFault(value)

    parts = value.split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidFullNameFault(value)

    return FullName(kind=parts[0], identifier=parts[1])


def dasherize(identifier: str) -> str:
    """``otherThing`` / ``other_thing`` -> ``other-thing``, ``XFoo`` -> ``x-foo``."""
    identifier = _ACRONYM_BOUNDARY.sub(r"\1-\2", identifier)
    return _CAMEL_BOUNDARY.sub(r"\1-\2", identifier).replace("_", "-").lower()


def normalize_full_name(value: str) -> str:
    """Validate *value* and dasherize its identifier."""
    name = parse_full_name(value)
    return f"{name.kind}:{dasherize(name.identifier)}"


def full_name_for(kind: str, identifier: str) -> str:
    """Build a normalized full name from its parts."""
    return normalize_full_name(f"{kind}:{identifier}")
