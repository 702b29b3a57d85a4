"""
Definition-time validation of test module options.

Every check runs once, when the module is constructed. A failure raises
a :class:`~modulefor.faults.ConfigurationError` before anything is
registered, so no test of the module ever runs.
"""

from typing import Any, Mapping

from .callbacks import HOOK_NAMES, LEGACY, LifecycleCallbacks
from .faults import (
    ConflictingOptionsFault,
    InvalidOptionFault,
    UnsupportedIntegrationFault,
)
from .names import parse_full_name


def validate_options(
    subject_name: str,
    options: Mapping[str, Any],
    *,
    allow_legacy: bool = False,
    module_type: str = "TestModule",
) -> LifecycleCallbacks:
    """
    Validate raw module options and freeze them into callbacks.

    Args:
        subject_name: Full name of the subject under test
        options: Options supplied to ``module_for``
        allow_legacy: Whether ``integration="legacy"`` is acceptable
        module_type: Module class name, for error messages

    Raises:
        ConfigurationError: On any invalid option or combination
    """
    parse_full_name(subject_name)

    for hook in HOOK_NAMES:
        value = options.get(hook)
        if value is not None and not callable(value):
            raise InvalidOptionFault(hook, f"expected a callable, got {type(value).__name__}")

    needs = options.get("needs")
    if needs is not None:
        if isinstance(needs, (str, bytes)) or not hasattr(needs, "__iter__"):
            raise InvalidOptionFault("needs", "expected a sequence of full names")
        for name in needs:
            parse_full_name(name)

    integration = options.get("integration", False)
    if not (integration is True or integration is False or integration == LEGACY):
        raise UnsupportedIntegrationFault(integration, subject_name, module_type)

    if integration == LEGACY and not allow_legacy:
        raise UnsupportedIntegrationFault(integration, subject_name, module_type)

    if needs is not None and integration is True:
        raise ConflictingOptionsFault("needs", "integration: True", subject_name)

    resolver = options.get("resolver")
    if resolver is not None and not callable(getattr(resolver, "resolve", None)):
        raise InvalidOptionFault("resolver", "expected an object with a resolve(full_name) method")

    return LifecycleCallbacks.from_options(options)
