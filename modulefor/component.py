"""
ComponentTestModule - test modules whose subject is a component.

Component modules are the only ones that accept ``integration="legacy"``
and they default the ``component`` kind when a bare name is given.
"""

from typing import Any, Mapping, Optional

from .lifecycle import TestModule
from .surface import RenderSurface


class ComponentTestModule(TestModule):
    """
    Test module for ``component:<name>`` subjects.

    ``integration="legacy"`` keeps the isolated container of a unit test
    (``needs`` is allowed) while flagging the module as legacy.
    """

    __test__ = False

    allow_legacy_integration = True

    def __init__(
        self,
        component_name: str,
        description: Optional[str | Mapping[str, Any]] = None,
        callbacks: Optional[Mapping[str, Any]] = None,
        *,
        surface: Optional[RenderSurface] = None,
    ):
        if ":" not in component_name:
            component_name = f"component:{component_name}"
        super().__init__(component_name, description, callbacks, surface=surface)

    @property
    def component_name(self) -> str:
        return self.subject_name.split(":", 1)[1]

    @property
    def is_unit(self) -> bool:
        return not self.is_integration


def module_for_component(
    component_name: str,
    description: Optional[str | Mapping[str, Any]] = None,
    *,
    surface: Optional[RenderSurface] = None,
    **options: Any,
) -> ComponentTestModule:
    """``module_for`` counterpart for components."""
    if isinstance(description, Mapping):
        options = {**description, **options}
        description = None
    return ComponentTestModule(component_name, description, options, surface=surface)
