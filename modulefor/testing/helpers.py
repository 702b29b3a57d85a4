"""
modulefor Testing - lifecycle helpers for hand-driven modules.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from ..faults import LifecycleFault
from ..lifecycle import LifecyclePhase, TestModule


@asynccontextmanager
async def running(module: TestModule, context: Optional[Any] = None) -> AsyncIterator[Any]:
    """
    Set *module* up, yield its active context, tear it down on exit.

    Usage::

        async with running(module) as ctx:
            assert ctx.subject().name == "Max"

    Teardown (and with it ``after_teardown``) runs even when setup or the
    block fails.
    """
    if module.phase is not LifecyclePhase.IDLE:
        raise LifecycleFault("run a test in", module.phase.value, module.subject_name)
    if context is not None:
        module.set_context(context)
    try:
        await module.setup()
        yield module.context
    finally:
        await module.teardown()
