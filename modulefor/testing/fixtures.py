"""
modulefor Testing - Pytest Fixtures.

Import ``modulefor_fixtures`` in your ``conftest.py`` to register all
fixtures at once, or import individual fixtures.

Usage in conftest.py::

    from modulefor.testing.fixtures import modulefor_fixtures
    modulefor_fixtures()
"""

from __future__ import annotations

import pytest

from ..config import HarnessSettings, override_settings, set_settings
from ..di.diagnostics import RecordingDiagnosticListener
from ..di.resolver import get_default_resolver
from ..surface import FixtureSurface


def modulefor_fixtures():
    """
    Register modulefor pytest fixtures.

    This is a no-op; the fixtures are registered by importing this
    module. The function exists as a documentation anchor and to make
    sure the import's side-effects run.
    """
    pass


# -----------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------

@pytest.fixture
def harness_settings():
    """Install default :class:`HarnessSettings` for the test."""
    settings = HarnessSettings()
    set_settings(settings)
    yield settings
    set_settings(None)


@pytest.fixture
def default_resolver():
    """The shared default resolver, emptied after the test."""
    resolver = get_default_resolver()
    yield resolver
    resolver.reset()


@pytest.fixture
def fixture_surface():
    """An empty :class:`FixtureSurface`."""
    return FixtureSurface()


@pytest.fixture
def diagnostics_recorder():
    """A :class:`RecordingDiagnosticListener` to attach to modules."""
    return RecordingDiagnosticListener()


@pytest.fixture
def settings_override():
    """
    Fixture factory for overriding settings.

    Usage::

        def test_strict(settings_override):
            with settings_override(deprecations="error"):
                ...
    """
    return override_settings
