"""
Shared test fixtures for the modulefor test suite.
"""

import pytest

from modulefor.config import HarnessSettings, set_settings
from modulefor.di.resolver import get_default_resolver

# Register modulefor testing fixtures
from modulefor.testing.fixtures import modulefor_fixtures
modulefor_fixtures()

from modulefor.testing.fixtures import (  # noqa: F401
    harness_settings,
    default_resolver,
    fixture_surface,
    diagnostics_recorder,
    settings_override,
)


@pytest.fixture(autouse=True)
def _isolate_harness():
    """Fresh settings and an empty default resolver around every test."""
    set_settings(HarnessSettings())
    get_default_resolver().reset()
    yield
    get_default_resolver().reset()
    set_settings(None)
