"""
modulefor Testing - pytest glue for test modules.

Components:
    - running:             Async context manager driving one module run
    - modulefor_fixtures:  Registers the pytest fixtures in conftest.py
    - FixtureSurface:      In-memory render surface
"""

from .helpers import running
from .fixtures import modulefor_fixtures
from ..surface import FixtureSurface

__all__ = [
    "running",
    "modulefor_fixtures",
    "FixtureSurface",
]
