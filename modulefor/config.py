"""
Harness settings - layered configuration with validation.

Merge order (later overrides earlier):
1. Dataclass defaults
2. Config files (YAML or JSON)
3. ``.env`` file
4. ``MODULEFOR_*`` environment variables
5. Manual overrides
"""

from __future__ import annotations

import json
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import yaml
from dotenv import dotenv_values


logger = logging.getLogger("modulefor.config")

DEPRECATION_MODES = ("warn", "error", "ignore")


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass(frozen=True)
class HarnessSettings:
    """
    Settings consulted by every test module.

    Attributes:
        deprecations: ``warn`` emits DeprecationWarning, ``error`` raises it,
            ``ignore`` drops it
        diagnostics: Attach a logging listener to every container
        log_level: Level for the ``modulefor`` logger hierarchy
    """
    deprecations: str = "warn"
    diagnostics: bool = False
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.deprecations not in DEPRECATION_MODES:
            raise ConfigError(
                f"Config field 'deprecations' must be one of {DEPRECATION_MODES}, "
                f"got {self.deprecations!r}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"Config field 'log_level' is not a logging level: {self.log_level!r}")


class ConfigLoader:
    """
    Loads and merges settings from multiple sources.
    """

    def __init__(self, env_prefix: str = "MODULEFOR_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "MODULEFOR_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from every source, in precedence order.

        Args:
            paths: Config file paths (.yaml/.yml/.json); missing files are skipped
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)
        """
        loader = cls(env_prefix=env_prefix)

        for path in paths or []:
            loader._load_file(Path(path))

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader.config_data.update(overrides)

        return loader

    def _load_file(self, path: Path):
        if not path.exists():
            logger.debug(f"Config file {path} not found, skipping")
            return

        with open(path) as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            elif path.suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigError(f"Unsupported config file type: {path}")

        if data:
            if not isinstance(data, dict):
                raise ConfigError(f"Config file {path} must contain a mapping")
            section = data.get("modulefor", data)
            self.config_data.update(section)

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        if not Path(path).exists():
            return
        for key, value in dotenv_values(path).items():
            if key.startswith(self.env_prefix) and value is not None:
                self._set_key(key, value)

    def _load_from_env(self):
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_key(key, value)

    def _set_key(self, key: str, value: str):
        """MODULEFOR_LOG_LEVEL -> log_level."""
        self.config_data[key[len(self.env_prefix):].lower()] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False
        return value

    def get(self, key: str, default: Any = None) -> Any:
        return self.config_data.get(key, default)

    def to_settings(self) -> HarnessSettings:
        """Instantiate and validate :class:`HarnessSettings`."""
        known = {f.name: f for f in fields(HarnessSettings)}
        kwargs = {}
        for key, value in self.config_data.items():
            if key not in known:
                logger.debug(f"Ignoring unknown setting '{key}'")
                continue
            expected = type(getattr(HarnessSettings, key))
            if not isinstance(value, expected):
                raise ConfigError(
                    f"Config field '{key}' expected {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
            kwargs[key] = value
        return HarnessSettings(**kwargs)


# ── Active settings ────────────────────────────────────────────────────

_active_settings: Optional[HarnessSettings] = None


def load_settings(**kwargs: Any) -> HarnessSettings:
    """Shortcut for ``ConfigLoader.load(**kwargs).to_settings()``."""
    return ConfigLoader.load(**kwargs).to_settings()


def get_settings() -> HarnessSettings:
    """Return the active settings, loading them from the environment once."""
    global _active_settings
    if _active_settings is None:
        set_settings(load_settings())
    return _active_settings


def set_settings(settings: Optional[HarnessSettings]) -> None:
    """Install *settings* (``None`` reloads from the environment next time)."""
    global _active_settings
    _active_settings = settings
    if settings is not None:
        logging.getLogger("modulefor").setLevel(settings.log_level.upper())


@contextmanager
def override_settings(**overrides: Any) -> Iterator[HarnessSettings]:
    """
    Temporarily replace individual settings.

    Usage::

        with override_settings(deprecations="error"):
            ...
    """
    previous = get_settings()
    current = replace(previous, **overrides)
    set_settings(current)
    try:
        yield current
    finally:
        set_settings(previous)
