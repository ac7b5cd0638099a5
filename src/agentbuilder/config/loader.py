"""Configuration loading from YAML with environment variable expansion."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from agentbuilder.config.models import AppConfig

DEFAULT_CONFIG_PATH = Path("agentbuilder.yaml")


class ConfigError(Exception):
    """Raised when a configuration file fails parsing or validation."""


class ConfigLoader:
    """Load and validate a configuration file into an :class:`AppConfig`."""

    def __init__(self, path: Path = DEFAULT_CONFIG_PATH) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AppConfig:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.  An empty file
        yields the default configuration.

        Raises:
            ConfigError: On read errors, YAML parse errors or schema failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            return AppConfig()
        if not isinstance(data, dict):
            raise ConfigError("Configuration YAML must be a mapping")

        try:
            return AppConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

    def load_or_default(self) -> AppConfig:
        """Like :meth:`load`, but a missing file gives the default config."""
        if not self._path.exists():
            return AppConfig()
        return self.load()
