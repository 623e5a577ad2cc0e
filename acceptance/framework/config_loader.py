"""
================================================================================
Configuration Loader
================================================================================

YAML-based harness configuration with environment variable override support.

Features:
    - YAML configuration loading (config/config.yaml)
    - Environment variable override (UI_BASE_URL overrides ui.base_url)
    - Dot notation path access with defaults
    - Paths resolved relative to the project root

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "config.yaml"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (UI_BASE_URL)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("ui.base_url", "http://localhost:8080")
        'http://localhost:8080'
        >>> config.path("suites.path", "config/suites.yaml")
        PosixPath('/.../config/suites.yaml')
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Singleton: configuration is loaded once per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "ui.base_url")
            default: Default value if key not found
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def path(self, key: str, default: str) -> Path:
        """Get a filesystem path; relative values resolve against the project root."""
        value = Path(self.get(key, default))
        return value if value.is_absolute() else PROJECT_ROOT / value

    def get_section(self, section: str) -> Dict[str, Any]:
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """Convert an environment string to match the reference type."""
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """Reset singleton instance (tests)."""
        cls._instance = None
        cls._config = {}


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "PROJECT_ROOT",
]
