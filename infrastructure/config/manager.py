"""Configuration management for the infrastructure layer.

This module provides the hierarchical configuration source the composition
root binds settings from:
1. Built-in defaults (lowest priority)
2. Configuration files, in the order given
3. Environment variables
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from loguru import logger

from .loader import ConfigurationLoader

DEFAULT_ENV_PREFIX = "API_BOILERPLATE__"
SECTION_SEPARATOR = ":"


class ConfigurationManager:
    """Hierarchical key-value configuration with named sections.

    Environment variables starting with ``env_prefix`` override file values;
    ``__`` separates nesting levels and key case is kept, e.g.
    ``API_BOILERPLATE__CacheProfileSettings__CacheProfiles__Car__Duration=60``.
    """

    def __init__(
        self,
        config_paths: Sequence[Union[str, Path]] = (),
        defaults: Optional[Mapping[str, Any]] = None,
        env_prefix: Optional[str] = DEFAULT_ENV_PREFIX,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize configuration manager.

        Args:
            config_paths: YAML/JSON files merged in order; missing files are skipped
            defaults: Values used when no file or variable sets them
            env_prefix: Prefix of overriding environment variables, None disables them
            environ: Environment to read, defaults to ``os.environ``
        """
        self.loader = ConfigurationLoader()
        self.config_paths = [Path(p) for p in config_paths]
        self.defaults = dict(defaults or {})
        self.env_prefix = env_prefix
        self._environ = environ

        self._config_cache: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfigurationManager":
        """Create a manager backed only by an in-memory mapping."""
        return cls(defaults=data, env_prefix=None)

    def load_configuration(self) -> Dict[str, Any]:
        """Load hierarchical configuration.

        Returns:
            Merged configuration dictionary
        """
        if self._config_cache is not None:
            return self._config_cache

        config = copy.deepcopy(self.defaults)

        for path in self.config_paths:
            if not path.exists():
                logger.debug(f"Configuration file {path} not found, skipping")
                continue
            config = self.loader.merge_configs(config, self.loader.load_file(path))
            logger.debug(f"Loaded configuration from {path}")

        config = self._apply_env_overrides(config)
        config = self.loader.expand_variables(config, self._env())

        self._config_cache = config
        return config

    def _env(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides.

        Args:
            config: Base configuration

        Returns:
            Configuration with environment overrides applied
        """
        if not self.env_prefix:
            return config

        config = copy.deepcopy(config)
        for key, value in self._env().items():
            if not key.startswith(self.env_prefix) or len(key) == len(self.env_prefix):
                continue

            config_path = key[len(self.env_prefix):].split("__")

            # Navigate to the config section
            current = config
            for path_part in config_path[:-1]:
                if not isinstance(current.get(path_part), dict):
                    current[path_part] = {}
                current = current[path_part]

            current[config_path[-1]] = self._convert_env_value(value)

        return config

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool]:
        """Convert environment variable string to appropriate type.

        Args:
            value: Environment variable string value

        Returns:
            Converted value
        """
        # Try boolean
        if value.lower() in ("true", "false"):
            return value.lower() == "true"

        # Try integer
        try:
            return int(value)
        except ValueError:
            pass

        # Try float
        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get_section(self, name: str) -> Optional[Any]:
        """Return a named section, or None when it is absent.

        Nested sections are addressed with ``:``, e.g. ``"Logging:Level"``.
        """
        current: Any = self.load_configuration()
        for part in name.split(SECTION_SEPARATOR):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return None
        return copy.deepcopy(current)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key.

        Args:
            key: Configuration key (``:`` separated)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.get_section(key)
        return default if value is None else value

    def reload_configuration(self) -> Dict[str, Any]:
        """Reload configuration from files and environment.

        Returns:
            Reloaded configuration
        """
        self._config_cache = None
        return self.load_configuration()
