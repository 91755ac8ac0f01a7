"""Configuration loading utilities.

This module provides utilities for loading configuration from:
- YAML files
- JSON files
- In-memory dictionaries merged on top of either
"""

import copy
import json
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence, Union

import yaml

from core.errors import ConfigurationError

try:
    from yaml import CSafeLoader as YamlLoader
except ImportError:
    from yaml import SafeLoader as YamlLoader

_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


class ConfigurationLoader:
    """Utility class for loading configuration from various sources."""

    def load_yaml(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML file

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If the file is not a YAML mapping
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.load(f, Loader=YamlLoader) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError.unreadable_file(path, e) from e

        if not isinstance(content, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {path}",
                config_path=path,
            )
        return content

    def load_json(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file.

        Args:
            path: Path to JSON file

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If the file is not a JSON object
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = json.load(f) or {}
        except json.JSONDecodeError as e:
            raise ConfigurationError.unreadable_file(path, e) from e

        if not isinstance(content, dict):
            raise ConfigurationError(
                f"Configuration file must contain an object: {path}",
                config_path=path,
            )
        return content

    def load_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load a YAML or JSON file based on its extension."""
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix in (".yaml", ".yml"):
            return self.load_yaml(path)
        if suffix == ".json":
            return self.load_json(path)
        raise ConfigurationError.unsupported_format(path)

    def merge_configs(self, base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge two configuration dictionaries with deep merging.

        The override dict takes precedence over the base dict.
        Nested dictionaries are merged recursively.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = copy.deepcopy(dict(base))

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, Mapping):
                result[key] = self.merge_configs(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def load_multiple(self, paths: Sequence[Union[str, Path]]) -> Dict[str, Any]:
        """Load and merge multiple configuration files.

        Files are loaded in order, with later files overriding earlier ones.
        Missing files are skipped.

        Args:
            paths: Configuration file paths

        Returns:
            Merged configuration
        """
        result: Dict[str, Any] = {}

        for path in paths:
            path = Path(path)
            if not path.exists():
                continue
            result = self.merge_configs(result, self.load_file(path))

        return result

    def expand_variables(self, config: Dict[str, Any], variables: Mapping[str, str]) -> Dict[str, Any]:
        """Expand ``${VAR_NAME}`` references in configuration strings.

        Unknown variables are left untouched.

        Args:
            config: Configuration with variables
            variables: Variable name -> value mapping

        Returns:
            Configuration with variables expanded
        """

        def _expand_recursive(obj: Any) -> Any:
            if isinstance(obj, dict):
                return {k: _expand_recursive(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [_expand_recursive(item) for item in obj]
            elif isinstance(obj, str):
                return _VAR_PATTERN.sub(lambda match: variables.get(match.group(1), match.group(0)), obj)
            else:
                return obj

        return _expand_recursive(copy.deepcopy(config))
