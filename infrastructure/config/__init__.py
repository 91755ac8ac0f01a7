"""Configuration management for the infrastructure layer.

This module provides:
- Hierarchical configuration loading (defaults, files, environment)
- Named sections consumed by options binding
- Host settings read from environment variables
"""

from .loader import ConfigurationLoader
from .manager import ConfigurationManager
from .settings import ApplicationSettings

__all__ = [
    "ConfigurationManager",
    "ConfigurationLoader",
    "ApplicationSettings",
]
