"""Error handling framework for the API boilerplate.

This module provides:
- Rich error types with context and suggestions
- Errors raised by the dependency injection core
- Configuration and CORS validation errors
"""

from .base import BoilerplateError, ErrorContext
from .types import (
    ConfigurationError,
    InsecureCorsConfigurationError,
    OptionsBindingError,
    RegistrationClosedError,
    ResolutionError,
    describe_service,
)

__all__ = [
    # Base classes
    "BoilerplateError",
    "ErrorContext",
    # Specific error types
    "ConfigurationError",
    "ResolutionError",
    "RegistrationClosedError",
    "OptionsBindingError",
    "InsecureCorsConfigurationError",
    # Helpers
    "describe_service",
]
