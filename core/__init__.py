"""Core modules for the API boilerplate: dependency injection and errors."""

from .errors import (
    BoilerplateError,
    ConfigurationError,
    ErrorContext,
    InsecureCorsConfigurationError,
    OptionsBindingError,
    RegistrationClosedError,
    ResolutionError,
)

__all__ = [
    "BoilerplateError",
    "ErrorContext",
    "ConfigurationError",
    "ResolutionError",
    "RegistrationClosedError",
    "OptionsBindingError",
    "InsecureCorsConfigurationError",
]
