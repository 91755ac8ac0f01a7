"""Specific error types for the API boilerplate."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .base import BoilerplateError


def describe_service(service_type: Any) -> str:
    """Readable name for a capability identifier, generic aliases included."""
    origin = getattr(service_type, "__origin__", None)
    args = getattr(service_type, "__args__", None)
    if origin is not None and args:
        return f"{describe_service(origin)}[{', '.join(describe_service(a) for a in args)}]"
    return getattr(service_type, "__qualname__", None) or repr(service_type)


class ConfigurationError(BoilerplateError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[Path] = None,
        section: Optional[str] = None,
        **kwargs: Any,
    ):
        """Initialize configuration error."""
        super().__init__(message, **kwargs)

        if config_path:
            self.context.add_technical_detail("config_path", str(config_path))
        if section:
            self.context.add_technical_detail("section", section)

    @classmethod
    def unreadable_file(cls, path: Path, cause: Exception) -> "ConfigurationError":
        """Create error for a configuration file that cannot be parsed."""
        error = cls(
            f"Invalid configuration file {path}: {cause}",
            config_path=path,
            cause=cause,
            error_code="CONFIG_UNREADABLE_FILE",
        )
        error.with_suggestion(f"Check the syntax of {path}")
        return error

    @classmethod
    def unsupported_format(cls, path: Path) -> "ConfigurationError":
        """Create error for a file extension the loader does not understand."""
        error = cls(
            f"Unsupported configuration file format: {path}",
            config_path=path,
            error_code="CONFIG_UNSUPPORTED_FORMAT",
        )
        error.with_suggestion("Use a .yaml, .yml or .json file")
        return error


class ResolutionError(BoilerplateError):
    """A capability could not be resolved from the container."""

    def __init__(self, message: str, *, service_type: Any = None, **kwargs: Any):
        """Initialize resolution error."""
        super().__init__(message, **kwargs)
        self.service_type = service_type
        if service_type is not None:
            self.context.add_technical_detail("service_type", describe_service(service_type))

    @classmethod
    def not_registered(cls, service_type: Any) -> "ResolutionError":
        """Create error for an identifier with no binding."""
        error = cls(
            f"No service registered for {describe_service(service_type)}",
            service_type=service_type,
            error_code="DI_NOT_REGISTERED",
        )
        error.with_suggestion("Register the service in the composition root before building the container")
        return error

    @classmethod
    def scope_required(cls, service_type: Any) -> "ResolutionError":
        """Create error for a scoped service requested outside of a scope."""
        error = cls(
            f"Scoped service {describe_service(service_type)} cannot be resolved from the root container",
            service_type=service_type,
            error_code="DI_SCOPE_REQUIRED",
        )
        error.with_suggestion("Resolve it from a scope: `with container.create_scope() as scope:`")
        return error

    @classmethod
    def scope_disposed(cls, service_type: Any) -> "ResolutionError":
        """Create error for resolution through a scope that has ended."""
        return cls(
            f"Cannot resolve {describe_service(service_type)}: the scope has been disposed",
            service_type=service_type,
            error_code="DI_SCOPE_DISPOSED",
        )

    @classmethod
    def container_disposed(cls, service_type: Any) -> "ResolutionError":
        """Create error for resolution after the container has been disposed."""
        error = cls(
            f"Cannot resolve {describe_service(service_type)}: the container has been disposed",
            service_type=service_type,
            error_code="DI_CONTAINER_DISPOSED",
        )
        error.with_suggestion("Build a new container instead of reusing a disposed one")
        return error


class RegistrationClosedError(BoilerplateError):
    """A binding was added after the registry was built.

    This always means start-up code runs in the wrong order, so the error is
    never recoverable.
    """

    def __init__(self, service_type: Any, **kwargs: Any):
        super().__init__(
            f"Cannot register {describe_service(service_type)}: the service collection is closed",
            error_code="DI_REGISTRATION_CLOSED",
            recoverable=False,
            **kwargs,
        )
        self.service_type = service_type
        self.with_suggestion("Move the registration before ServiceCollection.build()")


class OptionsBindingError(BoilerplateError):
    """A configuration section does not match its settings schema."""

    def __init__(self, message: str, *, section: str, settings_type: Any = None, **kwargs: Any):
        """Initialize options binding error."""
        super().__init__(message, **kwargs)
        self.section = section
        self.settings_type = settings_type
        self.context.add_technical_detail("section", section)
        if settings_type is not None:
            self.context.add_technical_detail("settings_type", describe_service(settings_type))


class InsecureCorsConfigurationError(BoilerplateError):
    """A CORS policy allows credentials together with any origin."""

    def __init__(self, policy_name: str, **kwargs: Any):
        super().__init__(
            f"CORS policy '{policy_name}' allows credentials for any origin",
            error_code="CORS_INSECURE_POLICY",
            recoverable=False,
            **kwargs,
        )
        self.policy_name = policy_name
        self.context.add_technical_detail("policy", policy_name)
        self.with_suggestion("List the allowed origins explicitly or disable allow_credentials")
