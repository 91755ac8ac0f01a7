"""Binding of configuration sections to typed settings snapshots.

A settings type is a pydantic model. ``configure`` registers
``Options[SettingsType]`` as a singleton whose value is read from the
configuration section named after the type, on first resolution.
"""

from typing import Any, Generic, Mapping, Optional, Protocol, Type, TypeVar, runtime_checkable

from loguru import logger
from pydantic import BaseModel, ValidationError

from core.errors import OptionsBindingError

from .container import ServiceCollection

TSettings = TypeVar("TSettings", bound=BaseModel)


@runtime_checkable
class ConfigurationSource(Protocol):
    """Hierarchical key-value configuration with named sections."""

    def get_section(self, name: str) -> Optional[Mapping[str, Any]]:
        """Return the named section, or None when it is absent."""
        ...


class Options(Generic[TSettings]):
    """Immutable snapshot of a settings object."""

    def __init__(self, value: TSettings):
        self._value = value

    @property
    def value(self) -> TSettings:
        return self._value

    def __repr__(self) -> str:
        return f"Options({self._value!r})"


def bind_section(settings_type: Type[TSettings], section: Any, section_name: str) -> TSettings:
    """Validate a raw section against ``settings_type``.

    A missing section yields the settings defaults.

    Raises:
        OptionsBindingError: If the section does not match the schema
    """
    if section is None:
        logger.debug(f"Section '{section_name}' not found, using defaults for {settings_type.__name__}")
        section = {}
    if not isinstance(section, Mapping):
        raise OptionsBindingError(
            f"Configuration section '{section_name}' must be a mapping, got {type(section).__name__}",
            section=section_name,
            settings_type=settings_type,
        )
    try:
        return settings_type.model_validate(dict(section))
    except ValidationError as e:
        raise OptionsBindingError(
            f"Configuration section '{section_name}' does not match {settings_type.__name__}: "
            f"{e.error_count()} error(s)",
            section=section_name,
            settings_type=settings_type,
            cause=e,
        ) from e


def configure(
    services: ServiceCollection,
    settings_type: Type[TSettings],
    configuration: ConfigurationSource,
    section: Optional[str] = None,
) -> ServiceCollection:
    """Register ``Options[settings_type]`` bound to a configuration section.

    Args:
        services: The open service collection
        settings_type: Pydantic model describing the section
        configuration: Source the section is read from
        section: Section name, defaults to the settings type name

    Returns:
        The collection, for chaining
    """
    section_name = section or settings_type.__name__

    def create_options(_resolver) -> Options[TSettings]:
        return Options(bind_section(settings_type, configuration.get_section(section_name), section_name))

    return services.add_singleton(Options[settings_type], factory=create_options)
