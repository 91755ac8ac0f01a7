"""Dependency injection core for the API boilerplate, backed by Kink.

This module provides:
- An explicit service collection with overwrite semantics
- A closed container resolving singleton, scoped and transient services
- Scopes modelling one unit of work
- Lazy handles and typed options bound from configuration
"""

from .container import Container, Scope, ServiceCollection, ServiceDescriptor
from .lazy import Lazy
from .options import ConfigurationSource, Options, bind_section, configure
from .providers import (
    InstanceProvider,
    Lifetime,
    Provider,
    ScopedProvider,
    SingletonProvider,
    TransientProvider,
)

__all__ = [
    # Registry and container
    "ServiceCollection",
    "ServiceDescriptor",
    "Container",
    "Scope",
    # Lifetimes and providers
    "Lifetime",
    "Provider",
    "SingletonProvider",
    "InstanceProvider",
    "ScopedProvider",
    "TransientProvider",
    # Deferred and configured services
    "Lazy",
    "Options",
    "ConfigurationSource",
    "configure",
    "bind_section",
]
