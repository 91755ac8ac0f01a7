"""Provider implementations for the supported lifetime policies.

A provider owns the creation strategy of one registered service. The container
keeps exactly one provider per capability identifier and asks it for an
instance on every resolution.
"""

from abc import ABC, abstractmethod
from enum import Enum
from threading import Lock
from typing import TYPE_CHECKING, Any, Callable, Dict, Type, TypeVar, Union

from loguru import logger

from core.errors import ResolutionError, describe_service

if TYPE_CHECKING:
    from .container import Container, Scope

T = TypeVar("T")

Resolver = Union["Container", "Scope"]
Factory = Callable[[Resolver], Any]

_MISSING = object()


class Lifetime(Enum):
    """How many instances of a service exist and who shares them."""

    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"


def dispose_instance(instance: Any) -> None:
    """Release an instance that exposes ``close()``."""
    close = getattr(instance, "close", None)
    if callable(close):
        close()


class Provider(ABC):
    """Base provider interface for object creation strategies."""

    lifetime: Lifetime

    def __init__(self, service_type: Any, factory: Factory):
        """Initialize provider.

        Args:
            service_type: Capability identifier the provider is bound to
            factory: Callable receiving the resolver and returning an instance
        """
        self.service_type = service_type
        self._factory = factory

    @abstractmethod
    def get(self, resolver: Resolver) -> Any:
        """Get an instance from the provider.

        Args:
            resolver: The container or scope the resolution started from

        Returns:
            The instance
        """

    def reset(self) -> None:
        """Drop any cached state."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({describe_service(self.service_type)})"


class SingletonProvider(Provider):
    """Provider that creates one instance for the lifetime of the container.

    The factory always receives the root container, so a singleton can never
    capture a scoped service.
    """

    lifetime = Lifetime.SINGLETON

    def __init__(self, service_type: Any, factory: Factory):
        super().__init__(service_type, factory)
        self._instance: Any = _MISSING
        self._lock = Lock()

    def get(self, resolver: Resolver) -> Any:
        """Get the singleton instance, creating it if necessary."""
        if self._instance is _MISSING:
            with self._lock:
                # Double-check locking
                if self._instance is _MISSING:
                    self._instance = self._factory(resolver.root)
                    logger.debug(f"Created singleton instance of {describe_service(self.service_type)}")
        return self._instance

    @property
    def is_created(self) -> bool:
        return self._instance is not _MISSING

    def dispose(self) -> None:
        """Close and forget the instance."""
        with self._lock:
            instance, self._instance = self._instance, _MISSING
        if instance is not _MISSING:
            dispose_instance(instance)

    def reset(self) -> None:
        """Reset the singleton instance."""
        with self._lock:
            self._instance = _MISSING


class InstanceProvider(SingletonProvider):
    """Singleton provider for an object constructed outside the container.

    The container does not own the instance, so disposal leaves it alone.
    """

    def __init__(self, service_type: Any, instance: Any):
        super().__init__(service_type, lambda _: instance)
        self._instance = instance

    def dispose(self) -> None:
        pass

    def reset(self) -> None:
        pass


class ScopedProvider(Provider):
    """Provider that creates one instance per unit of work."""

    lifetime = Lifetime.SCOPED

    def get(self, resolver: Resolver) -> Any:
        """Get the instance owned by the resolver's scope.

        Raises:
            ResolutionError: If the resolution did not start from a scope
        """
        scope = resolver.scope
        if scope is None:
            raise ResolutionError.scope_required(self.service_type)
        return scope.get_or_create(self.service_type, lambda: self._factory(scope))


class TransientProvider(Provider):
    """Provider that creates a new instance every time."""

    lifetime = Lifetime.TRANSIENT

    def get(self, resolver: Resolver) -> Any:
        """Create a new instance owned by the caller."""
        instance = self._factory(resolver)
        logger.debug(f"Created transient instance of {describe_service(self.service_type)}")
        return instance


PROVIDER_TYPES: Dict[Lifetime, Type[Provider]] = {
    Lifetime.SINGLETON: SingletonProvider,
    Lifetime.SCOPED: ScopedProvider,
    Lifetime.TRANSIENT: TransientProvider,
}
