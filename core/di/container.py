"""Service collection, container and scopes.

Registration happens on a :class:`ServiceCollection` during start-up. Calling
:meth:`ServiceCollection.build` closes the collection and returns a
:class:`Container`, a read-only binding table backed by Kink. Request handling
code opens a :class:`Scope` per unit of work and resolves through it.
"""

import inspect
import uuid
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Type, TypeVar

from kink import Container as KinkContainer
from loguru import logger

from core.errors import RegistrationClosedError, ResolutionError, describe_service

from .lazy import Lazy
from .providers import (
    PROVIDER_TYPES,
    Factory,
    InstanceProvider,
    Lifetime,
    Provider,
    SingletonProvider,
    dispose_instance,
)

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceDescriptor:
    """A capability identifier bound to a factory and a lifetime."""

    service_type: Any
    factory: Factory
    lifetime: Lifetime
    instance: Any = None

    @property
    def is_instance(self) -> bool:
        return self.instance is not None

    def create_provider(self) -> Provider:
        if self.is_instance:
            return InstanceProvider(self.service_type, self.instance)
        return PROVIDER_TYPES[self.lifetime](self.service_type, self.factory)


def _as_factory(implementation: Any) -> Factory:
    """Turn a zero-argument class into a resolver-taking factory."""
    if inspect.isclass(implementation):
        return lambda _: implementation()
    raise TypeError(
        f"Expected a class, got {implementation!r}; pass callables through factory="
    )


class ServiceCollection:
    """Registry of service descriptors, open for registration until built.

    Registering an identifier that is already present replaces the previous
    binding, so environment-specific code can override defaults.
    """

    def __init__(self):
        self._descriptors: Dict[Any, ServiceDescriptor] = {}
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def add(
        self,
        service_type: Any,
        implementation: Optional[type] = None,
        *,
        factory: Optional[Factory] = None,
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> "ServiceCollection":
        """Register a service.

        Args:
            service_type: The capability identifier
            implementation: Class constructed without arguments
            factory: Callable receiving the resolver; wins over implementation
            lifetime: Lifetime policy of the binding

        Returns:
            The collection, for chaining

        Raises:
            RegistrationClosedError: If the collection has been built
        """
        if factory is None:
            factory = _as_factory(implementation if implementation is not None else service_type)
        return self._add(ServiceDescriptor(service_type, factory, lifetime))

    def add_singleton(self, service_type: Any, implementation: Optional[type] = None, *,
                      factory: Optional[Factory] = None) -> "ServiceCollection":
        return self.add(service_type, implementation, factory=factory, lifetime=Lifetime.SINGLETON)

    def add_scoped(self, service_type: Any, implementation: Optional[type] = None, *,
                   factory: Optional[Factory] = None) -> "ServiceCollection":
        return self.add(service_type, implementation, factory=factory, lifetime=Lifetime.SCOPED)

    def add_transient(self, service_type: Any, implementation: Optional[type] = None, *,
                      factory: Optional[Factory] = None) -> "ServiceCollection":
        return self.add(service_type, implementation, factory=factory, lifetime=Lifetime.TRANSIENT)

    def add_instance(self, service_type: Any, instance: Any) -> "ServiceCollection":
        """Register an already constructed object as a singleton."""
        if instance is None:
            raise ValueError(f"Cannot register None as instance of {describe_service(service_type)}")
        return self._add(ServiceDescriptor(service_type, lambda _: instance, Lifetime.SINGLETON, instance))

    def add_lazy(self, service_type: Any, lifetime: Lifetime = Lifetime.SCOPED) -> "ServiceCollection":
        """Register ``Lazy[service_type]`` resolving ``service_type`` on first access.

        The handle resolves through the resolver that created it, so a scoped
        handle dereferences to the instance of its own scope.
        """
        return self.add(
            Lazy[service_type],
            factory=lambda resolver: Lazy(lambda: resolver.resolve(service_type)),
            lifetime=lifetime,
        )

    def _add(self, descriptor: ServiceDescriptor) -> "ServiceCollection":
        if self._closed:
            raise RegistrationClosedError(descriptor.service_type)

        previous = self._descriptors.get(descriptor.service_type)
        if previous is not None:
            logger.debug(
                f"Overriding {previous.lifetime.value} registration of "
                f"{describe_service(descriptor.service_type)}"
            )
        self._descriptors[descriptor.service_type] = descriptor
        logger.debug(f"Registered {descriptor.lifetime.value}: {describe_service(descriptor.service_type)}")
        return self

    def get_descriptor(self, service_type: Any) -> Optional[ServiceDescriptor]:
        return self._descriptors.get(service_type)

    def build(self) -> "Container":
        """Close the collection and create the container.

        Raises:
            RegistrationClosedError: If the collection was already built
        """
        if self._closed:
            raise RegistrationClosedError(ServiceCollection)
        self._closed = True
        logger.info(f"Building container with {len(self._descriptors)} services")
        return Container(self._descriptors.values())

    def __contains__(self, service_type: Any) -> bool:
        return service_type in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[ServiceDescriptor]:
        return iter(list(self._descriptors.values()))


class Container:
    """Read-only resolver over a closed service collection.

    Singleton and transient services resolve from the container itself;
    scoped services need a :class:`Scope`.
    """

    def __init__(self, descriptors):
        self._bindings = KinkContainer()
        self._descriptors: Tuple[ServiceDescriptor, ...] = tuple(descriptors)
        self._providers: List[Provider] = []
        for descriptor in self._descriptors:
            provider = descriptor.create_provider()
            self._bindings[descriptor.service_type] = provider
            self._providers.append(provider)
        self._disposed = False

    @property
    def root(self) -> "Container":
        return self

    @property
    def scope(self) -> Optional["Scope"]:
        return None

    @property
    def descriptors(self) -> Tuple[ServiceDescriptor, ...]:
        return self._descriptors

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def resolve(self, service_type: Type[T]) -> T:
        """Resolve a singleton or transient service.

        Raises:
            ResolutionError: If the service cannot be resolved from the root
                container
        """
        return self._resolve(service_type, self)

    def _resolve(self, service_type: Any, resolver: Any) -> Any:
        if self._disposed:
            raise ResolutionError.container_disposed(service_type)
        if service_type not in self._bindings:
            raise ResolutionError.not_registered(service_type)
        provider: Provider = self._bindings[service_type]
        return provider.get(resolver)

    def has(self, service_type: Any) -> bool:
        """Check if a service is registered."""
        return service_type in self._bindings

    def lifetime_of(self, service_type: Any) -> Lifetime:
        if not self.has(service_type):
            raise ResolutionError.not_registered(service_type)
        return self._bindings[service_type].lifetime

    def create_scope(self) -> "Scope":
        """Open a new unit of work."""
        if self._disposed:
            raise ResolutionError.container_disposed(Scope)
        return Scope(self)

    def dispose(self) -> None:
        """Close every singleton created by the container."""
        if self._disposed:
            return
        self._disposed = True
        for provider in reversed(self._providers):
            if isinstance(provider, SingletonProvider):
                provider.dispose()
        logger.debug("Container disposed")

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()


class Scope:
    """Unit of work sharing scoped instances.

    Each scope owns its instance table; two scopes never see each other's
    instances. Exiting the scope closes the instances it created.
    """

    def __init__(self, container: Container):
        self.id = uuid.uuid4().hex[:8]
        self._container = container
        self._instances: Dict[Any, Any] = {}
        self._lock = RLock()
        self._disposed = False

    @property
    def root(self) -> Container:
        return self._container

    @property
    def scope(self) -> "Scope":
        return self

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def resolve(self, service_type: Type[T]) -> T:
        """Resolve a service within this unit of work.

        Raises:
            ResolutionError: If the service is not registered or the scope
                has been disposed
        """
        if self._disposed:
            raise ResolutionError.scope_disposed(service_type)
        return self._container._resolve(service_type, self)

    def get_or_create(self, service_type: Any, create: Callable[[], Any]) -> Any:
        with self._lock:
            if self._disposed:
                raise ResolutionError.scope_disposed(service_type)
            if service_type not in self._instances:
                self._instances[service_type] = create()
                logger.debug(f"Created scoped instance of {describe_service(service_type)} in scope {self.id}")
            return self._instances[service_type]

    def dispose(self) -> None:
        """Close scoped instances in reverse creation order."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            instances = list(self._instances.values())
            self._instances.clear()
        for instance in reversed(instances):
            dispose_instance(instance)
        logger.debug(f"Scope {self.id} disposed ({len(instances)} instances)")

    def __enter__(self) -> "Scope":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()
