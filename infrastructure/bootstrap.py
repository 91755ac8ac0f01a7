"""Composition root of the API boilerplate.

Every capability the application resolves is registered here. The
registration groups can be called individually (tests, alternative hosts)
or all at once through :class:`ApplicationBootstrap`.

The bootstrap process follows this order:
1. Host settings and configuration loading
2. Registration of every service group
3. Closing the service collection into a container
"""

from typing import Any, Dict, Optional

from loguru import logger

from application.commands import (
    DeleteCarCommandHandler,
    GetCarCommandHandler,
    PatchCarCommandHandler,
    PostCarCommandHandler,
    PutCarCommandHandler,
)
from application.dto import CarDTO, SaveCarDTO
from application.ports.primary import (
    DeleteCarCommand,
    GetCarCommand,
    PatchCarCommand,
    PostCarCommand,
    PutCarCommand,
)
from application.ports.secondary import CarRepository, DistributedCache, MemoryCache, Translator
from application.settings import CacheProfileSettings
from application.translators import CarToCarTranslator, CarToSaveCarTranslator
from core.di import ConfigurationSource, Container, Options, ServiceCollection, bind_section, configure
from domain.entities import Car

from .adapters.secondary.caching import DistributedMemoryCache, InMemoryCache, RedisDistributedCache
from .adapters.secondary.storage import InMemoryCarStore, StoreCarRepository
from .config import ApplicationSettings, ConfigurationManager
from .web.cors import CorsPolicyTable, CorsSettings, build_cors_policies


def add_caching(services: ServiceCollection) -> ServiceCollection:
    """Register the memory cache and the distributed cache.

    The distributed cache registered here is an in-process stand-in; it is not
    shared between instances. Multi-instance deployments must override it,
    e.g. with :func:`add_redis_cache`, which replaces this registration.
    """
    return (
        services
        .add_singleton(MemoryCache, InMemoryCache)
        .add_singleton(DistributedCache, DistributedMemoryCache)
    )


def add_redis_cache(services: ServiceCollection, url: str, key_prefix: str = "") -> ServiceCollection:
    """Use Redis as the distributed cache, overriding any previous registration."""
    return services.add_singleton(
        DistributedCache,
        factory=lambda _: RedisDistributedCache(url=url, key_prefix=key_prefix),
    )


def add_options(services: ServiceCollection, configuration: ConfigurationSource) -> ServiceCollection:
    """Bind settings objects to their configuration sections.

    Sections are validated on first resolution of ``Options[...]``.
    """
    return configure(services, CacheProfileSettings, configuration)


def add_cors_policies(
    services: ServiceCollection,
    configuration: ConfigurationSource,
    enabled: bool = True,
) -> ServiceCollection:
    """Build the CORS policy table and register it as a singleton.

    The table is built immediately, so an insecure or malformed policy fails
    start-up rather than the first request.

    Raises:
        InsecureCorsConfigurationError: If a policy allows credentials for any origin
        OptionsBindingError: If the ``CorsSettings`` section is malformed
    """
    if not enabled:
        logger.info("CORS disabled, no policies registered")
        return services

    settings = bind_section(CorsSettings, configuration.get_section(CorsSettings.__name__), CorsSettings.__name__)
    table = build_cors_policies(settings)
    logger.info(f"Registered {len(table)} CORS policies")
    return services.add_instance(CorsPolicyTable, table)


def add_commands(services: ServiceCollection) -> ServiceCollection:
    """Register the Car commands and a lazy handle for each of them.

    Commands are scoped. Their lazy handles are scoped too and resolve the
    command of the scope they were created in.
    """
    (
        services
        .add_scoped(DeleteCarCommand, factory=lambda scope: DeleteCarCommandHandler(
            repository=scope.resolve(CarRepository),
        ))
        .add_lazy(DeleteCarCommand)
        .add_scoped(GetCarCommand, factory=lambda scope: GetCarCommandHandler(
            repository=scope.resolve(CarRepository),
            car_translator=scope.resolve(Translator[Car, CarDTO]),
            cache_profiles=scope.resolve(Options[CacheProfileSettings]),
        ))
        .add_lazy(GetCarCommand)
        .add_scoped(PatchCarCommand, factory=lambda scope: PatchCarCommandHandler(
            repository=scope.resolve(CarRepository),
            to_save_car_translator=scope.resolve(Translator[Car, SaveCarDTO]),
            car_translator=scope.resolve(Translator[Car, CarDTO]),
        ))
        .add_lazy(PatchCarCommand)
        .add_scoped(PostCarCommand, factory=lambda scope: PostCarCommandHandler(
            repository=scope.resolve(CarRepository),
            save_car_translator=scope.resolve(Translator[SaveCarDTO, Car]),
            car_translator=scope.resolve(Translator[Car, CarDTO]),
        ))
        .add_lazy(PostCarCommand)
        .add_scoped(PutCarCommand, factory=lambda scope: PutCarCommandHandler(
            repository=scope.resolve(CarRepository),
            car_translator=scope.resolve(Translator[Car, CarDTO]),
        ))
        .add_lazy(PutCarCommand)
    )
    return services


def add_repositories(services: ServiceCollection, store: Optional[InMemoryCarStore] = None) -> ServiceCollection:
    """Register the car store (singleton) and the car repository (scoped)."""
    if store is not None:
        services.add_instance(InMemoryCarStore, store)
    else:
        services.add_singleton(InMemoryCarStore)
    return services.add_scoped(
        CarRepository,
        factory=lambda scope: StoreCarRepository(scope.resolve(InMemoryCarStore)),
    )


def add_translators(services: ServiceCollection) -> ServiceCollection:
    """Register the stateless translators, one binding per direction."""
    return (
        services
        .add_singleton(Translator[Car, CarDTO], CarToCarTranslator)
        .add_singleton(Translator[CarDTO, Car], CarToCarTranslator)
        .add_singleton(Translator[Car, SaveCarDTO], CarToSaveCarTranslator)
        .add_singleton(Translator[SaveCarDTO, Car], CarToSaveCarTranslator)
    )


class ApplicationBootstrap:
    """Builds the application container from host settings and configuration."""

    def __init__(
        self,
        settings: Optional[ApplicationSettings] = None,
        configuration: Optional[ConfigurationManager] = None,
    ):
        """Initialize bootstrap.

        Args:
            settings: Host settings, read from the environment when omitted
            configuration: Configuration source, built from ``settings.config_files`` when omitted
        """
        self.settings = settings
        self.configuration = configuration
        self.services: Optional[ServiceCollection] = None
        self.container: Optional[Container] = None

    @property
    def is_initialized(self) -> bool:
        return self.container is not None

    def initialize(self) -> Container:
        """Register every service group and build the container.

        Returns:
            The container; the same one on repeated calls
        """
        if self.container is not None:
            return self.container

        try:
            self._setup_configuration()
            self.services = self._register_services()
            self.container = self.services.build()
        except Exception as e:
            logger.error(f"Application initialization failed: {e}")
            raise

        logger.info(
            f"Application initialized for {self.settings.environment} "
            f"with {len(self.container.descriptors)} services"
        )
        return self.container

    def _setup_configuration(self) -> None:
        if self.settings is None:
            self.settings = ApplicationSettings()
        if self.configuration is None:
            self.configuration = ConfigurationManager(
                config_paths=[*self.settings.config_files, self.settings.environment_config_file()],
            )

    def _register_services(self) -> ServiceCollection:
        settings = self.settings
        services = ServiceCollection()
        services.add_instance(ApplicationSettings, settings)
        services.add_instance(ConfigurationManager, self.configuration)

        add_caching(services)
        if settings.distributed_cache == "redis":
            add_redis_cache(services, settings.redis_url, settings.redis_key_prefix)
        add_options(services, self.configuration)
        add_cors_policies(services, self.configuration, enabled=settings.cors_enabled)
        add_commands(services)
        add_repositories(services, InMemoryCarStore.with_sample_data() if settings.is_development else None)
        add_translators(services)
        return services

    def get_service(self, service_type: Any) -> Any:
        """Resolve a singleton or transient service.

        Raises:
            RuntimeError: If application not initialized
        """
        if self.container is None:
            raise RuntimeError("Application not initialized. Call initialize() first.")
        return self.container.resolve(service_type)

    def shutdown(self) -> None:
        """Dispose singletons and forget the container."""
        if self.container is not None:
            self.container.dispose()
        self.container = None
        self.services = None

    def get_status(self) -> Dict[str, Any]:
        """Get application status information."""
        status: Dict[str, Any] = {"initialized": self.is_initialized}
        if self.container is not None:
            lifetimes: Dict[str, int] = {}
            for descriptor in self.container.descriptors:
                lifetimes[descriptor.lifetime.value] = lifetimes.get(descriptor.lifetime.value, 0) + 1
            status["services_count"] = len(self.container.descriptors)
            status["lifetimes"] = lifetimes
        if self.settings is not None:
            status["environment"] = self.settings.environment
        return status


def build_container(
    settings: Optional[ApplicationSettings] = None,
    configuration: Optional[ConfigurationManager] = None,
) -> Container:
    """Build the application container in one call."""
    return ApplicationBootstrap(settings, configuration).initialize()
