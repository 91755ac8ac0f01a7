"""Tests for the service collection, container and scopes."""

from threading import Thread

import pytest

from core.di import Container, Lifetime, Scope, ServiceCollection
from core.errors import RegistrationClosedError, ResolutionError


class Clock:
    pass


class SystemClock(Clock):
    pass


class FrozenClock(Clock):
    pass


class UnitOfWork:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class TestServiceCollection:
    """Test suite for the open registration phase."""

    def test_registration_is_chainable(self):
        """Test that every add method returns the collection."""
        services = ServiceCollection()
        result = services.add_singleton(Clock, SystemClock).add_scoped(UnitOfWork).add_transient(FrozenClock)

        assert result is services
        assert len(services) == 3
        assert Clock in services

    def test_last_registration_wins(self):
        """Test that re-registering an identifier replaces the binding."""
        services = ServiceCollection()
        services.add_singleton(Clock, SystemClock)
        services.add_singleton(Clock, FrozenClock)

        container = services.build()

        assert isinstance(container.resolve(Clock), FrozenClock)
        assert len(container.descriptors) == 1

    def test_override_can_change_lifetime(self):
        """Test that an override replaces the lifetime too."""
        services = ServiceCollection()
        services.add_singleton(Clock, SystemClock)
        services.add_transient(Clock, FrozenClock)

        assert services.get_descriptor(Clock).lifetime is Lifetime.TRANSIENT

    def test_registration_after_build_fails(self):
        """Test that the collection is closed once built."""
        services = ServiceCollection()
        services.build()

        assert services.is_closed
        with pytest.raises(RegistrationClosedError):
            services.add_singleton(Clock, SystemClock)

    def test_build_twice_fails(self):
        """Test that a collection can only be built once."""
        services = ServiceCollection()
        services.build()

        with pytest.raises(RegistrationClosedError):
            services.build()

    def test_non_class_implementation_requires_factory(self):
        """Test that callables must be passed as factories."""
        services = ServiceCollection()

        with pytest.raises(TypeError):
            services.add_singleton(Clock, lambda: SystemClock())

    def test_add_instance_rejects_none(self):
        """Test that None cannot be registered as an instance."""
        with pytest.raises(ValueError):
            ServiceCollection().add_instance(Clock, None)


class TestContainer:
    """Test suite for resolution from the root container."""

    def test_unregistered_service_fails(self):
        """Test that resolving an unknown identifier raises ResolutionError."""
        container = ServiceCollection().build()

        with pytest.raises(ResolutionError) as exc_info:
            container.resolve(Clock)

        assert "Clock" in exc_info.value.message

    def test_unregistered_service_fails_in_scope(self):
        """Test that scopes report unknown identifiers the same way."""
        container = ServiceCollection().build()

        with container.create_scope() as scope:
            with pytest.raises(ResolutionError):
                scope.resolve(Clock)

    def test_factory_receives_resolver(self):
        """Test that factories can resolve their dependencies."""
        services = ServiceCollection()
        services.add_singleton(Clock, SystemClock)
        services.add_transient(dict, factory=lambda resolver: {"clock": resolver.resolve(Clock)})

        container = services.build()
        value = container.resolve(dict)

        assert value["clock"] is container.resolve(Clock)

    def test_scoped_service_from_root_fails(self):
        """Test that scoped services need a scope."""
        services = ServiceCollection().add_scoped(UnitOfWork)
        container = services.build()

        with pytest.raises(ResolutionError):
            container.resolve(UnitOfWork)

    def test_has_and_lifetime_of(self):
        """Test registration queries."""
        container = ServiceCollection().add_scoped(UnitOfWork).build()

        assert container.has(UnitOfWork)
        assert not container.has(Clock)
        assert container.lifetime_of(UnitOfWork) is Lifetime.SCOPED
        with pytest.raises(ResolutionError):
            container.lifetime_of(Clock)

    def test_dispose_closes_singletons(self):
        """Test that disposing the container closes created singletons."""
        container = ServiceCollection().add_singleton(UnitOfWork).build()
        unit = container.resolve(UnitOfWork)

        container.dispose()

        assert unit.closed

    def test_dispose_leaves_instances_alone(self):
        """Test that externally built instances are not closed by the container."""
        unit = UnitOfWork()
        with ServiceCollection().add_instance(UnitOfWork, unit).build() as container:
            assert container.resolve(UnitOfWork) is unit

        assert not unit.closed

    def test_disposed_container_rejects_resolution(self):
        """Test that a disposed container does not rebuild its singletons."""
        container = ServiceCollection().add_singleton(UnitOfWork).build()
        container.resolve(UnitOfWork)

        container.dispose()

        assert container.is_disposed
        with pytest.raises(ResolutionError) as exc_info:
            container.resolve(UnitOfWork)
        assert exc_info.value.error_code == "DI_CONTAINER_DISPOSED"

    def test_disposed_container_rejects_scopes(self):
        """Test that no unit of work can start on a disposed container."""
        container = ServiceCollection().add_scoped(UnitOfWork).build()
        scope = container.create_scope()

        container.dispose()

        with pytest.raises(ResolutionError):
            container.create_scope()
        with pytest.raises(ResolutionError):
            scope.resolve(UnitOfWork)


class TestScope:
    """Test suite for lifetimes across scopes."""

    @pytest.fixture
    def container(self) -> Container:
        services = ServiceCollection()
        services.add_singleton(Clock, SystemClock)
        services.add_scoped(UnitOfWork)
        services.add_transient(FrozenClock)
        return services.build()

    def test_scoped_same_within_scope(self, container):
        """Test that a scope shares one scoped instance."""
        with container.create_scope() as scope:
            assert scope.resolve(UnitOfWork) is scope.resolve(UnitOfWork)

    def test_scoped_distinct_across_scopes(self, container):
        """Test that two scopes never share scoped instances."""
        with container.create_scope() as first, container.create_scope() as second:
            assert first.resolve(UnitOfWork) is not second.resolve(UnitOfWork)

    def test_singleton_shared_across_scopes(self, container):
        """Test that every scope sees the same singleton."""
        with container.create_scope() as first, container.create_scope() as second:
            assert first.resolve(Clock) is second.resolve(Clock)
            assert first.resolve(Clock) is container.resolve(Clock)

    def test_transient_always_new(self, container):
        """Test that transients are created on every resolution."""
        with container.create_scope() as scope:
            assert scope.resolve(FrozenClock) is not scope.resolve(FrozenClock)
        assert container.resolve(FrozenClock) is not container.resolve(FrozenClock)

    def test_exit_disposes_scoped_instances(self, container):
        """Test that leaving a scope closes its instances."""
        with container.create_scope() as scope:
            unit = scope.resolve(UnitOfWork)
            assert not unit.closed

        assert unit.closed
        assert scope.is_disposed

    def test_disposed_scope_rejects_resolution(self, container):
        """Test that a disposed scope cannot resolve anything."""
        scope = container.create_scope()
        scope.dispose()

        with pytest.raises(ResolutionError):
            scope.resolve(Clock)

    def test_scope_root_is_container(self, container):
        """Test scope navigation properties."""
        scope = container.create_scope()

        assert isinstance(scope, Scope)
        assert scope.root is container
        assert scope.scope is scope
        assert container.scope is None

    def test_singleton_factory_cannot_capture_scoped(self):
        """Test that singletons resolve their dependencies from the root."""
        services = ServiceCollection()
        services.add_scoped(UnitOfWork)
        services.add_singleton(dict, factory=lambda resolver: {"unit": resolver.resolve(UnitOfWork)})
        container = services.build()

        with container.create_scope() as scope:
            with pytest.raises(ResolutionError):
                scope.resolve(dict)

    def test_concurrent_scoped_resolution(self, container):
        """Test that concurrent resolutions in one scope create one instance."""
        scope = container.create_scope()
        instances = []

        threads = [Thread(target=lambda: instances.append(scope.resolve(UnitOfWork))) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(instance) for instance in instances}) == 1
        scope.dispose()
