"""Tests for deferred resolution handles."""

from threading import Barrier, Thread

from core.di import Lazy, Lifetime, ServiceCollection


class ExpensiveService:
    created = 0

    def __init__(self):
        type(self).created += 1


class TestLazy:
    """Test suite for the Lazy handle itself."""

    def test_factory_not_called_on_construction(self):
        """Test that creating the handle resolves nothing."""
        calls = []
        lazy = Lazy(lambda: calls.append(1) or "value")

        assert calls == []
        assert not lazy.is_value_created
        assert repr(lazy) == "Lazy(<not created>)"

    def test_value_memoised(self):
        """Test that the factory runs once."""
        calls = []
        lazy = Lazy(lambda: calls.append(1) or object())

        assert lazy.value is lazy.value
        assert len(calls) == 1
        assert lazy.is_value_created

    def test_concurrent_first_access(self):
        """Test that concurrent first accesses call the factory once."""
        calls = []
        barrier = Barrier(8)
        lazy = Lazy(lambda: calls.append(1) or object())
        values = []

        def access():
            barrier.wait()
            values.append(lazy.value)

        threads = [Thread(target=access) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert all(value is values[0] for value in values)


class TestLazyRegistration:
    """Test suite for ServiceCollection.add_lazy."""

    def setup_method(self):
        ExpensiveService.created = 0
        services = ServiceCollection()
        services.add_scoped(ExpensiveService)
        services.add_lazy(ExpensiveService)
        self.container = services.build()

    def test_registered_as_scoped(self):
        """Test that lazy handles default to the scoped lifetime."""
        assert self.container.lifetime_of(Lazy[ExpensiveService]) is Lifetime.SCOPED

    def test_no_construction_before_value(self):
        """Test that resolving the handle does not build the service."""
        with self.container.create_scope() as scope:
            lazy = scope.resolve(Lazy[ExpensiveService])

            assert ExpensiveService.created == 0
            assert not lazy.is_value_created

    def test_value_is_scoped_instance(self):
        """Test that the lazy value is the instance of the same scope."""
        with self.container.create_scope() as scope:
            lazy = scope.resolve(Lazy[ExpensiveService])

            assert lazy.value is scope.resolve(ExpensiveService)
            assert ExpensiveService.created == 1

    def test_scopes_get_own_values(self):
        """Test that handles from different scopes resolve different instances."""
        with self.container.create_scope() as first, self.container.create_scope() as second:
            assert first.resolve(Lazy[ExpensiveService]).value is not second.resolve(Lazy[ExpensiveService]).value
