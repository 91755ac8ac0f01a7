"""Deferred resolution handle."""

from threading import Lock
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class Lazy(Generic[T]):
    """Resolve a dependency on first access and remember the result.

    Creating the handle does not call the factory. Concurrent first accesses
    call it once.
    """

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._value = _UNSET
        self._lock = Lock()

    @property
    def value(self) -> T:
        if self._value is _UNSET:
            with self._lock:
                if self._value is _UNSET:
                    self._value = self._factory()
        return self._value

    @property
    def is_value_created(self) -> bool:
        return self._value is not _UNSET

    def __repr__(self) -> str:
        state = repr(self._value) if self.is_value_created else "<not created>"
        return f"Lazy({state})"
