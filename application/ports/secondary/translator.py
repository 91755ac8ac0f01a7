"""Translator port between domain and transport representations."""

from typing import Protocol, TypeVar

TSource = TypeVar("TSource", contravariant=True)
TDestination = TypeVar("TDestination", covariant=True)


class Translator(Protocol[TSource, TDestination]):
    """Pure mapping from one representation to another.

    Implementations are shared by every unit of work and must not keep
    mutable state between calls.
    """

    def translate(self, source: TSource) -> TDestination:
        ...
