"""Translators between domain entities and DTOs."""

from .car import CarToCarTranslator, CarToSaveCarTranslator

__all__ = ["CarToCarTranslator", "CarToSaveCarTranslator"]
