"""Domain entities.

Pure domain entities with no framework dependencies.
"""

from .car import Car

__all__ = ["Car"]
