"""Domain layer for the API boilerplate.

This package contains the business entities, independent of the web
framework, the cache backends and the storage technology.

Structure:
- entities/: Core domain entities (Car)
"""

from .entities import Car

__all__ = ["Car"]
