"""Infrastructure package for the API boilerplate.

This package contains:
- Configuration management
- Cache, storage and web adapters implementing the application ports
- The composition root wiring everything into the DI container
"""

__version__ = "0.1.0"
