"""API boilerplate CLI module.

A thin layer over the composition root: it builds the container from the
current configuration and shows what it contains.
"""

from ._version import __version__
from .app import app, main

__all__ = ["__version__", "app", "main"]
