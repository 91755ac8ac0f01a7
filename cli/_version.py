"""Version information for api-boilerplate.

This file is the single source of truth for version information.
"""

__version__ = "0.1.0"
__version_info__ = tuple(int(i) for i in __version__.split("."))
