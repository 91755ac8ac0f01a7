"""CLI utilities and helpers."""

from .console import create_table, get_console, print_error
from .decorators import handle_errors

__all__ = [
    "get_console",
    "print_error",
    "create_table",
    "handle_errors",
]
