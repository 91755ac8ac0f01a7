"""Decorators for CLI commands."""

import functools
from typing import Callable

import typer
from loguru import logger

from core.errors import BoilerplateError

from .console import print_error


def handle_errors(func: Callable) -> Callable:
    """Decorator to handle common errors in CLI commands."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except KeyboardInterrupt:
            print_error("Operation cancelled by user", title="Cancelled")
            raise typer.Exit(130)  # Standard SIGINT exit code
        except BoilerplateError as e:
            print_error(e.format_for_cli(verbose=True), title=type(e).__name__)
            raise typer.Exit(1)
        except FileNotFoundError as e:
            print_error(f"File not found: {e.filename}", title="File Error")
            raise typer.Exit(1)
        except Exception as e:
            logger.exception("Unexpected error")
            print_error(
                f"Unexpected error: {type(e).__name__}: {str(e)}\n"
                f"Run with --verbose for full traceback",
                title="Error"
            )
            raise typer.Exit(1)

    return wrapper
