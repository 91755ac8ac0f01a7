"""Console utilities for rich output."""

import os
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Global console instance
_console: Optional[Console] = None


def get_console() -> Console:
    """Get or create the global console instance."""
    global _console
    if _console is None:
        quiet = os.environ.get("API_BOILERPLATE_CLI_QUIET", "0") == "1"
        _console = Console(quiet=quiet)
    return _console


def print_error(message: str, title: str = "Error"):
    """Print an error message."""
    console = get_console()
    console.print(Panel(
        message,
        title=f"[bold red]{title}[/bold red]",
        border_style="red"
    ))


def create_table(title: str, columns: list[str]) -> Table:
    """Create a formatted table."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for index, col in enumerate(columns):
        # Identifiers stay on one line
        table.add_column(col, no_wrap=index == 0)
    return table
