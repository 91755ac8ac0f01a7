"""Main CLI application setup and configuration."""

import json
from pathlib import Path
from typing import List, Optional

import typer

from core.di import Lifetime
from core.errors import describe_service
from infrastructure.bootstrap import ApplicationBootstrap
from infrastructure.config import ApplicationSettings
from infrastructure.web import CorsPolicyTable
from utils.logging_config import setup_logging

from .utils import create_table, get_console, handle_errors

# Initialize the main app
app = typer.Typer(
    name="api-boilerplate",
    help="Inspect the services and CORS policies of the Car API",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)


def version_callback(value: bool):
    if value:
        from ._version import __version__

        get_console().print(f"[bold cyan]api-boilerplate[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version",
    ),
    config: Optional[List[Path]] = typer.Option(
        None, "--config", "-c", help="Configuration file, may be repeated"
    ),
    environment: Optional[str] = typer.Option(
        None, "--environment", "-e", help="Hosting environment name"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Minimal output"),
):
    """Car API composition root."""
    overrides = {}
    if config:
        overrides["config_files"] = list(config)
    if environment:
        overrides["environment"] = environment
    settings = ApplicationSettings(**overrides)

    if verbose:
        setup_logging("DEBUG", settings.log_file)
    elif quiet:
        setup_logging("ERROR", settings.log_file)
    else:
        setup_logging(settings.log_level, settings.log_file)

    ctx.obj = ApplicationBootstrap(settings)


def _container(ctx: typer.Context):
    bootstrap: ApplicationBootstrap = ctx.obj
    return bootstrap.initialize()


@app.command()
@handle_errors
def bindings(
    ctx: typer.Context,
    lifetime: Optional[Lifetime] = typer.Option(
        None, "--lifetime", "-l", case_sensitive=False, help="Only show this lifetime"
    ),
):
    """List every registered service with its lifetime."""
    container = _container(ctx)
    table = create_table("Registered services", ["Service", "Lifetime", "Binding"])
    for descriptor in sorted(container.descriptors, key=lambda d: describe_service(d.service_type)):
        if lifetime is not None and descriptor.lifetime is not lifetime:
            continue
        table.add_row(
            describe_service(descriptor.service_type),
            descriptor.lifetime.value,
            "instance" if descriptor.is_instance else "factory",
        )
    get_console().print(table)


@app.command()
@handle_errors
def cors(ctx: typer.Context):
    """List the CORS policies."""
    container = _container(ctx)
    if not container.has(CorsPolicyTable):
        get_console().print("[yellow]CORS is disabled[/yellow]")
        return

    policies: CorsPolicyTable = container.resolve(CorsPolicyTable)
    table = create_table(
        "CORS policies", ["Name", "Origins", "Methods", "Headers", "Credentials", "Max age"]
    )
    for name, policy in policies.items():
        table.add_row(
            "(default)" if name == policies.default_policy_name else name,
            ", ".join(policy.allowed_origins) or "-",
            ", ".join(policy.allowed_methods) or "-",
            ", ".join(policy.allowed_headers) or "-",
            "yes" if policy.allow_credentials else "no",
            str(policy.preflight_max_age),
        )
    get_console().print(table)


@app.command()
@handle_errors
def status(ctx: typer.Context):
    """Show a summary of the built container."""
    bootstrap: ApplicationBootstrap = ctx.obj
    bootstrap.initialize()
    get_console().print_json(json.dumps(bootstrap.get_status()))


@app.command("config")
@handle_errors
def show_config(
    ctx: typer.Context,
    section: Optional[str] = typer.Argument(None, help="Section name, nested levels separated by ':'"),
):
    """Print the merged configuration or one section of it."""
    bootstrap: ApplicationBootstrap = ctx.obj
    bootstrap.initialize()
    value = (
        bootstrap.configuration.get_section(section) if section
        else bootstrap.configuration.load_configuration()
    )
    if value is None:
        get_console().print(f"[yellow]Section '{section}' not found[/yellow]")
        raise typer.Exit(1)
    get_console().print_json(json.dumps(value, default=str))


def main():
    app()


if __name__ == "__main__":
    main()
