"""Storage context management commands for todopro-core."""

from typing import Annotated

import typer
from rich.table import Table

from todopro_core.models.config_models import BACKENDS, StorageContext
from todopro_core.services.config_service import get_config_service
from todopro_core.utils.ui.console import get_console
from todopro_core.utils.ui.formatters import format_success

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="Manage storage contexts (which backend todos live in)")


@app.command("list")
@command_wrapper
def list_contexts() -> None:
    """List all contexts."""
    config_service = get_config_service()
    current = config_service.get_current_context().name

    table = Table(title="Contexts", show_header=True)
    table.add_column("", width=1)
    table.add_column("Name", style="cyan")
    table.add_column("Backend")
    table.add_column("Source", overflow="fold")
    table.add_column("Description", style="dim")

    for ctx in config_service.list_contexts():
        marker = "*" if ctx.name == current else ""
        table.add_row(marker, ctx.name, ctx.backend, ctx.source or "-", ctx.description)

    console.print(table)


@app.command("use")
@command_wrapper
def use_context(
    name: Annotated[str, typer.Argument(help="Context name")],
) -> None:
    """Switch the active context."""
    try:
        context = get_config_service().use_context(name)
    except ValueError as e:
        raise AppError(str(e)) from e
    format_success(f"Switched to context '{context.name}' ({context.backend})")


@app.command("add")
@command_wrapper
def add_context(
    name: Annotated[str, typer.Argument(help="Context name")],
    backend: Annotated[
        str, typer.Option("--backend", "-b", help=f"One of: {', '.join(BACKENDS)}")
    ],
    source: Annotated[
        str, typer.Option("--source", "-s", help="Database path or URL")
    ] = "",
    description: Annotated[
        str, typer.Option("--description", help="Human-readable description")
    ] = "",
) -> None:
    """Add a storage context."""
    if backend not in BACKENDS:
        raise AppError(f"Unknown backend '{backend}'. Use one of: {', '.join(BACKENDS)}")
    try:
        context = StorageContext(
            name=name, backend=backend, source=source, description=description
        )
        get_config_service().add_context(context)
    except ValueError as e:
        raise AppError(str(e)) from e
    format_success(f"Added context '{name}'")


@app.command("remove")
@command_wrapper
def remove_context(
    name: Annotated[str, typer.Argument(help="Context name")],
) -> None:
    """Remove a storage context."""
    try:
        get_config_service().remove_context(name)
    except ValueError as e:
        raise AppError(str(e)) from e
    format_success(f"Removed context '{name}'")
