"""Todo commands of todopro-core."""

from typing import Annotated

import typer

from todopro_core.services.config_service import get_storage_strategy_context
from todopro_core.services.todo_service import TodoService
from todopro_core.utils.ui.console import get_console
from todopro_core.utils.ui.formatters import (
    format_info,
    format_output,
    format_single_item,
    format_success,
)

from .decorators import AppError, command_wrapper

console = get_console()

OutputOption = Annotated[
    str, typer.Option("--output", "-o", help="Output format: table, json or yaml")
]


def get_todo_service() -> TodoService:
    """Build a TodoService on the active context's repository."""
    return TodoService(get_storage_strategy_context().todo_repository)


@command_wrapper
async def add_command(
    title: Annotated[str, typer.Argument(help="Todo title")],
    priority: Annotated[
        str, typer.Option("--priority", "-p", help="low, medium or high")
    ] = "medium",
    due: Annotated[
        str | None, typer.Option("--due", "-d", help="Due date (ISO 8601)")
    ] = None,
    output: OutputOption = "table",
) -> None:
    """Add a new todo."""
    todo = await get_todo_service().add_todo(title, priority=priority, due_date=due)
    if output == "table":
        format_success(f"Added: {todo.title_value}")
        console.print(f"[dim]ID: {todo.string_id}[/dim]")
    else:
        format_output(todo, output)


@command_wrapper
async def list_command(
    status: Annotated[
        str, typer.Option("--status", "-s", help="all, active or completed")
    ] = "all",
    high: Annotated[bool, typer.Option("--high", help="Only high priority")] = False,
    overdue: Annotated[bool, typer.Option("--overdue", help="Only overdue todos")] = False,
    search: Annotated[
        str | None, typer.Option("--search", help="Filter by title text")
    ] = None,
    sort: Annotated[
        str, typer.Option("--sort", help="created (newest first) or urgency")
    ] = "created",
    output: OutputOption = "table",
) -> None:
    """List todos, newest first."""
    if status not in ("all", "active", "completed"):
        raise AppError(f"Invalid status '{status}'. Use all, active or completed.")
    if sort not in ("created", "urgency"):
        raise AppError(f"Invalid sort '{sort}'. Use created or urgency.")

    todos = await get_todo_service().list_todos(
        status=status, high_priority=high, overdue=overdue, search=search, sort=sort
    )
    format_output(todos, output)


@command_wrapper
async def show_command(
    todo_id: Annotated[str, typer.Argument(help="Todo ID")],
    output: OutputOption = "table",
) -> None:
    """Show one todo."""
    todo = await get_todo_service().get_todo(todo_id)
    format_output(todo, output)


@command_wrapper
async def update_command(
    todo_id: Annotated[str, typer.Argument(help="Todo ID")],
    title: Annotated[str | None, typer.Option("--title", "-t", help="New title")] = None,
    priority: Annotated[
        str | None, typer.Option("--priority", "-p", help="low, medium or high")
    ] = None,
    due: Annotated[
        str | None, typer.Option("--due", "-d", help="New due date (ISO 8601)")
    ] = None,
    clear_due: Annotated[
        bool, typer.Option("--clear-due", help="Remove the due date")
    ] = False,
    output: OutputOption = "table",
) -> None:
    """Update a todo's title, priority or due date."""
    if clear_due and due is not None:
        raise AppError("Use either --due or --clear-due, not both.")
    if title is None and priority is None and due is None and not clear_due:
        format_info("Nothing to update")
        return

    todo = await get_todo_service().update_todo(
        todo_id, title=title, priority=priority, due_date=due, clear_due_date=clear_due
    )
    if output == "table":
        format_success(f"Updated: {todo.title_value}")
    else:
        format_output(todo, output)


@command_wrapper
async def complete_command(
    todo_id: Annotated[str, typer.Argument(help="Todo ID")],
) -> None:
    """Mark a todo as completed."""
    todo = await get_todo_service().complete_todo(todo_id)
    format_success(f"✓ Completed: {todo.title_value}")
    console.print(f"[dim]To undo: todopro-core reopen {todo_id}[/dim]")


@command_wrapper
async def reopen_command(
    todo_id: Annotated[str, typer.Argument(help="Todo ID")],
) -> None:
    """Mark a completed todo as active again."""
    todo = await get_todo_service().reopen_todo(todo_id)
    format_success(f"Reopened: {todo.title_value}")


@command_wrapper
async def toggle_command(
    todo_id: Annotated[str, typer.Argument(help="Todo ID")],
) -> None:
    """Flip a todo between active and completed."""
    todo = await get_todo_service().toggle_todo(todo_id)
    state = "completed" if todo.completed else "active"
    format_success(f"{todo.title_value} is now {state}")


@command_wrapper
async def delete_command(
    todo_id: Annotated[str, typer.Argument(help="Todo ID")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete a todo."""
    if not yes:
        typer.confirm(f"Delete todo {todo_id}?", abort=True)
    await get_todo_service().delete_todo(todo_id)
    format_success(f"Deleted: {todo_id}")


@command_wrapper
async def stats_command(output: OutputOption = "table") -> None:
    """Show todo counts."""
    stats = await get_todo_service().get_stats()
    if output == "table":
        format_single_item(stats.model_dump())
    else:
        format_output(stats.model_dump(), output)
