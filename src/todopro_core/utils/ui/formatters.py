"""Output formatters for different formats."""

import json
from typing import Any

import yaml
from rich.table import Table

from todopro_core.models import Todo
from todopro_core.utils.ui.console import get_console

console = get_console()

PRIORITY_STYLES = {
    "high": "bold red",
    "medium": "yellow",
    "low": "green",
}


def todo_to_dict(todo: Todo) -> dict[str, Any]:
    """Flatten a todo for display and machine-readable output."""
    return {
        "id": todo.string_id,
        "title": todo.title_value,
        "completed": todo.completed,
        "priority": todo.priority.level,
        "created_at": todo.created_at.isoformat(timespec="milliseconds"),
        "due_date": (
            todo.due_date.isoformat(timespec="milliseconds") if todo.due_date else None
        ),
        "overdue": todo.is_overdue(),
    }


def format_output(data: Any, output_format: str = "table") -> None:
    """Format and display output based on format."""
    if isinstance(data, Todo):
        data = todo_to_dict(data)
    elif isinstance(data, list):
        data = [todo_to_dict(item) if isinstance(item, Todo) else item for item in data]

    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    elif isinstance(data, list):
        format_todos_table(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if value is None:
        return "-"
    return str(value)


def format_todos_table(items: list[dict]) -> None:
    """Format a list of todo dictionaries as a table."""
    if not items:
        console.print("[yellow]No todos found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title")
    table.add_column("Done", justify="center")
    table.add_column("Priority")
    table.add_column("Due")

    for item in items:
        priority = item.get("priority", "medium")
        title = item.get("title", "")
        if item.get("completed"):
            title = f"[strike dim]{title}[/strike dim]"
        elif item.get("overdue"):
            title = f"[red]{title}[/red]"
        table.add_row(
            _cell(item.get("id")),
            title,
            _cell(item.get("completed")),
            f"[{PRIORITY_STYLES.get(priority, 'white')}]{priority}[/]",
            _cell(item.get("due_date")),
        )

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), _cell(value))

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")
