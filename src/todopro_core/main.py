"""Main entry point for TodoPro core."""

import typer

from todopro_core import __version__
from todopro_core.commands import contexts, todos
from todopro_core.utils.ui.console import get_console

app = typer.Typer(
    name="todopro-core",
    help="Manage todos against any configured storage backend",
    no_args_is_help=True,
)

console = get_console()

app.command("add")(todos.add_command)
app.command("list")(todos.list_command)
app.command("show")(todos.show_command)
app.command("update")(todos.update_command)
app.command("complete")(todos.complete_command)
app.command("reopen")(todos.reopen_command)
app.command("toggle")(todos.toggle_command)
app.command("delete")(todos.delete_command)
app.command("stats")(todos.stats_command)

app.add_typer(contexts.app, name="contexts", help="Storage context management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]TodoPro core[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
