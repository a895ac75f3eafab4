"""Main entry point for the TaskFlow CLI."""

import typer

from taskflow import __version__
from taskflow.commands import boards, columns, display, filters, labels, subtasks, tasks
from taskflow.commands.next_command import next_task
from taskflow.commands.sync_command import sync
from taskflow.utils.typer_helpers import SuggestingGroup
from taskflow.utils.ui.console import get_console

app = typer.Typer(
    name="taskflow",
    cls=SuggestingGroup,
    help="Kanban boards in the terminal, with remote task sync",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(boards.app, name="board", help="Board management commands")
app.add_typer(columns.app, name="column", help="Column management commands")
app.add_typer(tasks.app, name="task", help="Task management commands")
app.add_typer(subtasks.app, name="subtask", help="Subtask (checklist) commands")
app.add_typer(labels.app, name="label", help="Label management commands")
app.add_typer(filters.app, name="filter", help="Filter the tasks shown by 'board show'")

# Add top-level commands
app.command("sort")(display.sort)
app.command("view")(display.view)
app.command("next")(next_task)
app.command("sync")(sync)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]TaskFlow[/bold] version [cyan]{__version__}[/cyan]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
