"""Label management commands."""

import re

import typer
from rich.text import Text

from taskflow.models.actions import AddLabel, DeleteLabel, DeleteLabelFromAllBoards, UpdateLabel
from taskflow.models.core import Label, LabelUpdate
from taskflow.utils.exit_codes import ERROR_INVALID_ARGS
from taskflow.utils.typer_helpers import SuggestingGroup
from taskflow.utils.ui.console import get_console
from taskflow.utils.ui.formatters import format_info, format_output, format_success
from taskflow.utils.uuid_utils import shorten_uuid

from .decorators import AppError, command_wrapper
from .session import open_session

app = typer.Typer(cls=SuggestingGroup, help="Label management commands")
console = get_console()

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


@app.command("list")
@command_wrapper
def list_labels(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format: pretty, json, yaml"),
) -> None:
    """List the labels of the current board."""
    with open_session(save=False) as session:
        board = session.current_board()
    data = {"labels": [label.model_dump(mode="json", by_alias=True) for label in board.labels]}
    if format_output(data, output):
        return
    if not board.labels:
        console.print("[yellow]No labels on this board[/yellow]")
        return
    for label in board.labels:
        used = sum(
            1 for task in board.all_tasks() if any(t.id == label.id for t in task.labels)
        )
        line = Text("● ", style=label.color if HEX_COLOR.match(label.color) else "blue")
        line.append(f"{label.name} ")
        line.append(f"{shorten_uuid(label.id)} · {used} task(s)", style="dim")
        console.print(line)


@app.command("add")
@command_wrapper
def add_label(
    name: str = typer.Argument(..., help="Label name"),
    color: str = typer.Option("#6b7280", "--color", help="Label color (hex)"),
) -> None:
    """Add a label to the current board."""
    with open_session() as session:
        board = session.current_board()
        if any(label.name.lower() == name.lower() for label in board.labels):
            raise AppError(f"Label already exists: {name}", ERROR_INVALID_ARGS)
        session.dispatch(AddLabel(label=Label(name=name, color=color)))
    format_success(f"Label added: {name}")


@app.command("rename")
@command_wrapper
def rename_label(
    label: str = typer.Argument(..., help="Label ID, ID prefix or name"),
    name: str = typer.Argument(..., help="New name"),
    color: str | None = typer.Option(None, "--color", help="New color (hex)"),
) -> None:
    """Rename (and optionally recolor) a label, including on tagged tasks."""
    updates = LabelUpdate(name=name) if color is None else LabelUpdate(name=name, color=color)
    with open_session() as session:
        target = session.find_label(session.current_board(), label)
        session.dispatch(UpdateLabel(label_id=target.id, updates=updates))
    format_success(f"Label renamed: {target.name} -> {name}")


@app.command("delete")
@command_wrapper
def delete_label(
    label: str = typer.Argument(..., help="Label ID, ID prefix or name"),
    all_boards: bool = typer.Option(
        False, "--all-boards", help="Also remove it from tasks on every other board"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a label and remove it from every task that uses it."""
    with open_session() as session:
        target = session.find_label(session.current_board(), label)
        if not yes:
            scope = "every board" if all_boards else "this board"
            confirm = typer.confirm(f"Delete label '{target.name}' from {scope}?")
            if not confirm:
                format_info("Cancelled")
                raise typer.Exit(0)
        if all_boards:
            session.dispatch(DeleteLabelFromAllBoards(label_id=target.id))
        else:
            session.dispatch(DeleteLabel(label_id=target.id))
    format_success(f"Label deleted: {target.name}")
