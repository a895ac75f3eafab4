"""Column management commands (current board)."""

import typer

from taskflow.models.actions import AddColumn, DeleteColumn, ReorderColumns, UpdateColumn
from taskflow.models.core import ColumnUpdate
from taskflow.utils.exit_codes import ERROR_INVALID_ARGS
from taskflow.utils.typer_helpers import SuggestingGroup
from taskflow.utils.ui.formatters import format_info, format_success

from .decorators import AppError, command_wrapper
from .session import open_session

app = typer.Typer(cls=SuggestingGroup, help="Column management commands")


@app.command("add")
@command_wrapper
def add_column(
    title: str = typer.Argument(..., help="Column title"),
    color: str | None = typer.Option(None, "--color", help="Column color"),
) -> None:
    """Append a column to the current board.

    Note that the last column is the "done" column: tasks moved into it are
    marked completed.
    """
    with open_session() as session:
        session.current_board()
        session.dispatch(AddColumn(title=title, color=color))
    format_success(f"Column added: {title}")


@app.command("rename")
@command_wrapper
def rename_column(
    column: str = typer.Argument(..., help="Column ID, ID prefix or title"),
    title: str = typer.Argument(..., help="New title"),
) -> None:
    """Rename a column."""
    with open_session() as session:
        target = session.find_column(session.current_board(), column)
        session.dispatch(UpdateColumn(column_id=target.id, updates=ColumnUpdate(title=title)))
    format_success(f"Column renamed: {target.title} -> {title}")


@app.command("delete")
@command_wrapper
def delete_column(
    column: str = typer.Argument(..., help="Column ID, ID prefix or title"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a column. Its tasks are deleted with it."""
    with open_session() as session:
        target = session.find_column(session.current_board(), column)
        if target.tasks and not yes:
            confirm = typer.confirm(
                f"Column '{target.title}' holds {len(target.tasks)} task(s). Delete them too?"
            )
            if not confirm:
                format_info("Cancelled")
                raise typer.Exit(0)
        session.dispatch(DeleteColumn(column_id=target.id))
    format_success(f"Column deleted: {target.title}")


@app.command("move")
@command_wrapper
def move_column(
    column: str = typer.Argument(..., help="Column ID, ID prefix or title"),
    position: int = typer.Argument(..., help="New position, starting at 1"),
) -> None:
    """Move a column to another position."""
    if position < 1:
        raise AppError("Position starts at 1", ERROR_INVALID_ARGS)
    with open_session() as session:
        board = session.current_board()
        target = session.find_column(board, column)
        source_index = next(i for i, c in enumerate(board.columns) if c is target)
        session.dispatch(ReorderColumns(source_index=source_index, target_index=position - 1))
    format_success(f"Column moved: {target.title} -> position {min(position, len(board.columns))}")
