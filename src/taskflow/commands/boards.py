"""Board management commands."""

from pathlib import Path

import typer

from taskflow.models.actions import (
    CreateBoard,
    DeleteBoard,
    ImportBoards,
    ReorderBoards,
    SwitchBoard,
    UpdateBoard,
)
from taskflow.models.core import BoardUpdate
from taskflow.services.config_service import get_config_service
from taskflow.services.snapshot_service import SnapshotError, export_boards, read_export
from taskflow.utils.exit_codes import ERROR_GENERAL, ERROR_INVALID_ARGS
from taskflow.utils.task_filter import filter_tasks, is_filter_active
from taskflow.utils.task_sort import sort_tasks
from taskflow.utils.typer_helpers import SuggestingGroup
from taskflow.utils.ui.formatters import (
    format_board,
    format_boards,
    format_calendar,
    format_info,
    format_output,
    format_success,
    format_task_table,
)

from .decorators import AppError, command_wrapper
from .session import open_session

app = typer.Typer(cls=SuggestingGroup, help="Board management commands")


@app.command("create")
@command_wrapper
def create_board(
    title: str = typer.Argument(..., help="Board title"),
) -> None:
    """Create a board with To Do / In Progress / Done columns and switch to it."""
    with open_session() as session:
        state = session.dispatch(CreateBoard(title=title))
    format_success(f"Board created: {title} ({state.current_board.id[:8]})")


@app.command("list")
@command_wrapper
def list_boards(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format: pretty, json, yaml"),
) -> None:
    """List all boards. The current board is marked with '*'."""
    with open_session(save=False) as session:
        state = session.state
    data = [
        {
            "id": board.id,
            "title": board.title,
            "current": state.current_board is board,
            "columns": len(board.columns),
            "tasks": len(board.all_tasks()),
        }
        for board in state.boards
    ]
    if not format_output({"boards": data}, output):
        format_boards(state)


@app.command("use")
@command_wrapper
def use_board(
    board: str = typer.Argument(..., help="Board ID, ID prefix or title"),
) -> None:
    """Switch the current board."""
    with open_session() as session:
        target = session.find_board(board)
        session.dispatch(SwitchBoard(board_id=target.id))
    format_success(f"Switched to board: {target.title}")


@app.command("rename")
@command_wrapper
def rename_board(
    board: str = typer.Argument(..., help="Board ID, ID prefix or title"),
    title: str = typer.Argument(..., help="New title"),
) -> None:
    """Rename a board."""
    with open_session() as session:
        target = session.find_board(board)
        session.dispatch(UpdateBoard(board_id=target.id, updates=BoardUpdate(title=title)))
    format_success(f"Board renamed: {target.title} -> {title}")


@app.command("delete")
@command_wrapper
def delete_board(
    board: str = typer.Argument(..., help="Board ID, ID prefix or title"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a board and everything on it."""
    with open_session() as session:
        target = session.find_board(board)
        if not yes:
            confirm = typer.confirm(
                f"Delete board '{target.title}' and its {len(target.all_tasks())} task(s)?"
            )
            if not confirm:
                format_info("Cancelled")
                raise typer.Exit(0)
        state = session.dispatch(DeleteBoard(board_id=target.id))
    format_success(f"Board deleted: {target.title}")
    if state.current_board is not None:
        format_info(f"Current board: {state.current_board.title}")


@app.command("reorder")
@command_wrapper
def reorder_boards(
    boards: list[str] = typer.Argument(..., help="Boards in the desired order"),
) -> None:
    """Reorder boards. Boards not listed keep their order after the listed ones."""
    with open_session() as session:
        ids = [session.find_board(board).id for board in boards]
        session.dispatch(ReorderBoards(board_ids=ids))
    format_success("Boards reordered")


@app.command("show")
@command_wrapper
def show_board(
    board: str | None = typer.Argument(None, help="Board to show (default: current)"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format: pretty, json, yaml"),
) -> None:
    """Show a board with its columns and tasks.

    The current filter and sort option are applied to each column and the
    view mode picks the layout (kanban, table or calendar).
    """
    with open_session(save=False) as session:
        target = session.find_board(board) if board else session.current_board()
        state = session.state

    if format_output(target.model_dump(mode="json", by_alias=True), output):
        return

    columns = {
        column.id: sort_tasks(filter_tasks(column.tasks, state.task_filter), state.sort_option)
        for column in target.columns
    }
    render = {"table": format_task_table, "calendar": format_calendar}.get(
        state.view_mode, format_board
    )
    render(target, columns, get_config_service().config.output.date_format)
    if is_filter_active(state.task_filter):
        format_info(f"Filter active: {state.task_filter.type} (clear with 'taskflow filter clear')")


@app.command("export")
@command_wrapper
def export(
    path: Path = typer.Argument(..., help="Destination file (.json, .yaml or .yml)"),
    board: str | None = typer.Option(None, "--board", "-b", help="Export only this board"),
) -> None:
    """Export boards to a JSON or YAML file."""
    with open_session(save=False) as session:
        boards = [session.find_board(board)] if board else list(session.state.boards)

    export_boards(boards, path)
    format_success(f"Exported {len(boards)} board(s) to {path}")


@app.command("import")
@command_wrapper
def import_boards(
    path: Path = typer.Argument(..., help="File produced by 'taskflow board export'"),
    replace: bool = typer.Option(False, "--replace", help="Replace all existing boards"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation for --replace"),
) -> None:
    """Import boards. Boards whose ID already exists are imported under a new ID."""
    if not path.exists():
        raise AppError(f"File not found: {path}", ERROR_INVALID_ARGS)

    try:
        boards = read_export(path)
    except SnapshotError as e:
        raise AppError(str(e), ERROR_GENERAL) from e

    if not boards:
        raise AppError(f"No boards found in {path}", ERROR_INVALID_ARGS)

    with open_session() as session:
        if replace and session.state.boards and not yes:
            confirm = typer.confirm(
                f"Replace {len(session.state.boards)} existing board(s) with {len(boards)}?"
            )
            if not confirm:
                format_info("Cancelled")
                raise typer.Exit(0)
        session.dispatch(ImportBoards(boards=boards, replace_all=replace))
    format_success(f"Imported {len(boards)} board(s) from {path}")
