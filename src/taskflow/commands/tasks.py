"""Task management commands (current board)."""

import typer

from taskflow.models.actions import AddTask, DeleteTask, MoveTask, MoveTaskToBoard, UpdateTask
from taskflow.models.core import TaskUpdate
from taskflow.services.config_service import get_config_service
from taskflow.utils.exit_codes import ERROR_INVALID_ARGS
from taskflow.utils.typer_helpers import SuggestingGroup
from taskflow.utils.ui.formatters import (
    format_info,
    format_output,
    format_success,
    format_task_detail,
)
from taskflow.utils.uuid_utils import shorten_uuid

from .decorators import AppError, command_wrapper
from .options import parse_due_date, parse_priority
from .session import open_session

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")


@app.command("add")
@command_wrapper
def add_task(
    title: str = typer.Argument(..., help="Task title"),
    column: str | None = typer.Option(
        None, "--column", "-c", help="Column (default: first column)"
    ),
    description: str = typer.Option("", "--description", "-d", help="Task description"),
    due: str | None = typer.Option(
        None, "--due", help="Due date: YYYY-MM-DD, ISO datetime, today, tomorrow, +Nd",
        callback=parse_due_date,
    ),
    priority: str | None = typer.Option(
        "medium", "--priority", "-p", help="critical, high, medium, low or none",
        callback=parse_priority,
    ),
    labels: list[str] | None = typer.Option(None, "--label", "-l", help="Label name (repeatable)"),
) -> None:
    """Add a task to the current board."""
    with open_session() as session:
        board = session.current_board()
        if column:
            target = session.find_column(board, column)
        elif board.columns:
            target = board.columns[0]
        else:
            raise AppError("The current board has no columns", ERROR_INVALID_ARGS)

        selected = [session.find_label(board, name) for name in labels or []]
        before = {task.id for task in board.all_tasks()}
        state = session.dispatch(
            AddTask(
                column_id=target.id,
                title=title,
                description=description,
                due_date=due,
                priority=priority,
                labels=selected,
            )
        )
    created = next(t for t in state.current_board.all_tasks() if t.id not in before)
    format_success(f"Task added to {target.title}: {title} ({shorten_uuid(created.id)})")


@app.command("show")
@command_wrapper
def show_task(
    task: str = typer.Argument(..., help="Task ID, ID prefix or title"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format: pretty, json, yaml"),
) -> None:
    """Show task details."""
    with open_session(save=False) as session:
        column, found = session.find_task(session.current_board(), task)
    if not format_output(found.model_dump(mode="json", by_alias=True), output):
        format_task_detail(found, column.title, get_config_service().config.output.date_format)


@app.command("edit")
@command_wrapper
def edit_task(
    task: str = typer.Argument(..., help="Task ID, ID prefix or title"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    description: str | None = typer.Option(None, "--description", "-d", help="New description"),
    due: str | None = typer.Option(None, "--due", help="New due date", callback=parse_due_date),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
    priority: str | None = typer.Option(
        None, "--priority", "-p", help="critical, high, medium, low", callback=parse_priority
    ),
    labels: list[str] | None = typer.Option(
        None, "--label", "-l", help="Replace labels (repeatable)"
    ),
    clear_labels: bool = typer.Option(False, "--clear-labels", help="Remove all labels"),
) -> None:
    """Edit a task. Only the given fields change."""
    fields = {}
    if title is not None:
        fields["title"] = title
    if description is not None:
        fields["description"] = description
    if clear_due:
        fields["due_date"] = None
    elif due is not None:
        fields["due_date"] = due
    if priority is not None:
        fields["priority"] = priority

    with open_session() as session:
        board = session.current_board()
        _, found = session.find_task(board, task)
        if clear_labels:
            fields["labels"] = []
        elif labels:
            fields["labels"] = [session.find_label(board, name) for name in labels]
        if not fields:
            raise AppError("No updates specified", ERROR_INVALID_ARGS)
        session.dispatch(UpdateTask(task_id=found.id, updates=TaskUpdate(**fields)))
    format_success(f"Task updated: {found.title}")


@app.command("move")
@command_wrapper
def move_task(
    task: str = typer.Argument(..., help="Task ID, ID prefix or title"),
    column: str = typer.Argument(..., help="Target column"),
    position: int | None = typer.Option(
        None, "--position", help="Position in the target column, starting at 1 (default: last)"
    ),
) -> None:
    """Move a task to another column or position.

    Moving into the last column completes the task; moving out reopens it.
    """
    if position is not None and position < 1:
        raise AppError("Position starts at 1", ERROR_INVALID_ARGS)
    with open_session() as session:
        board = session.current_board()
        source, found = session.find_task(board, task)
        target = session.find_column(board, column)
        index = position - 1 if position is not None else len(target.tasks)
        state = session.dispatch(
            MoveTask(
                task_id=found.id,
                source_column_id=source.id,
                target_column_id=target.id,
                target_index=index,
            )
        )
    _, moved = state.current_board.find_task(found.id)
    format_success(f"Task moved: {found.title} -> {target.title}")
    if moved.completed_at is not None and found.completed_at is None:
        format_info("Task completed")
    elif moved.completed_at is None and found.completed_at is not None:
        format_info("Task reopened")


@app.command("transfer")
@command_wrapper
def transfer_task(
    task: str = typer.Argument(..., help="Task ID, ID prefix or title"),
    board: str = typer.Argument(..., help="Target board"),
    column: str | None = typer.Option(
        None, "--column", "-c", help="Target column (default: first column)"
    ),
) -> None:
    """Move a task to another board."""
    with open_session() as session:
        source_board = session.current_board()
        source_column, found = session.find_task(source_board, task)
        target_board = session.find_board(board)
        if target_board.id == source_board.id:
            raise AppError("Task is already on that board; use 'taskflow task move'", ERROR_INVALID_ARGS)
        if column:
            target_column_id = session.find_column(target_board, column).id
        elif target_board.columns:
            target_column_id = None
        else:
            raise AppError(f"Board '{target_board.title}' has no columns", ERROR_INVALID_ARGS)
        session.dispatch(
            MoveTaskToBoard(
                task_id=found.id,
                source_board_id=source_board.id,
                source_column_id=source_column.id,
                target_board_id=target_board.id,
                target_column_id=target_column_id,
            )
        )
    format_success(f"Task transferred: {found.title} -> {target_board.title}")


@app.command("delete")
@command_wrapper
def delete_task(
    task: str = typer.Argument(..., help="Task ID, ID prefix or title"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    with open_session() as session:
        _, found = session.find_task(session.current_board(), task)
        if not yes:
            confirm = typer.confirm(f"Delete task '{found.title}'?")
            if not confirm:
                format_info("Cancelled")
                raise typer.Exit(0)
        session.dispatch(DeleteTask(task_id=found.id))
    format_success(f"Task deleted: {found.title}")
