"""Subtask (checklist) commands."""

import typer

from taskflow.models.actions import AddSubTask, DeleteSubTask, UpdateSubTask
from taskflow.models.core import SubTask, SubTaskUpdate
from taskflow.utils.typer_helpers import SuggestingGroup
from taskflow.utils.ui.formatters import format_success

from .decorators import command_wrapper
from .session import open_session

app = typer.Typer(cls=SuggestingGroup, help="Subtask commands")


@app.command("add")
@command_wrapper
def add_sub_task(
    task: str = typer.Argument(..., help="Task ID, ID prefix or title"),
    title: str = typer.Argument(..., help="Subtask title"),
) -> None:
    """Add a checklist item to a task."""
    with open_session() as session:
        _, found = session.find_task(session.current_board(), task)
        session.dispatch(AddSubTask(task_id=found.id, sub_task=SubTask(title=title)))
    format_success(f"Subtask added to {found.title}: {title}")


@app.command("toggle")
@command_wrapper
def toggle_sub_task(
    task: str = typer.Argument(..., help="Task ID, ID prefix or title"),
    sub_task: str = typer.Argument(..., help="Subtask ID, ID prefix or title"),
) -> None:
    """Check or uncheck a checklist item."""
    with open_session() as session:
        _, found = session.find_task(session.current_board(), task)
        item = session.find_sub_task(found, sub_task)
        session.dispatch(
            UpdateSubTask(
                task_id=found.id,
                sub_task_id=item.id,
                updates=SubTaskUpdate(completed=not item.completed),
            )
        )
    state = "unchecked" if item.completed else "checked"
    format_success(f"Subtask {state}: {item.title}")


@app.command("delete")
@command_wrapper
def delete_sub_task(
    task: str = typer.Argument(..., help="Task ID, ID prefix or title"),
    sub_task: str = typer.Argument(..., help="Subtask ID, ID prefix or title"),
) -> None:
    """Remove a checklist item."""
    with open_session() as session:
        _, found = session.find_task(session.current_board(), task)
        item = session.find_sub_task(found, sub_task)
        session.dispatch(DeleteSubTask(task_id=found.id, sub_task_id=item.id))
    format_success(f"Subtask deleted: {item.title}")
