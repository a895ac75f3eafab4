"""Task filter commands."""

import typer

from taskflow.models.actions import ClearTaskFilter, SetTaskFilter
from taskflow.models.core import TaskFilter
from taskflow.utils.exit_codes import ERROR_INVALID_ARGS
from taskflow.utils.task_filter import get_filtered_task_count, is_filter_active
from taskflow.utils.typer_helpers import SuggestingGroup
from taskflow.utils.ui.formatters import format_info, format_success, format_warning

from .decorators import AppError, command_wrapper
from .options import PRIORITIES
from .session import open_session

app = typer.Typer(cls=SuggestingGroup, help="Filter the tasks shown by 'board show'")

FILTER_TYPES = (
    "all",
    "due-today",
    "overdue",
    "due-within-3-days",
    "label",
    "has-labels",
    "priority",
)


@app.command("set")
@command_wrapper
def set_filter(
    filter_type: str = typer.Argument(..., help=f"One of: {', '.join(FILTER_TYPES)}"),
    labels: list[str] | None = typer.Option(
        None, "--label", "-l", help="Label name for the 'label' filter (repeatable)"
    ),
    priorities: list[str] | None = typer.Option(
        None, "--priority", "-p", help="Priority for the 'priority' filter (repeatable)"
    ),
) -> None:
    """Set the task filter."""
    if filter_type not in FILTER_TYPES:
        raise AppError(
            f"Unknown filter '{filter_type}'. Use one of: {', '.join(FILTER_TYPES)}",
            ERROR_INVALID_ARGS,
        )
    selected_priorities = [p.lower() for p in priorities or []]
    invalid = [p for p in selected_priorities if p not in PRIORITIES]
    if invalid:
        raise AppError(f"Unknown priority: {', '.join(invalid)}", ERROR_INVALID_ARGS)

    task_filter = TaskFilter(
        type=filter_type,
        selected_label_names=list(labels or []),
        selected_priorities=selected_priorities,
    )
    with open_session() as session:
        state = session.dispatch(SetTaskFilter(task_filter=task_filter))
    if not is_filter_active(task_filter):
        format_warning(f"Filter '{filter_type}' has no selections and shows every task")

    format_success(f"Filter set: {filter_type}")
    if state.current_board is not None:
        count = get_filtered_task_count(state.current_board.all_tasks(), task_filter)
        format_info(f"{count} task(s) match on {state.current_board.title}")


@app.command("clear")
@command_wrapper
def clear_filter() -> None:
    """Show all tasks again."""
    with open_session() as session:
        session.dispatch(ClearTaskFilter())
    format_success("Filter cleared")
