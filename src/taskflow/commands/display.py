"""Commands 'sort' and 'view' of taskflow: how 'board show' lays out tasks."""

import typer

from taskflow.models.actions import SetSortOption, SetViewMode
from taskflow.utils.exit_codes import ERROR_INVALID_ARGS
from taskflow.utils.ui.formatters import format_success

from .decorators import AppError, command_wrapper
from .session import open_session

SORT_OPTIONS = ("manual", "title", "created_at", "updated_at", "due_date", "priority")
VIEW_MODES = ("kanban", "table", "calendar")


@command_wrapper
def sort(
    option: str = typer.Argument(..., help=f"One of: {', '.join(SORT_OPTIONS)}"),
) -> None:
    """Set how tasks are ordered within each column by 'board show'."""
    option = option.replace("-", "_").lower()
    if option not in SORT_OPTIONS:
        raise AppError(
            f"Unknown sort option. Use one of: {', '.join(SORT_OPTIONS)}", ERROR_INVALID_ARGS
        )
    with open_session() as session:
        session.dispatch(SetSortOption(sort_option=option))
    format_success(f"Sorting by {option}")


@command_wrapper
def view(
    mode: str = typer.Argument(..., help=f"One of: {', '.join(VIEW_MODES)}"),
) -> None:
    """Set the layout used by 'board show'."""
    mode = mode.lower()
    if mode not in VIEW_MODES:
        raise AppError(f"Unknown view. Use one of: {', '.join(VIEW_MODES)}", ERROR_INVALID_ARGS)
    with open_session() as session:
        session.dispatch(SetViewMode(view_mode=mode))
    format_success(f"View set to {mode}")
