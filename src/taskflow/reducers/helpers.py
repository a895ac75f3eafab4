"""Helpers shared by the category reducers.

Every helper returns new objects; nothing here mutates its arguments.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from taskflow.models.core import Board, Column, KanbanState, Task, utc_now

logger = logging.getLogger(__name__)


def changes(updates: BaseModel) -> dict[str, Any]:
    """Fields explicitly set on a partial-update model.

    ``model_dump`` is avoided on purpose: it would turn nested models into
    dicts, and ``model_copy(update=...)`` does not re-validate.
    """
    return {name: getattr(updates, name) for name in updates.model_fields_set}


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))


def touch(board: Board, **fields: Any) -> Board:
    """Copy ``board`` with ``fields`` replaced and a fresh ``updated_at``."""
    return board.model_copy(update={**fields, "updated_at": utc_now()})


def commit_board(state: KanbanState, board: Board) -> KanbanState:
    """Put ``board`` in place of the board with the same id.

    ``boards`` and ``current_board`` are refreshed together so the current
    board stays the same object as its entry in the list.
    """
    boards = [board if existing.id == board.id else existing for existing in state.boards]
    current = state.current_board
    if current is not None and current.id == board.id:
        current = board
    return state.model_copy(update={"boards": boards, "current_board": current})


def require_current_board(state: KanbanState, action_type: str) -> Board | None:
    """Return the current board, logging a warning when there is none."""
    board = state.current_board
    if board is None:
        logger.warning("%s: no current board", action_type)
    return board


def resolve_board(
    state: KanbanState, board_id: str | None, action_type: str
) -> Board | None:
    """Board addressed by ``board_id``, or the current board when it is None."""
    if board_id is None:
        return require_current_board(state, action_type)
    return state.get_board(board_id)


def replace_column(board: Board, column: Column, new_column: Column) -> list[Column]:
    return [new_column if existing is column else existing for existing in board.columns]


def map_task(board: Board, task_id: str, fn: Callable[[Task], Task]) -> Board | None:
    """Apply ``fn`` to one task and return the touched board.

    Returns:
        The new board, or None when no column holds ``task_id``
    """
    location = board.find_task(task_id)
    if location is None:
        return None
    column, _ = location
    new_column = column.model_copy(
        update={"tasks": [fn(task) if task.id == task_id else task for task in column.tasks]}
    )
    return touch(board, columns=replace_column(board, column, new_column))
