"""Kanban state transitions.

``kanban_reducer`` is the single entry point: it routes an action to the
handler for its category and returns the next snapshot. It never raises;
anything it cannot apply leaves the state as it was.
"""

from __future__ import annotations

import logging

from taskflow.models.actions import (
    BOARD_ACTIONS,
    COLUMN_ACTIONS,
    LABEL_ACTIONS,
    OTHER_ACTIONS,
    TASK_ACTIONS,
    AddSubTask,
    ClearTaskFilter,
    DeleteSubTask,
    KanbanAction,
    OtherAction,
    SetSortOption,
    SetTaskFilter,
    SetViewMode,
    UpdateSubTask,
)
from taskflow.models.core import KanbanState, TaskFilter, utc_now

from .board_reducer import create_default_board, handle_board_actions
from .column_reducer import handle_column_actions
from .helpers import changes, commit_board, map_task, require_current_board
from .label_reducer import handle_label_actions
from .task_reducer import handle_task_actions

logger = logging.getLogger(__name__)


def kanban_reducer(state: KanbanState, action: KanbanAction) -> KanbanState:
    action_type = getattr(action, "type", type(action).__name__)
    logger.debug("dispatch %s", action_type)

    if isinstance(action, BOARD_ACTIONS):
        return handle_board_actions(state, action)
    if isinstance(action, COLUMN_ACTIONS):
        return handle_column_actions(state, action)
    if isinstance(action, TASK_ACTIONS):
        return handle_task_actions(state, action)
    if isinstance(action, LABEL_ACTIONS):
        return handle_label_actions(state, action)
    if isinstance(action, OTHER_ACTIONS):
        return handle_other_actions(state, action)

    logger.warning("Unknown action type: %s", action_type)
    return state


def handle_other_actions(state: KanbanState, action: OtherAction) -> KanbanState:
    """Subtasks on the current board, plus sort, filter and view settings."""
    match action:
        case SetSortOption(sort_option=sort_option):
            return state.model_copy(update={"sort_option": sort_option})
        case SetTaskFilter(task_filter=task_filter):
            return state.model_copy(update={"task_filter": task_filter})
        case ClearTaskFilter():
            return state.model_copy(update={"task_filter": TaskFilter()})
        case SetViewMode(view_mode=view_mode):
            return state.model_copy(update={"view_mode": view_mode})

    board = require_current_board(state, action.type)
    if board is None:
        return state
    now = utc_now()

    match action:
        case AddSubTask(task_id=task_id, sub_task=sub_task):
            new_board = map_task(
                board,
                task_id,
                lambda task: task.model_copy(
                    update={"sub_tasks": [*task.sub_tasks, sub_task], "updated_at": now}
                ),
            )

        case UpdateSubTask(task_id=task_id, sub_task_id=sub_task_id, updates=updates):
            location = board.find_task(task_id)
            if location is None or not any(s.id == sub_task_id for s in location[1].sub_tasks):
                return state
            fields = changes(updates)
            new_board = map_task(
                board,
                task_id,
                lambda task: task.model_copy(
                    update={
                        "sub_tasks": [
                            s.model_copy(update=fields) if s.id == sub_task_id else s
                            for s in task.sub_tasks
                        ],
                        "updated_at": now,
                    }
                ),
            )

        case DeleteSubTask(task_id=task_id, sub_task_id=sub_task_id):
            location = board.find_task(task_id)
            if location is None or not any(s.id == sub_task_id for s in location[1].sub_tasks):
                return state
            new_board = map_task(
                board,
                task_id,
                lambda task: task.model_copy(
                    update={
                        "sub_tasks": [s for s in task.sub_tasks if s.id != sub_task_id],
                        "updated_at": now,
                    }
                ),
            )

        case _:
            return state

    if new_board is None:
        return state
    return commit_board(state, new_board)


__all__ = [
    "create_default_board",
    "handle_board_actions",
    "handle_column_actions",
    "handle_label_actions",
    "handle_other_actions",
    "handle_task_actions",
    "kanban_reducer",
]
