"""Task creation, editing, deletion and movement.

This is the only place that moves tasks between columns, and therefore the
only place that touches ``completed_at``: a task is complete exactly while
it sits in its board's last column.
"""

from __future__ import annotations

import logging

from taskflow.models.actions import (
    AddTask,
    DeleteTask,
    MoveTask,
    MoveTaskToBoard,
    TaskAction,
    UpdateTask,
)
from taskflow.models.core import Board, Column, KanbanState, Task, new_id, utc_now

from .helpers import (
    changes,
    clamp,
    commit_board,
    map_task,
    replace_column,
    require_current_board,
    resolve_board,
    touch,
)

logger = logging.getLogger(__name__)


def handle_task_actions(state: KanbanState, action: TaskAction) -> KanbanState:
    match action:
        case AddTask():
            return add_task(state, action)

        case UpdateTask(task_id=task_id, updates=updates, board_id=board_id):
            board = resolve_board(state, board_id, action.type)
            if board is None:
                return state
            fields = changes(updates)
            now = utc_now()
            new_board = map_task(
                board, task_id, lambda task: task.model_copy(update={**fields, "updated_at": now})
            )
            if new_board is None:
                return state
            return commit_board(state, new_board)

        case DeleteTask(task_id=task_id, board_id=board_id):
            board = resolve_board(state, board_id, action.type)
            if board is None:
                return state
            location = board.find_task(task_id)
            if location is None:
                return state
            column, _ = location
            return commit_board(state, _without_task(board, column, task_id))

        case MoveTask():
            return move_task(state, action)

        case MoveTaskToBoard():
            return move_task_to_board(state, action)

        case _:
            return state


def build_task(action: AddTask) -> Task:
    """Fresh task from an ADD_TASK payload."""
    now = utc_now()
    return Task(
        id=new_id(),
        title=action.title,
        description=action.description or "",
        priority=action.priority,
        labels=list(action.labels),
        sub_tasks=[],
        due_date=action.due_date,
        completed_at=None,
        created_at=now,
        updated_at=now,
        attachments=list(action.files),
    )


def add_task(state: KanbanState, action: AddTask) -> KanbanState:
    board = resolve_board(state, action.board_id, action.type)
    if board is None:
        return state
    column = board.get_column(action.column_id)
    if column is None:
        return state

    if action.task is not None:
        # Re-delivered remote creations must not duplicate the task.
        if board.find_task(action.task.id) is not None:
            logger.debug("ADD_TASK: task %s already on board %s", action.task.id, board.id)
            return state
        task = action.task
    else:
        task = build_task(action)

    new_column = column.model_copy(update={"tasks": [*column.tasks, task]})
    return commit_board(state, touch(board, columns=replace_column(board, column, new_column)))


def derive_completion(task: Task, from_terminal: bool, to_terminal: bool) -> Task:
    """Apply the terminal-column rule to a task crossing columns.

    Only crossing the terminal boundary changes ``completed_at``; moves that
    stay on one side of it return the task untouched.
    """
    if to_terminal and not from_terminal:
        now = utc_now()
        return task.model_copy(update={"completed_at": now, "updated_at": now})
    if from_terminal and not to_terminal:
        return task.model_copy(update={"completed_at": None, "updated_at": utc_now()})
    return task


def move_task(state: KanbanState, action: MoveTask) -> KanbanState:
    board = require_current_board(state, action.type)
    if board is None:
        return state

    source = board.get_column(action.source_column_id)
    index = _task_index(source, action.task_id) if source is not None else None
    if source is None or index is None:
        logger.debug("MOVE_TASK: task %s not in column %s", action.task_id, action.source_column_id)
        return state
    target = board.get_column(action.target_column_id)
    if target is None:
        logger.debug("MOVE_TASK: target column %s not found", action.target_column_id)
        return state

    terminal_id = board.terminal_column_id
    moved = derive_completion(
        source.tasks[index],
        from_terminal=source.id == terminal_id,
        to_terminal=target.id == terminal_id,
    )

    source_tasks = list(source.tasks)
    source_tasks.pop(index)

    if source is target:
        source_tasks.insert(clamp(action.target_index, 0, len(source_tasks)), moved)
        columns = replace_column(board, source, source.model_copy(update={"tasks": source_tasks}))
    else:
        target_tasks = list(target.tasks)
        target_tasks.insert(clamp(action.target_index, 0, len(target_tasks)), moved)
        new_source = source.model_copy(update={"tasks": source_tasks})
        new_target = target.model_copy(update={"tasks": target_tasks})
        columns = [
            new_source if column is source else new_target if column is target else column
            for column in board.columns
        ]

    logger.debug(
        "MOVE_TASK: %s %s -> %s @%d", action.task_id, source.id, target.id, action.target_index
    )
    return commit_board(state, touch(board, columns=columns))


def move_task_to_board(state: KanbanState, action: MoveTaskToBoard) -> KanbanState:
    """Move a task to another board.

    The target column defaults to the target board's first column. The
    completion rule is re-applied against the target board: a completed task
    landing outside its terminal column is reopened along with its subtasks.
    """
    source_board = state.get_board(action.source_board_id)
    target_board = state.get_board(action.target_board_id)
    if source_board is None or target_board is None or source_board.id == target_board.id:
        return state

    source_column = source_board.get_column(action.source_column_id)
    index = _task_index(source_column, action.task_id) if source_column is not None else None
    if source_column is None or index is None:
        return state

    if action.target_column_id is not None:
        target_column = target_board.get_column(action.target_column_id)
    else:
        target_column = target_board.columns[0] if target_board.columns else None
    if target_column is None:
        return state

    task = source_column.tasks[index]
    if target_column.id == target_board.terminal_column_id:
        moved = derive_completion(task, from_terminal=task.completed_at is not None, to_terminal=True)
    elif task.completed_at is not None:
        moved = task.model_copy(
            update={
                "completed_at": None,
                "sub_tasks": [s.model_copy(update={"completed": False}) for s in task.sub_tasks],
                "updated_at": utc_now(),
            }
        )
    else:
        moved = task

    new_source = _without_task(source_board, source_column, task.id)
    new_target = touch(
        target_board,
        columns=replace_column(
            target_board,
            target_column,
            target_column.model_copy(update={"tasks": [*target_column.tasks, moved]}),
        ),
    )
    return commit_board(commit_board(state, new_source), new_target)


def _task_index(column: Column, task_id: str) -> int | None:
    for index, task in enumerate(column.tasks):
        if task.id == task_id:
            return index
    return None


def _without_task(board: Board, column: Column, task_id: str) -> Board:
    new_column = column.model_copy(
        update={"tasks": [task for task in column.tasks if task.id != task_id]}
    )
    return touch(board, columns=replace_column(board, column, new_column))
