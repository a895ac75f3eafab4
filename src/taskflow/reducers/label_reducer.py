"""Board labels and their by-value copies embedded in tasks."""

from __future__ import annotations

from taskflow.models.actions import (
    AddLabel,
    DeleteLabel,
    DeleteLabelFromAllBoards,
    LabelAction,
    UpdateLabel,
)
from taskflow.models.core import Board, KanbanState, Label, Task

from .helpers import changes, commit_board, require_current_board, touch


def handle_label_actions(state: KanbanState, action: LabelAction) -> KanbanState:
    if isinstance(action, DeleteLabelFromAllBoards):
        return delete_label_from_all_boards(state, action.label_id)

    board = require_current_board(state, action.type)
    if board is None:
        return state

    match action:
        case AddLabel(label=label):
            return commit_board(state, touch(board, labels=[*board.labels, label]))

        case UpdateLabel(label_id=label_id, updates=updates):
            if not any(label.id == label_id for label in board.labels):
                return state
            fields = changes(updates)
            renamed = _map_labels(
                board, label_id, lambda label: label.model_copy(update=fields)
            )
            return commit_board(state, renamed)

        case DeleteLabel(label_id=label_id):
            if not any(label.id == label_id for label in board.labels):
                return state
            return commit_board(state, strip_label(board, label_id))

        case _:
            return state


def strip_label(board: Board, label_id: str) -> Board:
    """Remove a label from the board and from every task on it."""
    return _map_labels(board, label_id, lambda _: None)


def board_references_label(board: Board, label_id: str) -> bool:
    if any(label.id == label_id for label in board.labels):
        return True
    return any(label.id == label_id for task in board.all_tasks() for label in task.labels)


def delete_label_from_all_boards(state: KanbanState, label_id: str) -> KanbanState:
    """Cascade delete across every board.

    ``current_board`` is re-resolved by id from the new list, so this works
    whether or not a board is selected.
    """
    if not any(board_references_label(board, label_id) for board in state.boards):
        return state

    boards = [
        strip_label(board, label_id) if board_references_label(board, label_id) else board
        for board in state.boards
    ]
    current = None
    if state.current_board is not None:
        current = next((b for b in boards if b.id == state.current_board.id), None)
    return state.model_copy(update={"boards": boards, "current_board": current})


def _map_labels(board: Board, label_id: str, fn) -> Board:
    """Apply ``fn`` to the board label and each embedded copy; None drops it."""

    def apply(labels: list[Label]) -> list[Label]:
        result = []
        for label in labels:
            if label.id != label_id:
                result.append(label)
                continue
            mapped = fn(label)
            if mapped is not None:
                result.append(mapped)
        return result

    def apply_task(task: Task) -> Task:
        if not any(label.id == label_id for label in task.labels):
            return task
        return task.model_copy(update={"labels": apply(task.labels)})

    columns = [
        column.model_copy(update={"tasks": [apply_task(task) for task in column.tasks]})
        for column in board.columns
    ]
    return touch(board, labels=apply(board.labels), columns=columns)
