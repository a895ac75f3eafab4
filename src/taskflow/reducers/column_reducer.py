"""Column management on the current board."""

from __future__ import annotations

from taskflow.models.actions import (
    AddColumn,
    ColumnAction,
    DeleteColumn,
    ReorderColumns,
    UpdateColumn,
)
from taskflow.models.core import Column, KanbanState, new_id

from .helpers import changes, clamp, commit_board, require_current_board, touch


def handle_column_actions(state: KanbanState, action: ColumnAction) -> KanbanState:
    board = require_current_board(state, action.type)
    if board is None:
        return state

    match action:
        case AddColumn(title=title, color=color):
            column = Column(id=new_id(), title=title, tasks=[], color=color)
            return commit_board(state, touch(board, columns=[*board.columns, column]))

        case UpdateColumn(column_id=column_id, updates=updates):
            column = board.get_column(column_id)
            if column is None:
                return state
            new_column = column.model_copy(update=changes(updates))
            columns = [new_column if c is column else c for c in board.columns]
            return commit_board(state, touch(board, columns=columns))

        case DeleteColumn(column_id=column_id):
            if board.get_column(column_id) is None:
                return state
            # The column's tasks go with it.
            columns = [c for c in board.columns if c.id != column_id]
            return commit_board(state, touch(board, columns=columns))

        case ReorderColumns(source_index=source_index, target_index=target_index):
            if not 0 <= source_index < len(board.columns):
                return state
            columns = list(board.columns)
            moved = columns.pop(source_index)
            columns.insert(clamp(target_index, 0, len(columns)), moved)
            return commit_board(state, touch(board, columns=columns))

        case _:
            return state
