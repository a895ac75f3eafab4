"""Board lifecycle: create, list, switch, update, delete, import, reorder.

Exactly one board is "current" whenever at least one board exists and a
selection has been made; an unknown board id selects nothing.
"""

from __future__ import annotations

import logging

from taskflow.models.actions import (
    BoardAction,
    CreateBoard,
    DeleteBoard,
    ImportBoards,
    ReorderBoards,
    SetBoards,
    SwitchBoard,
    UpdateBoard,
)
from taskflow.models.core import (
    DEFAULT_COLUMN_TITLES,
    Board,
    Column,
    KanbanState,
    new_id,
    utc_now,
)

from .helpers import changes, commit_board, touch

logger = logging.getLogger(__name__)


def create_default_board(title: str) -> Board:
    """New board seeded with the "To Do" / "In Progress" / "Done" columns."""
    now = utc_now()
    return Board(
        id=new_id(),
        title=title,
        columns=[Column(id=new_id(), title=column_title) for column_title in DEFAULT_COLUMN_TITLES],
        labels=[],
        created_at=now,
        updated_at=now,
    )


def handle_board_actions(state: KanbanState, action: BoardAction) -> KanbanState:
    match action:
        case SetBoards(boards=boards):
            return state.model_copy(
                update={
                    "boards": list(boards),
                    "current_board": boards[0] if boards else None,
                }
            )

        case CreateBoard(title=title):
            board = create_default_board(title)
            logger.debug("CREATE_BOARD: %s (%s)", title, board.id)
            return state.model_copy(
                update={"boards": [*state.boards, board], "current_board": board}
            )

        case SwitchBoard(board_id=board_id):
            return state.model_copy(update={"current_board": state.get_board(board_id)})

        case UpdateBoard(board_id=board_id, updates=updates):
            board = state.get_board(board_id)
            if board is None:
                return state
            return commit_board(state, touch(board, **changes(updates)))

        case DeleteBoard(board_id=board_id):
            if state.get_board(board_id) is None:
                return state
            boards = [board for board in state.boards if board.id != board_id]
            current = state.current_board
            if current is not None and current.id == board_id:
                current = boards[0] if boards else None
            return state.model_copy(update={"boards": boards, "current_board": current})

        case ImportBoards(boards=imported, replace_all=replace_all):
            return _import_boards(state, imported, replace_all)

        case ReorderBoards(board_ids=board_ids):
            return _reorder_boards(state, board_ids)

        case _:
            return state


def _import_boards(state: KanbanState, imported: list[Board], replace_all: bool) -> KanbanState:
    if replace_all:
        boards = list(imported)
    else:
        existing_ids = {board.id for board in state.boards}
        renamed = [
            board.model_copy(update={"id": new_id(), "updated_at": utc_now()})
            if board.id in existing_ids
            else board
            for board in imported
        ]
        boards = [*state.boards, *renamed]
    logger.info("IMPORT_BOARDS: %d board(s), replace_all=%s", len(imported), replace_all)
    return state.model_copy(
        update={"boards": boards, "current_board": boards[0] if boards else None}
    )


def _reorder_boards(state: KanbanState, board_ids: list[str]) -> KanbanState:
    by_id = {board.id: board for board in state.boards}
    ordered = []
    for board_id in board_ids:
        board = by_id.pop(board_id, None)
        if board is not None:
            ordered.append(board)
    remaining = [board for board in state.boards if board.id in by_id]
    return state.model_copy(update={"boards": ordered + remaining})
