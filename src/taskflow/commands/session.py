"""Per-command access to the saved boards.

A command opens a session, dispatches actions through the session's store
and the snapshot is written back when the block exits without error.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from taskflow.models.actions import KanbanAction
from taskflow.models.core import Board, Column, KanbanState, Label, SubTask, Task
from taskflow.services.config_service import get_config_service
from taskflow.services.kanban_store import KanbanStore
from taskflow.services.snapshot_service import SnapshotError, SnapshotService
from taskflow.utils.exit_codes import ERROR_GENERAL, ERROR_NOT_FOUND
from taskflow.utils.uuid_utils import resolve_id

from .decorators import AppError


class BoardSession:
    """A store loaded from the snapshot file, plus id lookups for commands."""

    def __init__(self, snapshot: SnapshotService):
        self.snapshot = snapshot
        try:
            state = snapshot.load()
        except SnapshotError as e:
            raise AppError(str(e), ERROR_GENERAL) from e
        self.store = KanbanStore(state)

    @property
    def state(self) -> KanbanState:
        return self.store.state

    def dispatch(self, action: KanbanAction) -> KanbanState:
        return self.store.dispatch(action)

    def save(self) -> None:
        self.snapshot.save(self.store.state)

    def current_board(self) -> Board:
        board = self.state.current_board
        if board is None:
            raise AppError(
                "No board selected. Create one with 'taskflow board create' "
                "or pick one with 'taskflow board use'.",
                ERROR_NOT_FOUND,
            )
        return board

    def find_board(self, query: str) -> Board:
        return _resolve(query, self.state.boards, "board", lambda b: b.id, lambda b: b.title)

    def find_column(self, board: Board, query: str) -> Column:
        return _resolve(query, board.columns, "column", lambda c: c.id, lambda c: c.title)

    def find_task(self, board: Board, query: str) -> tuple[Column, Task]:
        pairs = [(column, task) for column in board.columns for task in column.tasks]
        return _resolve(query, pairs, "task", lambda p: p[1].id, lambda p: p[1].title)

    def find_label(self, board: Board, query: str) -> Label:
        return _resolve(query, board.labels, "label", lambda lbl: lbl.id, lambda lbl: lbl.name)

    def find_sub_task(self, task: Task, query: str) -> SubTask:
        return _resolve(query, task.sub_tasks, "subtask", lambda s: s.id, lambda s: s.title)


def _resolve(query, items, kind, get_id, get_name):
    try:
        return resolve_id(query, items, kind=kind, get_id=get_id, get_name=get_name)
    except ValueError as e:
        raise AppError(str(e), ERROR_NOT_FOUND) from e


@contextmanager
def open_session(save: bool = True) -> Iterator[BoardSession]:
    """Load the configured snapshot; save it again if the block succeeds."""
    snapshot = SnapshotService(get_config_service().snapshot_path)
    session = BoardSession(snapshot)
    yield session
    if save:
        session.save()
