"""Merge remote task events into the local store.

Three independent subscriptions (created, updated, deleted) are turned into
ordinary ADD_TASK / UPDATE_TASK / DELETE_TASK actions and dispatched through
the same store as local edits. There is no remote-only code path in the
reducers.

Each event is merged with one synchronous dispatch, so the three streams may
interleave but a single merge is never observed half-applied.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import ValidationError

from taskflow.models.actions import AddTask, DeleteTask, UpdateTask
from taskflow.models.core import Task, TaskUpdate

from .kanban_store import KanbanStore

logger = logging.getLogger(__name__)

EventKind = Literal["created", "updated", "deleted"]
EVENT_KINDS: tuple[EventKind, ...] = ("created", "updated", "deleted")

# Remote task keys that map onto TaskUpdate fields. completedAt is absent:
# completion follows the local column, never the remote copy.
_UPDATABLE_KEYS = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "labels": "labels",
    "subTasks": "sub_tasks",
    "sub_tasks": "sub_tasks",
    "dueDate": "due_date",
    "due_date": "due_date",
    "files": "attachments",
    "attachments": "attachments",
    "deletionState": "deletion_state",
    "deletion_state": "deletion_state",
}


class MalformedEventError(ValueError):
    """A remote event that cannot be expressed as a local action."""


@runtime_checkable
class EventSource(Protocol):
    """Transport for the three task event streams.

    ``open`` returns an async context manager that yields an async iterator
    of event dicts. ``board_id=None`` subscribes to every board.
    """

    def open(
        self, kind: EventKind, board_id: str | None = None
    ) -> AbstractAsyncContextManager[AsyncIterator[Mapping[str, Any]]]: ...


@dataclass
class SubscriptionStatus:
    """Connection status of one subscription."""

    kind: EventKind
    loading: bool = True
    error: Exception | None = None
    received: int = 0


def _board_id(event: Mapping[str, Any]) -> str | None:
    return event.get("boardId") or event.get("board_id") or None


def task_from_event(event: Mapping[str, Any]) -> Task:
    """Build a local Task from a camelCase remote task payload."""
    if not event.get("id"):
        raise MalformedEventError("task event has no id")

    data = {
        key: value
        for key, value in event.items()
        if key not in ("boardId", "board_id", "columnId", "column_id", "files")
    }
    if "files" in event and "attachments" not in event:
        data["attachments"] = event["files"] or []
    for key in ("labels", "subTasks", "attachments"):
        if data.get(key) is None:
            data.pop(key, None)
    if data.get("dueDate") is None:
        data.pop("dueDate", None)
    for key in ("createdAt", "updatedAt"):
        if not data.get(key):
            data.pop(key, None)

    try:
        return Task.model_validate(data)
    except ValidationError as e:
        raise MalformedEventError(f"invalid task {event.get('id')}: {e}") from e


def created_event_to_action(event: Mapping[str, Any]) -> AddTask:
    """Adapt a task-created event to ADD_TASK carrying the remote task."""
    column_id = event.get("columnId") or event.get("column_id")
    if not column_id:
        raise MalformedEventError(f"created event for {event.get('id')} has no columnId")
    task = task_from_event(event)
    return AddTask(column_id=column_id, title=task.title, task=task, board_id=_board_id(event))


def updated_event_to_action(event: Mapping[str, Any]) -> UpdateTask:
    """Adapt a task-updated event to UPDATE_TASK.

    Only keys present in the event are applied, so a sparse event leaves the
    other local fields alone.
    """
    task_id = event.get("id")
    if not task_id:
        raise MalformedEventError("updated event has no id")

    fields = {}
    for key, field in _UPDATABLE_KEYS.items():
        if key not in event or (field == "title" and not event[key]):
            continue
        if event[key] is None and field in ("labels", "sub_tasks", "attachments"):
            fields[field] = []
        else:
            fields[field] = event[key]
    try:
        updates = TaskUpdate.model_validate(fields)
    except ValidationError as e:
        raise MalformedEventError(f"invalid update for {task_id}: {e}") from e
    return UpdateTask(task_id=task_id, updates=updates, board_id=_board_id(event))


def deleted_event_to_action(event: Mapping[str, Any]) -> DeleteTask:
    task_id = event.get("id") or event.get("taskId")
    if not task_id:
        raise MalformedEventError("deleted event has no id")
    return DeleteTask(task_id=task_id, board_id=_board_id(event))


class RemoteEventMergeLayer:
    """Consume remote task events and dispatch them as local actions.

    Args:
        store: Store the adapted actions are dispatched to.
        source: Event transport implementing :class:`EventSource`.
        board_id: Board scope of the subscriptions; None for all boards.
        skip: Do not activate any subscription.
        on_task_created: Called with the Task after it has been merged.
        on_task_updated: Called with the local Task after the update was merged.
        on_task_deleted: Called with the task id after it has been removed.
    """

    def __init__(
        self,
        store: KanbanStore,
        source: EventSource,
        *,
        board_id: str | None = None,
        skip: bool = False,
        on_task_created: Callable[[Task], None] | None = None,
        on_task_updated: Callable[[Task], None] | None = None,
        on_task_deleted: Callable[[str], None] | None = None,
    ) -> None:
        self.store = store
        self.source = source
        self.board_id = board_id
        self.skip = skip
        self.on_task_created = on_task_created
        self.on_task_updated = on_task_updated
        self.on_task_deleted = on_task_deleted

        self.statuses: dict[EventKind, SubscriptionStatus] = {
            kind: SubscriptionStatus(kind=kind) for kind in EVENT_KINDS
        }
        self.error: Exception | None = None

    @property
    def loading(self) -> bool:
        return any(status.loading for status in self.statuses.values())

    @property
    def connected(self) -> bool:
        if self.skip:
            return False
        return not self.loading and all(
            status.error is None for status in self.statuses.values()
        )

    async def run(self) -> None:
        """Consume all three streams concurrently until they end or fail."""
        if self.skip:
            logger.info("Remote sync skipped")
            return

        logger.info("Subscribing to task events (board=%s)", self.board_id or "all")
        await asyncio.gather(*(self._consume(kind) for kind in EVENT_KINDS))

    async def _consume(self, kind: EventKind) -> None:
        status = self.statuses[kind]
        try:
            async with self.source.open(kind, self.board_id) as events:
                status.loading = False
                async for event in events:
                    status.received += 1
                    self.handle_event(kind, event)
            logger.info("Task %s subscription ended", kind)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Task %s subscription error: %s", kind, e)
            status.error = e
            if self.error is None:
                self.error = e
        finally:
            status.loading = False

    def handle_event(self, kind: EventKind, event: Mapping[str, Any]) -> bool:
        """Merge one event. Returns False when the event was malformed.

        Callbacks only fire when the merge changed the state, so a re-delivered
        creation or an update for an unknown task stays silent.
        """
        try:
            if kind == "created":
                action = created_event_to_action(event)
            elif kind == "updated":
                action = updated_event_to_action(event)
            else:
                action = deleted_event_to_action(event)
        except MalformedEventError as e:
            logger.warning("Skipping malformed %s event: %s", kind, e)
            return False

        previous = self.store.state
        if self.store.dispatch(action) is not previous:
            self._notify(kind, action)
        return True

    def _merged_task(self, action: UpdateTask) -> Task | None:
        state = self.store.state
        board = state.get_board(action.board_id) if action.board_id else state.current_board
        found = board.find_task(action.task_id) if board is not None else None
        return found[1] if found else None

    def _notify(self, kind: EventKind, action) -> None:
        try:
            if kind == "created" and self.on_task_created:
                self.on_task_created(action.task)
            elif kind == "updated" and self.on_task_updated:
                task = self._merged_task(action)
                if task is not None:
                    self.on_task_updated(task)
            elif kind == "deleted" and self.on_task_deleted:
                self.on_task_deleted(action.task_id)
        except Exception:
            logger.exception("Task %s callback failed", kind)
