"""Unit tests for the remote event merge layer."""

import asyncio
from contextlib import asynccontextmanager

import pytest

from taskflow.models.actions import AddTask, DeleteTask, SwitchBoard, UpdateTask
from taskflow.services.kanban_store import KanbanStore
from taskflow.services.remote_sync import (
    EventSource,
    MalformedEventError,
    RemoteEventMergeLayer,
    created_event_to_action,
    deleted_event_to_action,
    updated_event_to_action,
)


class FakeEventSource:
    """In-memory event source: a list of events (or an exception) per kind."""

    def __init__(self, events=None, errors=None):
        self.events = events or {}
        self.errors = errors or {}
        self.opened = []

    @asynccontextmanager
    async def open(self, kind, board_id=None):
        self.opened.append((kind, board_id))
        if kind in self.errors:
            raise self.errors[kind]

        async def iterate():
            for event in self.events.get(kind, []):
                yield event
                await asyncio.sleep(0)

        yield iterate()


def _created(task_id="remote-1", column_id="board-1-doing", **fields):
    return {"id": task_id, "columnId": column_id, "title": "Remote task", **fields}


class TestEventAdapters:
    def test_created_event(self):
        action = created_event_to_action(
            _created(boardId="board-1", files=[{"name": "a.txt"}], subTasks=None, priority="HIGH")
        )

        assert isinstance(action, AddTask)
        assert action.column_id == "board-1-doing"
        assert action.board_id == "board-1"
        assert action.task.id == "remote-1"
        assert action.task.priority == "high"
        assert [a.name for a in action.task.attachments] == ["a.txt"]
        assert action.task.sub_tasks == []

    def test_created_event_requires_column(self):
        with pytest.raises(MalformedEventError):
            created_event_to_action({"id": "x", "title": "No column"})

    def test_created_event_requires_id(self):
        with pytest.raises(MalformedEventError):
            created_event_to_action({"columnId": "c", "title": "No id"})

    def test_updated_event_is_sparse(self):
        action = updated_event_to_action({"id": "task-1", "dueDate": None, "labels": None})

        assert isinstance(action, UpdateTask)
        assert action.updates.model_fields_set == {"due_date", "labels"}
        assert action.updates.labels == []
        assert action.updates.due_date is None

    def test_updated_event_ignores_completion_and_empty_title(self):
        action = updated_event_to_action(
            {"id": "task-1", "title": "", "completedAt": "2024-01-01T00:00:00Z", "priority": "low"}
        )

        assert action.updates.model_fields_set == {"priority"}

    def test_updated_event_with_bad_priority(self):
        with pytest.raises(MalformedEventError):
            updated_event_to_action({"id": "task-1", "priority": "whenever"})

    def test_deleted_event(self):
        action = deleted_event_to_action({"taskId": "task-1", "boardId": "board-1"})

        assert isinstance(action, DeleteTask)
        assert action.task_id == "task-1"
        assert action.board_id == "board-1"

    def test_deleted_event_requires_id(self):
        with pytest.raises(MalformedEventError):
            deleted_event_to_action({})


class TestHandleEvent:
    def test_created_then_redelivered(self, sample_state):
        store = KanbanStore(sample_state)
        layer = RemoteEventMergeLayer(store, FakeEventSource())

        assert layer.handle_event("created", _created())
        after_first = store.state
        assert layer.handle_event("created", _created())

        assert store.state is after_first
        assert [t.id for t in store.state.current_board.columns[1].tasks] == ["remote-1"]

    def test_update_keeps_local_completion(self, sample_state):
        store = KanbanStore(sample_state)
        layer = RemoteEventMergeLayer(store, FakeEventSource())

        layer.handle_event("updated", {"id": "task-3", "title": "Renamed", "completedAt": None})

        _, task = store.state.current_board.find_task("task-3")
        assert task.title == "Renamed"
        assert task.completed_at is not None

    def test_delete_unknown_task_is_harmless(self, sample_state):
        store = KanbanStore(sample_state)
        layer = RemoteEventMergeLayer(store, FakeEventSource())

        assert layer.handle_event("deleted", {"id": "missing"})
        assert store.state is sample_state

    def test_malformed_event_is_skipped(self, sample_state):
        store = KanbanStore(sample_state)
        layer = RemoteEventMergeLayer(store, FakeEventSource())

        assert layer.handle_event("created", {"title": "no id"}) is False
        assert store.state is sample_state

    def test_callbacks(self, sample_state, mocker):
        created, updated, deleted = mocker.Mock(), mocker.Mock(), mocker.Mock()
        layer = RemoteEventMergeLayer(
            KanbanStore(sample_state),
            FakeEventSource(),
            on_task_created=created,
            on_task_updated=updated,
            on_task_deleted=deleted,
        )

        layer.handle_event("created", _created())
        layer.handle_event("updated", {"id": "remote-1", "title": "Changed"})
        layer.handle_event("deleted", {"id": "remote-1"})

        assert created.call_args.args[0].id == "remote-1"
        assert updated.call_args.args[0].title == "Changed"
        deleted.assert_called_once_with("remote-1")

    def test_sparse_update_reports_merged_task(self, sample_state, mocker):
        updated = mocker.Mock()
        store = KanbanStore(sample_state)
        layer = RemoteEventMergeLayer(store, FakeEventSource(), on_task_updated=updated)

        layer.handle_event("updated", {"id": "task-1", "priority": "high"})

        updated.assert_called_once()
        task = updated.call_args.args[0]
        assert task.id == "task-1"
        assert task.title == "Write docs"
        assert task.priority == "high"

    def test_update_on_other_board_reports_that_boards_task(self, sample_state, mocker):
        updated = mocker.Mock()
        store = KanbanStore(sample_state)
        store.dispatch(SwitchBoard(board_id="board-2"))
        layer = RemoteEventMergeLayer(store, FakeEventSource(), on_task_updated=updated)

        layer.handle_event("updated", {"id": "task-2", "boardId": "board-1", "priority": "low"})

        assert updated.call_args.args[0].title == "Fix login"
        assert updated.call_args.args[0].priority == "low"

    def test_no_callbacks_when_nothing_changed(self, sample_state, mocker):
        created, updated, deleted = mocker.Mock(), mocker.Mock(), mocker.Mock()
        store = KanbanStore(sample_state)
        layer = RemoteEventMergeLayer(
            store,
            FakeEventSource(),
            on_task_created=created,
            on_task_updated=updated,
            on_task_deleted=deleted,
        )

        layer.handle_event("created", _created())
        layer.handle_event("created", _created())
        layer.handle_event("updated", {"id": "missing", "priority": "high"})
        layer.handle_event("deleted", {"id": "missing"})

        created.assert_called_once()
        updated.assert_not_called()
        deleted.assert_not_called()

    def test_failing_callback_does_not_undo_merge(self, sample_state, mocker):
        mocker.patch("taskflow.services.remote_sync.logger.exception")
        store = KanbanStore(sample_state)
        layer = RemoteEventMergeLayer(
            store, FakeEventSource(), on_task_created=mocker.Mock(side_effect=RuntimeError("x"))
        )

        assert layer.handle_event("created", _created())
        assert store.state.current_board.find_task("remote-1") is not None


class TestRun:
    def test_fake_source_satisfies_protocol(self):
        assert isinstance(FakeEventSource(), EventSource)

    @pytest.mark.asyncio
    async def test_merges_all_streams(self, sample_state):
        source = FakeEventSource(
            events={
                "created": [_created()],
                "updated": [{"id": "task-1", "priority": "critical"}],
                "deleted": [{"id": "task-2"}],
            }
        )
        store = KanbanStore(sample_state)
        layer = RemoteEventMergeLayer(store, source, board_id="board-1")

        await layer.run()

        board = store.state.current_board
        assert board.find_task("remote-1") is not None
        assert board.find_task("task-1")[1].priority == "critical"
        assert board.find_task("task-2") is None
        assert {board_id for _, board_id in source.opened} == {"board-1"}
        assert layer.connected
        assert not layer.loading
        assert layer.statuses["created"].received == 1

    @pytest.mark.asyncio
    async def test_connected_follows_loading_and_errors(self, sample_state):
        seen = []

        class WatchingSource(FakeEventSource):
            @asynccontextmanager
            async def open(self, kind, board_id=None):
                seen.append(layer.connected)
                yield self.iterate_nothing()

            async def iterate_nothing(self):
                return
                yield

        layer = RemoteEventMergeLayer(KanbanStore(sample_state), WatchingSource())
        assert not layer.connected

        await layer.run()

        assert seen == [False, False, False]
        assert layer.connected

    @pytest.mark.asyncio
    async def test_subscription_error_is_captured(self, sample_state, mocker):
        mocker.patch("taskflow.services.remote_sync.logger.error")
        error = ConnectionError("refused")
        source = FakeEventSource(
            events={"created": [_created()]}, errors={"updated": error}
        )
        store = KanbanStore(sample_state)
        layer = RemoteEventMergeLayer(store, source)

        await layer.run()

        assert layer.error is error
        assert layer.statuses["updated"].error is error
        assert layer.statuses["created"].error is None
        assert not layer.connected
        assert not layer.loading
        assert store.state.current_board.find_task("remote-1") is not None

    @pytest.mark.asyncio
    async def test_skip_opens_nothing(self, sample_state):
        source = FakeEventSource(events={"created": [_created()]})
        layer = RemoteEventMergeLayer(KanbanStore(sample_state), source, skip=True)

        await layer.run()

        assert source.opened == []
        assert not layer.connected

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, sample_state):
        class HangingSource(FakeEventSource):
            @asynccontextmanager
            async def open(self, kind, board_id=None):
                async def iterate():
                    await asyncio.Event().wait()
                    yield {}

                yield iterate()

        layer = RemoteEventMergeLayer(KanbanStore(sample_state), HangingSource())
        task = asyncio.create_task(layer.run())
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert layer.error is None
