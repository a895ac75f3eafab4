"""Unit tests for the kanban entity models."""

import pytest
from pydantic import ValidationError

from taskflow.models.core import (
    Board,
    BoardUpdate,
    Column,
    ColumnUpdate,
    LabelUpdate,
    SubTaskUpdate,
    Task,
    TaskUpdate,
)


def test_task_accepts_camel_case():
    task = Task.model_validate(
        {
            "id": "t1",
            "title": "Ship",
            "subTasks": [{"id": "s1", "title": "Tag release"}],
            "dueDate": "2024-06-01T00:00:00Z",
            "deletionState": "marked_for_deletion",
        }
    )

    assert task.sub_tasks[0].title == "Tag release"
    assert task.due_date.year == 2024
    assert task.deletion_state == "marked_for_deletion"


def test_task_is_frozen():
    task = Task(title="Frozen")

    with pytest.raises(ValidationError):
        task.title = "Changed"


def test_priority_is_normalized():
    assert Task(title="x", priority=" High ").priority == "high"
    assert Task(title="x", priority="").priority is None

    with pytest.raises(ValidationError):
        Task(title="x", priority="urgent")


def test_null_description_becomes_empty():
    assert Task(title="x", description=None).description == ""
    assert TaskUpdate(description=None).description == ""


def test_task_update_tracks_set_fields():
    updates = TaskUpdate(due_date=None)

    assert updates.model_fields_set == {"due_date"}


@pytest.mark.parametrize(
    ("model", "field"),
    [
        (BoardUpdate, "title"),
        (ColumnUpdate, "title"),
        (TaskUpdate, "title"),
        (TaskUpdate, "labels"),
        (TaskUpdate, "sub_tasks"),
        (TaskUpdate, "attachments"),
        (LabelUpdate, "name"),
        (LabelUpdate, "color"),
        (SubTaskUpdate, "title"),
        (SubTaskUpdate, "completed"),
    ],
)
def test_update_rejects_null_for_required_field(model, field):
    with pytest.raises(ValidationError):
        model(**{field: None})


def test_update_allows_null_for_clearable_fields():
    updates = TaskUpdate(priority=None, due_date=None, deletion_state=None)

    assert updates.model_fields_set == {"priority", "due_date", "deletion_state"}
    assert ColumnUpdate(color=None).model_fields_set == {"color"}


def test_terminal_column_is_last():
    board = Board(title="b", columns=[Column(id="a", title="A"), Column(id="z", title="Z")])

    assert board.terminal_column_id == "z"
    assert Board(title="empty").terminal_column_id is None


def test_dump_by_alias_is_camel_case():
    data = Task(id="t1", title="x").model_dump(mode="json", by_alias=True)

    assert "subTasks" in data
    assert "completedAt" in data
