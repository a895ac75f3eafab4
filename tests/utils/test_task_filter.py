"""Unit tests for task filtering."""

from datetime import UTC, datetime, timedelta

import pytest

from taskflow.models.core import Label, TaskFilter
from taskflow.utils.task_filter import filter_tasks, get_filtered_task_count, is_filter_active

from conftest import make_task

NOW = datetime(2024, 6, 10, 15, 0, tzinfo=UTC)
TODAY = datetime(2024, 6, 10, tzinfo=UTC)

BUG = Label(id="l-bug", name="Bug")
UI = Label(id="l-ui", name="UI")


@pytest.fixture
def tasks():
    return [
        make_task("today", "Due today", due_date=TODAY + timedelta(hours=9), priority="high"),
        make_task("yesterday", "Overdue", due_date=TODAY - timedelta(days=1), labels=[BUG]),
        make_task("in-3", "Soon", due_date=TODAY + timedelta(days=3), labels=[UI], priority="low"),
        make_task("in-4", "Later", due_date=TODAY + timedelta(days=4)),
        make_task("undated", "Someday"),
        make_task("binned", "Binned", due_date=TODAY, deletion_state="deleted", labels=[BUG]),
    ]


def _ids(tasks):
    return [t.id for t in tasks]


class TestFilterTasks:
    def test_all_excludes_deleted(self, tasks):
        assert _ids(filter_tasks(tasks, TaskFilter(), NOW)) == [
            "today", "yesterday", "in-3", "in-4", "undated"
        ]

    def test_marked_for_deletion_is_still_shown(self):
        task = make_task("t", "Pending delete", deletion_state="marked_for_deletion")

        assert filter_tasks([task], TaskFilter(), NOW) == [task]

    def test_due_today(self, tasks):
        assert _ids(filter_tasks(tasks, TaskFilter(type="due-today"), NOW)) == ["today"]

    def test_overdue_is_by_calendar_date(self, tasks):
        earlier_today = make_task("early", "Earlier today", due_date=NOW - timedelta(hours=5))
        result = filter_tasks([*tasks, earlier_today], TaskFilter(type="overdue"), NOW)

        assert _ids(result) == ["yesterday"]

    def test_due_within_three_days(self, tasks):
        result = filter_tasks(tasks, TaskFilter(type="due-within-3-days"), NOW)

        assert _ids(result) == ["today", "in-3"]

    def test_label_by_name(self, tasks):
        result = filter_tasks(tasks, TaskFilter(type="label", selected_label_names=["Bug"]), NOW)

        assert _ids(result) == ["yesterday"]

    def test_label_names_win_over_ids(self, tasks):
        task_filter = TaskFilter(
            type="label", selected_label_names=["UI"], selected_labels=["l-bug"]
        )

        assert _ids(filter_tasks(tasks, task_filter, NOW)) == ["in-3"]

    def test_label_by_id_and_legacy_field(self, tasks):
        by_id = TaskFilter(type="label", selected_labels=["l-ui"])
        legacy = TaskFilter(type="label", label="l-bug")

        assert _ids(filter_tasks(tasks, by_id, NOW)) == ["in-3"]
        assert _ids(filter_tasks(tasks, legacy, NOW)) == ["yesterday"]

    def test_label_without_selection_returns_all(self, tasks):
        assert len(filter_tasks(tasks, TaskFilter(type="label"), NOW)) == 5

    def test_has_labels(self, tasks):
        assert _ids(filter_tasks(tasks, TaskFilter(type="has-labels"), NOW)) == ["yesterday", "in-3"]

    def test_priority(self, tasks):
        task_filter = TaskFilter(type="priority", selected_priorities=["high", "low"])

        assert _ids(filter_tasks(tasks, task_filter, NOW)) == ["today", "in-3"]

    def test_priority_without_selection_returns_all(self, tasks):
        assert get_filtered_task_count(tasks, TaskFilter(type="priority"), NOW) == 5

    def test_input_is_not_modified(self, tasks):
        before = list(tasks)
        filter_tasks(tasks, TaskFilter(type="overdue"), NOW)

        assert tasks == before


class TestIsFilterActive:
    @pytest.mark.parametrize(
        "task_filter, expected",
        [
            (TaskFilter(), False),
            (TaskFilter(type="overdue"), True),
            (TaskFilter(type="label"), False),
            (TaskFilter(type="label", selected_label_names=["Bug"]), True),
            (TaskFilter(type="priority"), False),
            (TaskFilter(type="priority", selected_priorities=["low"]), True),
        ],
    )
    def test_is_filter_active(self, task_filter, expected):
        assert is_filter_active(task_filter) is expected
