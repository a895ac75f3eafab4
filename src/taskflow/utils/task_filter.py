"""Filtering of task lists by due date, label and priority."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from taskflow.models.core import Task, TaskFilter, utc_now


def _calendar_date(value: datetime, now: datetime) -> date:
    """Calendar date of ``value`` in ``now``'s timezone."""
    if value.tzinfo is not None and now.tzinfo is not None:
        value = value.astimezone(now.tzinfo)
    return value.date()


def is_active(task: Task) -> bool:
    return task.deletion_state != "deleted"


def _matches(task: Task, task_filter: TaskFilter, today: date, now: datetime) -> bool:
    match task_filter.type:
        case "due-today":
            return task.due_date is not None and _calendar_date(task.due_date, now) == today

        case "overdue":
            return task.due_date is not None and _calendar_date(task.due_date, now) < today

        case "due-within-3-days":
            if task.due_date is None:
                return False
            return today <= _calendar_date(task.due_date, now) <= today + timedelta(days=3)

        case "label":
            # Names win over ids; ids are kept for filters saved before names existed
            if task_filter.selected_label_names:
                names = set(task_filter.selected_label_names)
                return any(label.name in names for label in task.labels)
            ids = set(task_filter.selected_labels)
            if not ids and task_filter.label:
                ids = {task_filter.label}
            if not ids:
                return True
            return any(label.id in ids for label in task.labels)

        case "has-labels":
            return bool(task.labels)

        case "priority":
            if not task_filter.selected_priorities:
                return True
            return task.priority in task_filter.selected_priorities

        case _:
            return True


def filter_tasks(
    tasks: Iterable[Task], task_filter: TaskFilter, now: datetime | None = None
) -> list[Task]:
    """Return the tasks matching ``task_filter``.

    Tasks in the recycle bin (``deletion_state == "deleted"``) are always
    excluded. Empty selections match every active task.
    """
    now = now or utc_now()
    today = now.date()
    return [task for task in tasks if is_active(task) and _matches(task, task_filter, today, now)]


def get_filtered_task_count(
    tasks: Iterable[Task], task_filter: TaskFilter, now: datetime | None = None
) -> int:
    return len(filter_tasks(tasks, task_filter, now))


def is_filter_active(task_filter: TaskFilter) -> bool:
    """Whether ``task_filter`` narrows the list at all."""
    match task_filter.type:
        case "all":
            return False
        case "label":
            return bool(
                task_filter.selected_label_names or task_filter.selected_labels or task_filter.label
            )
        case "priority":
            return bool(task_filter.selected_priorities)
        case _:
            return True
