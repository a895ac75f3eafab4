"""Ordering of task lists for display."""

from __future__ import annotations

from collections.abc import Iterable

from taskflow.models.core import SortOption, Task

PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}


def _timestamp(task: Task, field: str) -> float:
    return getattr(task, field).timestamp()


def sort_tasks(tasks: Iterable[Task], sort_option: SortOption) -> list[Task]:
    """Return a new list of ``tasks`` ordered by ``sort_option``.

    The input is never modified. ``manual`` (and any unknown option) keeps
    the given order. Sorting is stable, so ties keep their relative order.
    """
    tasks = list(tasks)
    match sort_option:
        case "title":
            return sorted(tasks, key=lambda t: t.title.casefold())
        case "created_at":
            return sorted(tasks, key=lambda t: _timestamp(t, "created_at"), reverse=True)
        case "updated_at":
            return sorted(tasks, key=lambda t: _timestamp(t, "updated_at"), reverse=True)
        case "due_date":
            # Undated tasks last
            return sorted(
                tasks,
                key=lambda t: (t.due_date is None, t.due_date.timestamp() if t.due_date else 0.0),
            )
        case "priority":
            # critical -> low, then no priority; newest first within a level
            return sorted(
                tasks,
                key=lambda t: (
                    PRIORITY_ORDER.get(t.priority, len(PRIORITY_ORDER)),
                    -_timestamp(t, "created_at"),
                ),
            )
        case _:
            return tasks
