"""Unit tests for task sorting."""

from datetime import UTC, datetime, timedelta

import pytest

from taskflow.utils.task_sort import sort_tasks

from conftest import make_task

BASE = datetime(2024, 6, 1, tzinfo=UTC)


@pytest.fixture
def tasks():
    return [
        make_task("a", "beta", priority="low", created_at=BASE, updated_at=BASE + timedelta(days=5),
                  due_date=BASE + timedelta(days=2)),
        make_task("b", "Alpha", priority=None, created_at=BASE + timedelta(days=1),
                  updated_at=BASE + timedelta(days=1)),
        make_task("c", "gamma", priority="critical", created_at=BASE + timedelta(days=2),
                  updated_at=BASE + timedelta(days=2), due_date=BASE + timedelta(days=1)),
        make_task("d", "delta", priority="low", created_at=BASE + timedelta(days=3),
                  updated_at=BASE + timedelta(days=3)),
    ]


def _ids(tasks):
    return [t.id for t in tasks]


@pytest.mark.parametrize(
    "option, expected",
    [
        ("manual", ["a", "b", "c", "d"]),
        ("title", ["b", "a", "d", "c"]),
        ("created_at", ["d", "c", "b", "a"]),
        ("updated_at", ["a", "d", "c", "b"]),
        ("due_date", ["c", "a", "b", "d"]),
        ("priority", ["c", "d", "a", "b"]),
    ],
)
def test_sort_options(tasks, option, expected):
    assert _ids(sort_tasks(tasks, option)) == expected


def test_returns_new_list(tasks):
    result = sort_tasks(tasks, "manual")

    assert result == tasks
    assert result is not tasks


def test_input_order_is_preserved(tasks):
    sort_tasks(tasks, "title")

    assert _ids(tasks) == ["a", "b", "c", "d"]
