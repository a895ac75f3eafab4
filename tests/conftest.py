"""Shared test fixtures and configuration.

Provides sample boards and isolates tests from the real config, data and log
directories.
"""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from taskflow.models.core import Board, Column, KanbanState, Label, SubTask, Task

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


def make_task(task_id: str, title: str, **fields) -> Task:
    fields.setdefault("created_at", NOW)
    fields.setdefault("updated_at", NOW)
    return Task(id=task_id, title=title, **fields)


def make_board(board_id: str = "board-1", title: str = "Project") -> Board:
    """Board with To Do / In Progress / Done, two open tasks and one done task."""
    bug = Label(id="label-bug", name="Bug", color="#ff0000", created_at=NOW)
    return Board(
        id=board_id,
        title=title,
        columns=[
            Column(
                id=f"{board_id}-todo",
                title="To Do",
                tasks=[
                    make_task("task-1", "Write docs", priority="low", labels=[bug]),
                    make_task(
                        "task-2",
                        "Fix login",
                        priority="high",
                        sub_tasks=[SubTask(id="sub-1", title="Reproduce")],
                    ),
                ],
            ),
            Column(id=f"{board_id}-doing", title="In Progress", tasks=[]),
            Column(
                id=f"{board_id}-done",
                title="Done",
                tasks=[
                    make_task(
                        "task-3",
                        "Set up CI",
                        completed_at=NOW,
                        sub_tasks=[SubTask(id="sub-2", title="Add workflow", completed=True)],
                    )
                ],
            ),
        ],
        labels=[bug],
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def sample_board() -> Board:
    return make_board()


@pytest.fixture
def sample_state() -> KanbanState:
    """Two boards; the first is current."""
    first = make_board("board-1", "Project")
    second = make_board("board-2", "Personal")
    second = second.model_copy(
        update={
            "columns": [
                column.model_copy(update={"tasks": []}) for column in second.columns
            ]
        }
    )
    return KanbanState(boards=[first, second], current_board=first)


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def isolate_log_dir(tmp_path_factory):
    """Keep the rotating log file out of the real user log dir."""
    log_dir = str(tmp_path_factory.mktemp("logs"))
    with patch("taskflow.utils.logger.user_log_dir", return_value=log_dir):
        yield log_dir


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from taskflow.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("taskflow.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("taskflow.services.config_service.user_data_dir", return_value=tmpdir):
            yield get_config_service()
    get_config_service.cache_clear()
