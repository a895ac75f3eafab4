"""JSON persistence of the kanban snapshot, and JSON/YAML board export.

The file holds the boards plus the id of the current board; loading
re-resolves that id so the restored ``current_board`` is the object stored
in ``boards``. Writing the file is the whole durability story.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from taskflow.models.core import Board, KanbanState, TaskFilter

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotError(Exception):
    """Raised when a snapshot or export file cannot be read."""


def state_to_dict(state: KanbanState) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "boards": [board.model_dump(mode="json", by_alias=True) for board in state.boards],
        "current_board_id": state.current_board.id if state.current_board else None,
        "view_mode": state.view_mode,
        "sort_option": state.sort_option,
        "task_filter": state.task_filter.model_dump(mode="json", by_alias=True),
    }


def state_from_dict(data: dict[str, Any]) -> KanbanState:
    try:
        boards = [Board.model_validate(board) for board in data.get("boards", [])]
        current_id = data.get("current_board_id")
        current = next((board for board in boards if board.id == current_id), None)
        return KanbanState(
            boards=boards,
            current_board=current,
            view_mode=data.get("view_mode", "kanban"),
            sort_option=data.get("sort_option", "manual"),
            task_filter=TaskFilter.model_validate(data.get("task_filter") or {}),
        )
    except (ValidationError, AttributeError, TypeError) as e:
        raise SnapshotError(f"Invalid snapshot: {e}") from e


class SnapshotService:
    """Load and save ``KanbanState`` as JSON at ``path``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> KanbanState:
        """Load the snapshot; a missing file yields an empty state."""
        if not self.path.exists():
            logger.debug("No snapshot at %s, starting empty", self.path)
            return KanbanState()
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotError(f"Failed to read snapshot {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise SnapshotError(f"Invalid snapshot {self.path}: expected an object")
        return state_from_dict(data)

    def save(self, state: KanbanState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(state_to_dict(state), f, indent=2)
            tmp_path.replace(self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Saved %d board(s) to %s", len(state.boards), self.path)


def _is_yaml(path: Path) -> bool:
    return Path(path).suffix.lower() in (".yaml", ".yml")


def export_boards(boards: list[Board], path: Path) -> None:
    """Write boards to an export file, YAML for .yaml/.yml and JSON otherwise."""
    payload = {
        "version": SNAPSHOT_VERSION,
        "boards": [board.model_dump(mode="json", by_alias=True) for board in boards],
    }
    if _is_yaml(path):
        text = yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(payload, indent=2, ensure_ascii=False)
    Path(path).write_text(text, encoding="utf-8")


def read_export(path: Path) -> list[Board]:
    """Read boards from an export file.

    Accepts ``{"boards": [...]}``, a bare list of boards or a single board,
    as JSON or (for .yaml/.yml files) YAML.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
        data = yaml.safe_load(text) if _is_yaml(path) else json.loads(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotError(f"Failed to read {path}: {e}") from e

    if isinstance(data, dict) and "boards" in data:
        raw = data["boards"] or []
    elif isinstance(data, list):
        raw = data
    elif data is None:
        raw = []
    else:
        raw = [data]
    try:
        return [Board.model_validate(board) for board in raw]
    except (ValidationError, TypeError) as e:
        raise SnapshotError(f"Invalid board data in {path}: {e}") from e
