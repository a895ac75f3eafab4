"""TaskFlow domain models.

This package contains the Pydantic models for the kanban entities, the
action alphabet of the state machine, and the application configuration.
"""

from .actions import (
    InvalidActionError,
    KanbanAction,
    UnknownAction,
    parse_action,
)
from .config_models import AppConfig
from .core import (
    Attachment,
    Board,
    BoardUpdate,
    Column,
    ColumnUpdate,
    KanbanState,
    Label,
    LabelUpdate,
    SubTask,
    SubTaskUpdate,
    Task,
    TaskFilter,
    TaskUpdate,
)

__all__ = [
    # Entities
    "Board",
    "Column",
    "Task",
    "Label",
    "SubTask",
    "Attachment",
    "KanbanState",
    "TaskFilter",
    # Partial updates
    "BoardUpdate",
    "ColumnUpdate",
    "TaskUpdate",
    "LabelUpdate",
    "SubTaskUpdate",
    # Actions
    "KanbanAction",
    "UnknownAction",
    "InvalidActionError",
    "parse_action",
    # Config models
    "AppConfig",
]
