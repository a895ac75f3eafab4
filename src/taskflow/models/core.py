"""Kanban domain models.

Entities are frozen: a change always produces a new object, so a snapshot
that has been handed out is never modified underneath its reader.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Priority = Literal["critical", "high", "medium", "low"]
ViewMode = Literal["kanban", "calendar", "table"]
SortOption = Literal["manual", "title", "created_at", "updated_at", "due_date", "priority"]
DeletionState = Literal["marked_for_deletion", "deleted"]
FilterType = Literal[
    "all",
    "due-today",
    "overdue",
    "due-within-3-days",
    "label",
    "has-labels",
    "priority",
]

DEFAULT_COLUMN_TITLES = ("To Do", "In Progress", "Done")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid4())


def _normalize_priority(value):
    if isinstance(value, str):
        value = value.strip().lower()
        return value or None
    return value


def _not_null(value):
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


class KanbanModel(BaseModel):
    """Base for all kanban entities.

    Input accepts both snake_case and camelCase keys so that payloads coming
    from JavaScript/GraphQL producers validate without a translation layer.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Label(KanbanModel):
    """Board-owned label, embedded by value in each task that uses it.

    Attributes:
        id: Unique identifier for the label
        name: Display name (e.g., "Bug")
        color: Hex color code
        created_at: Creation timestamp
    """

    id: str = Field(default_factory=new_id)
    name: str
    color: str = "#6b7280"
    created_at: datetime = Field(default_factory=utc_now)


class SubTask(KanbanModel):
    """Checklist item owned by a task."""

    id: str = Field(default_factory=new_id)
    title: str
    completed: bool = False


class Attachment(KanbanModel):
    """File attached to a task. ``data`` is opaque to the core."""

    id: str = Field(default_factory=new_id)
    name: str
    type: str = "application/octet-stream"
    size: int = 0
    data: str = ""


class Task(KanbanModel):
    """Task card.

    Attributes:
        id: Unique identifier for the task
        title: Short task title
        description: Optional longer description
        priority: critical / high / medium / low, or None
        labels: Copies of the board labels applied to this task
        sub_tasks: Checklist items
        due_date: Optional due date
        completed_at: Set while the task sits in the terminal column
        created_at: Creation timestamp
        updated_at: Last update timestamp
        attachments: Attached files
        deletion_state: Recycle-bin marker, None for live tasks
    """

    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    priority: Priority | None = None
    labels: list[Label] = Field(default_factory=list)
    sub_tasks: list[SubTask] = Field(default_factory=list)
    due_date: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    attachments: list[Attachment] = Field(default_factory=list)
    deletion_state: DeletionState | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        return _normalize_priority(v)

    @field_validator("description", mode="before")
    @classmethod
    def none_description_to_empty(cls, v):
        return v or ""


class Column(KanbanModel):
    """Ordered list of tasks. Owning a task is the only record of membership."""

    id: str = Field(default_factory=new_id)
    title: str
    tasks: list[Task] = Field(default_factory=list)
    color: str | None = None


class Board(KanbanModel):
    """Board with ordered columns; the last column is the terminal ("done") one."""

    id: str = Field(default_factory=new_id)
    title: str
    columns: list[Column] = Field(default_factory=list)
    labels: list[Label] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def terminal_column_id(self) -> str | None:
        return self.columns[-1].id if self.columns else None

    def get_column(self, column_id: str) -> Column | None:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def find_task(self, task_id: str) -> tuple[Column, Task] | None:
        """Return the (column, task) pair holding ``task_id``, if any."""
        for column in self.columns:
            for task in column.tasks:
                if task.id == task_id:
                    return column, task
        return None

    def all_tasks(self) -> list[Task]:
        """Tasks in column order, then in-column order."""
        return [task for column in self.columns for task in column.tasks]


class TaskFilter(KanbanModel):
    """Filter applied to the visible task list.

    Attributes:
        type: Which filter rule to apply
        label: Legacy single-label selector (kept for stored filters)
        selected_labels: Label IDs for the "label" filter
        selected_label_names: Label names for the "label" filter (preferred)
        selected_priorities: Priorities for the "priority" filter
    """

    type: FilterType = "all"
    label: str = ""
    selected_labels: list[str] = Field(default_factory=list)
    selected_label_names: list[str] = Field(default_factory=list)
    selected_priorities: list[Priority] = Field(default_factory=list)


class KanbanState(KanbanModel):
    """Root snapshot.

    ``current_board`` is always the very object found in ``boards`` (or None).
    """

    boards: list[Board] = Field(default_factory=list)
    current_board: Board | None = None
    view_mode: ViewMode = "kanban"
    sort_option: SortOption = "manual"
    task_filter: TaskFilter = Field(default_factory=TaskFilter)

    def get_board(self, board_id: str) -> Board | None:
        for board in self.boards:
            if board.id == board_id:
                return board
        return None


class BoardUpdate(KanbanModel):
    """Partial board update. Only explicitly set fields are applied."""

    title: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v):
        return _not_null(v)


class ColumnUpdate(KanbanModel):
    """Partial column update."""

    title: str | None = None
    color: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v):
        return _not_null(v)


class TaskUpdate(KanbanModel):
    """Partial task update.

    ``completed_at`` is not editable here: it follows column membership.
    """

    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    labels: list[Label] | None = None
    sub_tasks: list[SubTask] | None = None
    due_date: datetime | None = None
    attachments: list[Attachment] | None = None
    deletion_state: DeletionState | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        return _normalize_priority(v)

    @field_validator("title", "labels", "sub_tasks", "attachments")
    @classmethod
    def required_not_null(cls, v):
        return _not_null(v)

    @field_validator("description", mode="before")
    @classmethod
    def none_description_to_empty(cls, v):
        # An explicit null clears the description
        return v or ""


class LabelUpdate(KanbanModel):
    """Partial label update."""

    name: str | None = None
    color: str | None = None

    @field_validator("name", "color")
    @classmethod
    def required_not_null(cls, v):
        return _not_null(v)


class SubTaskUpdate(KanbanModel):
    """Partial subtask update."""

    title: str | None = None
    completed: bool | None = None

    @field_validator("title", "completed")
    @classmethod
    def required_not_null(cls, v):
        return _not_null(v)
