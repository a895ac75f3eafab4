"""Action alphabet of the kanban state machine.

On the wire every action is ``{"type": NAME, "payload": {...}}``. In Python
each name is its own frozen model, so handlers can match on the class and a
payload is validated once, at the boundary, by :func:`parse_action`.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, ClassVar, Literal

from pydantic import Field, ValidationError, field_validator

from .core import (
    Attachment,
    Board,
    BoardUpdate,
    ColumnUpdate,
    KanbanModel,
    Label,
    LabelUpdate,
    Priority,
    SortOption,
    SubTask,
    SubTaskUpdate,
    Task,
    TaskFilter,
    TaskUpdate,
    ViewMode,
)


class InvalidActionError(ValueError):
    """Raised when a known action type carries a payload that does not validate."""

    def __init__(self, action_type: str, reason: str):
        super().__init__(f"Invalid payload for {action_type}: {reason}")
        self.action_type = action_type
        self.reason = reason


class Action(KanbanModel):
    """Base class for typed actions."""

    type: str

    # Set on actions whose wire payload is a bare value rather than an object.
    payload_field: ClassVar[str | None] = None

    @property
    def payload(self) -> Any:
        if self.payload_field is not None:
            value = getattr(self, self.payload_field)
            return value.model_dump() if isinstance(value, KanbanModel) else value
        return self.model_dump(exclude={"type"})

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the ``{type, payload}`` contract."""
        return {"type": self.type, "payload": self.payload}


# Board actions


class SetBoards(Action):
    type: Literal["SET_BOARDS"] = "SET_BOARDS"
    boards: list[Board]


class CreateBoard(Action):
    type: Literal["CREATE_BOARD"] = "CREATE_BOARD"
    title: str


class SwitchBoard(Action):
    type: Literal["SWITCH_BOARD"] = "SWITCH_BOARD"
    board_id: str


class UpdateBoard(Action):
    type: Literal["UPDATE_BOARD"] = "UPDATE_BOARD"
    board_id: str
    updates: BoardUpdate


class DeleteBoard(Action):
    type: Literal["DELETE_BOARD"] = "DELETE_BOARD"
    board_id: str


class ImportBoards(Action):
    type: Literal["IMPORT_BOARDS"] = "IMPORT_BOARDS"
    boards: list[Board]
    replace_all: bool = False


class ReorderBoards(Action):
    type: Literal["REORDER_BOARDS"] = "REORDER_BOARDS"
    board_ids: list[str]


# Column actions


class AddColumn(Action):
    type: Literal["ADD_COLUMN"] = "ADD_COLUMN"
    title: str
    color: str | None = None


class UpdateColumn(Action):
    type: Literal["UPDATE_COLUMN"] = "UPDATE_COLUMN"
    column_id: str
    updates: ColumnUpdate


class DeleteColumn(Action):
    type: Literal["DELETE_COLUMN"] = "DELETE_COLUMN"
    column_id: str


class ReorderColumns(Action):
    type: Literal["REORDER_COLUMNS"] = "REORDER_COLUMNS"
    source_index: int
    target_index: int


# Task actions


class AddTask(Action):
    """Create a task in ``column_id``.

    When ``task`` is given (a remotely created task) it is inserted as-is
    instead of building a new one from the other fields.
    """

    type: Literal["ADD_TASK"] = "ADD_TASK"
    column_id: str
    title: str = ""
    description: str = ""
    due_date: datetime | None = None
    priority: Priority | None = "medium"
    labels: list[Label] = Field(default_factory=list)
    files: list[Attachment] = Field(default_factory=list)
    task: Task | None = None
    board_id: str | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UpdateTask(Action):
    type: Literal["UPDATE_TASK"] = "UPDATE_TASK"
    task_id: str
    updates: TaskUpdate
    board_id: str | None = None


class DeleteTask(Action):
    type: Literal["DELETE_TASK"] = "DELETE_TASK"
    task_id: str
    board_id: str | None = None


class MoveTask(Action):
    type: Literal["MOVE_TASK"] = "MOVE_TASK"
    task_id: str
    source_column_id: str
    target_column_id: str
    target_index: int = 0


class MoveTaskToBoard(Action):
    type: Literal["MOVE_TASK_TO_BOARD"] = "MOVE_TASK_TO_BOARD"
    task_id: str
    source_board_id: str
    source_column_id: str
    target_board_id: str
    target_column_id: str | None = None


# Label actions


class AddLabel(Action):
    type: Literal["ADD_LABEL"] = "ADD_LABEL"
    label: Label


class UpdateLabel(Action):
    type: Literal["UPDATE_LABEL"] = "UPDATE_LABEL"
    label_id: str
    updates: LabelUpdate


class DeleteLabel(Action):
    type: Literal["DELETE_LABEL"] = "DELETE_LABEL"
    label_id: str


class DeleteLabelFromAllBoards(Action):
    type: Literal["DELETE_LABEL_FROM_ALL_BOARDS"] = "DELETE_LABEL_FROM_ALL_BOARDS"
    label_id: str


# Subtask, filter and view actions


class AddSubTask(Action):
    type: Literal["ADD_SUBTASK"] = "ADD_SUBTASK"
    task_id: str
    sub_task: SubTask


class UpdateSubTask(Action):
    type: Literal["UPDATE_SUBTASK"] = "UPDATE_SUBTASK"
    task_id: str
    sub_task_id: str
    updates: SubTaskUpdate


class DeleteSubTask(Action):
    type: Literal["DELETE_SUBTASK"] = "DELETE_SUBTASK"
    task_id: str
    sub_task_id: str


class SetSortOption(Action):
    type: Literal["SET_SORT_OPTION"] = "SET_SORT_OPTION"
    sort_option: SortOption
    payload_field: ClassVar[str | None] = "sort_option"


class SetTaskFilter(Action):
    type: Literal["SET_TASK_FILTER"] = "SET_TASK_FILTER"
    task_filter: TaskFilter
    payload_field: ClassVar[str | None] = "task_filter"


class ClearTaskFilter(Action):
    type: Literal["CLEAR_TASK_FILTER"] = "CLEAR_TASK_FILTER"


class SetViewMode(Action):
    type: Literal["SET_VIEW_MODE"] = "SET_VIEW_MODE"
    view_mode: ViewMode
    payload_field: ClassVar[str | None] = "view_mode"


class UnknownAction(KanbanModel):
    """An action whose type is outside the alphabet. Routed to a logged no-op."""

    type: str
    payload: dict[str, Any] = Field(default_factory=dict)


BOARD_ACTIONS = (
    SetBoards,
    CreateBoard,
    SwitchBoard,
    UpdateBoard,
    DeleteBoard,
    ImportBoards,
    ReorderBoards,
)
COLUMN_ACTIONS = (AddColumn, UpdateColumn, DeleteColumn, ReorderColumns)
TASK_ACTIONS = (AddTask, UpdateTask, DeleteTask, MoveTask, MoveTaskToBoard)
LABEL_ACTIONS = (AddLabel, UpdateLabel, DeleteLabel, DeleteLabelFromAllBoards)
OTHER_ACTIONS = (
    AddSubTask,
    UpdateSubTask,
    DeleteSubTask,
    SetSortOption,
    SetTaskFilter,
    ClearTaskFilter,
    SetViewMode,
)

BoardAction = (
    SetBoards
    | CreateBoard
    | SwitchBoard
    | UpdateBoard
    | DeleteBoard
    | ImportBoards
    | ReorderBoards
)
ColumnAction = AddColumn | UpdateColumn | DeleteColumn | ReorderColumns
TaskAction = AddTask | UpdateTask | DeleteTask | MoveTask | MoveTaskToBoard
LabelAction = AddLabel | UpdateLabel | DeleteLabel | DeleteLabelFromAllBoards
OtherAction = (
    AddSubTask
    | UpdateSubTask
    | DeleteSubTask
    | SetSortOption
    | SetTaskFilter
    | ClearTaskFilter
    | SetViewMode
)

KanbanAction = (
    BoardAction | ColumnAction | TaskAction | LabelAction | OtherAction | UnknownAction
)


def _type_name(action_cls: type[Action]) -> str:
    return action_cls.model_fields["type"].default


ACTION_TYPES: dict[str, type[Action]] = {
    _type_name(cls): cls
    for cls in BOARD_ACTIONS + COLUMN_ACTIONS + TASK_ACTIONS + LABEL_ACTIONS + OTHER_ACTIONS
}


def parse_action(data: Mapping[str, Any]) -> KanbanAction:
    """Convert a wire action ``{"type": ..., "payload": ...}`` to a typed action.

    Args:
        data: Action dict; payload keys may be camelCase or snake_case

    Returns:
        The typed action, or UnknownAction for types outside the alphabet

    Raises:
        InvalidActionError: If a known type carries an invalid payload
    """
    action_type = str(data.get("type", ""))
    payload = data.get("payload")
    action_cls = ACTION_TYPES.get(action_type)

    if action_cls is None:
        return UnknownAction(
            type=action_type,
            payload=dict(payload) if isinstance(payload, Mapping) else {},
        )

    if action_cls.payload_field is not None:
        fields: dict[str, Any] = {action_cls.payload_field: payload}
    elif payload is None:
        fields = {}
    elif isinstance(payload, Mapping):
        fields = dict(payload)
    else:
        raise InvalidActionError(action_type, "payload must be an object")

    fields["type"] = action_type
    try:
        return action_cls.model_validate(fields)
    except ValidationError as e:
        raise InvalidActionError(action_type, str(e)) from e
