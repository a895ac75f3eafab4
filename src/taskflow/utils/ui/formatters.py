"""Output formatters for boards, tasks and recommendations."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import yaml
from rich.table import Table
from rich.text import Text

from taskflow.models.core import Board, KanbanState, Task
from taskflow.services.recommendation import ScoredTask
from taskflow.utils.ui.console import get_console, priority_style
from taskflow.utils.uuid_utils import shorten_uuid

console = get_console()

OUTPUT_FORMATS = ("pretty", "json", "yaml")


def format_output(data: Any, output_format: str = "pretty") -> bool:
    """Print ``data`` as JSON or YAML.

    Returns:
        False when ``output_format`` is "pretty", leaving rendering to the caller
    """
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
        return True
    if output_format == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True))
        return True
    return False


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


# ============================================================================
# Pretty Format Implementation
# ============================================================================

PRIORITY_ICONS = {
    "critical": "🔴",
    "high": "🟠",
    "medium": "🟡",
    "low": "🟢",
}

STATUS_ICONS = {
    "open": "⬜",
    "completed": "☑️",
}


def format_due_date(value: datetime, date_format: str = "%Y-%m-%d") -> str:
    """Format a due date, adding the time when it is not midnight."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.strftime(date_format)
    if (value.hour, value.minute) != (0, 0):
        text += value.strftime(" %H:%M")
    return text


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    if task.due_date is None or task.completed_at is not None:
        return False
    due = task.due_date if task.due_date.tzinfo else task.due_date.replace(tzinfo=UTC)
    return due < (now or datetime.now(UTC))


def format_relative_time(value: datetime | None) -> str:
    """Format timestamp as relative time."""
    if value is None:
        return ""
    now = datetime.now(UTC) if value.tzinfo is not None else datetime.now()
    seconds = (now - value).total_seconds()

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds / 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds / 3600)}h ago"
    return f"{int(seconds / 86400)}d ago"


def task_line(task: Task, date_format: str = "%Y-%m-%d") -> Text:
    """One-line rendering of a task: status, title, priority, due date, labels, id."""
    is_completed = task.completed_at is not None
    line = Text()
    line.append(STATUS_ICONS["completed" if is_completed else "open"] + " ")
    line.append(task.title or "Untitled", style="task.done" if is_completed else "task.title")

    if task.priority:
        line.append(f" {PRIORITY_ICONS[task.priority]}", style=priority_style(task.priority))
    if task.due_date is not None:
        style = "task.overdue" if is_overdue(task) else "task.due"
        line.append(f" • {format_due_date(task.due_date, date_format)}", style=style)
    for label in task.labels:
        line.append(f" #{label.name}", style="task.label")
    if task.sub_tasks:
        done = sum(1 for s in task.sub_tasks if s.completed)
        line.append(f" [{done}/{len(task.sub_tasks)}]", style="task.subtasks")
    line.append(f" {shorten_uuid(task.id)}", style="muted")
    return line


def format_boards(state: KanbanState) -> None:
    """List boards, marking the current one."""
    if not state.boards:
        console.print("[yellow]No boards yet. Create one with 'taskflow board create'.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("", width=1)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Columns", justify="right")
    table.add_column("Tasks", justify="right")
    table.add_column("Updated")

    current_id = state.current_board.id if state.current_board else None
    for board in state.boards:
        table.add_row(
            "*" if board.id == current_id else "",
            shorten_uuid(board.id),
            board.title,
            str(len(board.columns)),
            str(len(board.all_tasks())),
            format_relative_time(board.updated_at),
        )
    console.print(table)


def format_board(
    board: Board,
    columns: dict[str, list[Task]] | None = None,
    date_format: str = "%Y-%m-%d",
) -> None:
    """Render a board as a kanban table, one table column per board column.

    Args:
        board: Board to render
        columns: Optional filtered/sorted task list per column id
        date_format: strftime format for due dates
    """
    console.print(
        Text(f"📋 {board.title}", style="heading"), Text(shorten_uuid(board.id), style="muted")
    )
    if not board.columns:
        console.print("[yellow]This board has no columns.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta", expand=True, show_lines=False)
    cells = []
    for column in board.columns:
        tasks = columns.get(column.id, []) if columns is not None else column.tasks
        header = f"{column.title} ({len(tasks)})"
        table.add_column(header, overflow="fold")
        cells.append(tasks)

    depth = max((len(tasks) for tasks in cells), default=0)
    for row in range(depth):
        table.add_row(
            *(
                task_line(tasks[row], date_format) if row < len(tasks) else Text("")
                for tasks in cells
            )
        )
    console.print(table)

    if board.labels:
        labels = Text("Labels: ", style="dim")
        for label in board.labels:
            labels.append(f"#{label.name} ", style="task.label")
        console.print(labels)


def format_task_detail(task: Task, column_title: str, date_format: str = "%Y-%m-%d") -> None:
    console.print(task_line(task, date_format))
    console.print(Text("  Column: ", style="dim").append(column_title, style=""))
    if task.description:
        console.print(Text(f"  {task.description}", style="dim"))
    for sub_task in task.sub_tasks:
        line = Text(f"  {'☑' if sub_task.completed else '☐'} {sub_task.title} ")
        line.append(shorten_uuid(sub_task.id), style="dim")
        console.print(line)
    if task.completed_at is not None:
        console.print(f"  [green]Completed {format_relative_time(task.completed_at)}[/green]")


def format_recommendations(ranked: list[ScoredTask], date_format: str = "%Y-%m-%d") -> None:
    """Show the recommended task followed by the runners-up."""
    if not ranked:
        console.print("[green]Nothing left to do on this board. 🎉[/green]")
        return

    console.print()
    console.print("[bold cyan]Next Task:[/bold cyan]")
    best = ranked[0]
    console.print(Text("  ").append(task_line(best.task, date_format)))
    meta = Text("     └─ ", style="dim")
    meta.append(f"score {best.score:g}", style="yellow")
    meta.append(
        f" (priority {best.components['priority']:g} + due {best.components['due_date']:g})",
        style="dim",
    )
    console.print(meta)

    if len(ranked) > 1:
        console.print()
        console.print("[dim]Also consider:[/dim]")
        for scored in ranked[1:]:
            line = Text("  ").append(task_line(scored.task, date_format))
            line.append(f" ({scored.score:g})", style="dim")
            console.print(line)
    console.print()


def format_task_table(
    board: Board,
    columns: dict[str, list[Task]] | None = None,
    date_format: str = "%Y-%m-%d",
) -> None:
    """Render a board as one flat table of tasks."""
    table = Table(title=board.title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Column")
    table.add_column("Priority")
    table.add_column("Due")
    table.add_column("Labels", style="task.label")

    for column in board.columns:
        tasks = columns.get(column.id, []) if columns is not None else column.tasks
        for task in tasks:
            due = Text("")
            if task.due_date is not None:
                due = Text(
                    format_due_date(task.due_date, date_format),
                    style="task.overdue" if is_overdue(task) else "task.due",
                )
            table.add_row(
                shorten_uuid(task.id),
                task.title or "Untitled",
                column.title,
                Text(task.priority or "", style=priority_style(task.priority)),
                due,
                ", ".join(label.name for label in task.labels),
            )
    console.print(table)


def format_calendar(
    board: Board,
    columns: dict[str, list[Task]] | None = None,
    date_format: str = "%Y-%m-%d",
) -> None:
    """Group the tasks of a board by due day, undated tasks last."""
    tasks: list[Task] = []
    for column in board.columns:
        tasks.extend(columns.get(column.id, []) if columns is not None else column.tasks)

    dated = sorted((t for t in tasks if t.due_date is not None), key=lambda t: _as_utc(t.due_date))
    undated = [t for t in tasks if t.due_date is None]
    by_day: dict[str, list[Task]] = {}
    for task in dated:
        by_day.setdefault(_as_utc(task.due_date).strftime(date_format), []).append(task)

    console.print(Text(f"📅 {board.title}", style="heading"))
    if not tasks:
        console.print("[yellow]No tasks to show.[/yellow]")
        return
    for day, day_tasks in by_day.items():
        console.print(Text(day, style="bold"))
        for task in day_tasks:
            console.print(Text("  ").append(task_line(task, date_format)))
    if undated:
        console.print(Text("No due date", style="bold dim"))
        for task in undated:
            console.print(Text("  ").append(task_line(task, date_format)))


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)
