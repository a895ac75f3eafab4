"""Rich console and the named styles taskflow renders with."""

from functools import lru_cache

from rich.console import Console
from rich.theme import Theme

STYLES = {
    "priority.critical": "bold red",
    "priority.high": "bold orange3",
    "priority.medium": "bold yellow",
    "priority.low": "green",
    "task.title": "bold",
    "task.done": "dim",
    "task.due": "cyan",
    "task.overdue": "bold red",
    "task.label": "blue",
    "task.subtasks": "magenta",
    "muted": "dim",
    "heading": "bold cyan",
}

THEME = Theme(STYLES)


def priority_style(priority: str | None) -> str:
    return f"priority.{priority}" if priority in ("critical", "high", "medium", "low") else ""


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Shared console; every taskflow style name resolves through ``THEME``."""
    return Console(highlight=highlight, theme=THEME)
