"""Command 'next' of taskflow."""

import typer

from taskflow.services.config_service import get_config_service
from taskflow.services.recommendation import rank_tasks
from taskflow.utils.ui.formatters import format_output, format_recommendations

from .decorators import command_wrapper
from .session import open_session


@command_wrapper
def next_task(
    limit: int | None = typer.Option(
        None, "--limit", "-n", help="How many tasks to show (default from config)"
    ),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format: pretty, json, yaml"),
) -> None:
    """Recommend what to work on next on the current board.

    Open tasks are scored by priority and due-date urgency.
    """
    config = get_config_service().config
    with open_session(save=False) as session:
        board = session.current_board()
    ranked = rank_tasks(board, limit=limit or config.recommendation.limit)

    data = {
        "recommendations": [
            {
                "id": scored.task.id,
                "title": scored.task.title,
                "score": scored.score,
                "components": scored.components,
            }
            for scored in ranked
        ]
    }
    if not format_output(data, output):
        format_recommendations(ranked, config.output.date_format)
