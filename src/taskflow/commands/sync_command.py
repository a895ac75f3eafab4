"""Command 'sync' of taskflow."""

import asyncio

import httpx
import typer

from taskflow.models.core import Task
from taskflow.services.api.client import EventStreamClient
from taskflow.services.config_service import get_config_service
from taskflow.services.remote_sync import RemoteEventMergeLayer
from taskflow.utils.exit_codes import ERROR_NETWORK
from taskflow.utils.ui.console import get_console
from taskflow.utils.ui.formatters import format_info, format_success, format_warning

from .decorators import AppError, command_wrapper
from .session import BoardSession, open_session

console = get_console()


async def _listen(
    session: BoardSession, board_id: str | None, duration: float | None
) -> RemoteEventMergeLayer:
    config = get_config_service().config.sync

    def on_created(task: Task) -> None:
        console.print(f"[green]+[/green] {task.title}")

    def on_updated(task: Task) -> None:
        console.print(f"[cyan]~[/cyan] {task.title}")

    def on_deleted(task_id: str) -> None:
        console.print(f"[red]-[/red] {task_id}")

    async with EventStreamClient(config) as client:
        layer = RemoteEventMergeLayer(
            session.store,
            client,
            board_id=board_id,
            skip=config.skip,
            on_task_created=on_created,
            on_task_updated=on_updated,
            on_task_deleted=on_deleted,
        )
        try:
            await asyncio.wait_for(layer.run(), timeout=duration)
        except TimeoutError:
            pass
    return layer


@command_wrapper
def sync(
    board: str | None = typer.Option(
        None, "--board", "-b", help="Only merge events for this board (default from config)"
    ),
    duration: float | None = typer.Option(
        None, "--duration", "-d", help="Stop after this many seconds (default: until Ctrl-C)"
    ),
) -> None:
    """Merge remote task events into the local boards.

    The snapshot is saved after every merged event.
    """
    config = get_config_service().config.sync
    if config.skip:
        format_warning("Remote sync is disabled (sync.skip is set)")
        return

    with open_session() as session:
        board_id = session.find_board(board).id if board else config.board_id
        unsubscribe = session.store.subscribe(lambda state, action: session.save())
        format_info(f"Listening for task events on {config.endpoint} (Ctrl-C to stop)")
        try:
            layer = asyncio.run(_listen(session, board_id, duration))
        except KeyboardInterrupt:
            format_info("Stopped")
            return
        finally:
            unsubscribe()

    if isinstance(layer.error, httpx.HTTPError):
        raise AppError(f"Event stream failed: {layer.error}", ERROR_NETWORK)
    if layer.error is not None:
        raise AppError(f"Event stream failed: {layer.error}")

    received = sum(status.received for status in layer.statuses.values())
    format_success(f"Sync finished: {received} event(s) merged")
