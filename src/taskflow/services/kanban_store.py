"""Session-scoped owner of the kanban snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from taskflow.models.actions import InvalidActionError, KanbanAction, parse_action
from taskflow.models.core import KanbanState
from taskflow.reducers import kanban_reducer

logger = logging.getLogger(__name__)

Listener = Callable[[KanbanState, KanbanAction], None]


class KanbanStore:
    """Holds one ``KanbanState`` and replaces it wholesale on every dispatch.

    Local commands and remote events both go through :meth:`dispatch`, so
    they are serialized on the caller's thread (or event loop).
    """

    def __init__(self, state: KanbanState | None = None):
        self._state = state if state is not None else KanbanState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> KanbanState:
        return self._state

    def dispatch(self, action: KanbanAction) -> KanbanState:
        """Apply ``action`` and notify listeners with the new snapshot."""
        self._state = kanban_reducer(self._state, action)
        for listener in list(self._listeners):
            try:
                listener(self._state, action)
            except Exception:
                logger.exception("Store listener failed for %s", action.type)
        return self._state

    def dispatch_raw(self, data: Mapping[str, Any]) -> KanbanState:
        """Parse a wire ``{type, payload}`` action and dispatch it.

        A known type with an invalid payload is logged and dropped.
        """
        try:
            action = parse_action(data)
        except InvalidActionError as e:
            logger.warning("Rejected action: %s", e)
            return self._state
        return self.dispatch(action)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
