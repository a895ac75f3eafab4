"""HTTP event stream client for remote task events."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from taskflow.models.config_models import SyncConfig

logger = logging.getLogger(__name__)


class EventStreamClient:
    """Streams newline-delimited JSON task events over httpx.

    Each subscription is a long-lived ``GET {endpoint}/v1/events/tasks/{kind}``
    whose body is one JSON object per line. Only connect and write timeouts
    apply; an idle stream is not a failure.

    Args:
        config: Sync settings (endpoint, timeout). Defaults to the saved config.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: SyncConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if config is None:
            from taskflow.services.config_service import get_config_service

            config = get_config_service().config.sync
        self.base_url = config.endpoint
        self.timeout = config.timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> EventStreamClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_headers(self) -> dict[str, str]:
        return {"Accept": "application/x-ndjson"}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, read=None),
                headers=self._get_headers(),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @asynccontextmanager
    async def open(
        self, kind: str, board_id: str | None = None
    ) -> AsyncIterator[AsyncIterator[dict[str, Any]]]:
        """Open one event stream.

        Raises:
            httpx.HTTPStatusError: If the server rejects the subscription
            httpx.RequestError: If the connection fails
        """
        client = await self._get_client()
        params = {"boardId": board_id} if board_id else None
        async with client.stream("GET", f"/v1/events/tasks/{kind}", params=params) as response:
            response.raise_for_status()
            logger.debug("Subscribed to %s (%s)", kind, response.url)
            yield self._iter_events(response)

    @staticmethod
    async def _iter_events(response: httpx.Response) -> AsyncIterator[dict[str, Any]]:
        async for line in response.aiter_lines():
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Ignoring non-JSON event line: %.80s", line)
                continue
            if isinstance(event, dict):
                yield event
            else:
                logger.warning("Ignoring non-object event: %.80s", line)
