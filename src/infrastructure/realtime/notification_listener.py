from __future__ import annotations

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

RowHandler = Callable[[dict[str, Any] | None], Awaitable[Any]]


class SubscriptionState(str, Enum):
    INIT = "INIT"
    SUBSCRIBING = "SUBSCRIBING"
    SUBSCRIBED = "SUBSCRIBED"
    ERROR = "ERROR"
    CLOSED = "CLOSED"


def extract_new_row(payload: Any) -> dict[str, Any] | None:
    """Return the new row of a postgres_changes payload, or None.

    Realtime delivers ``{"data": {"type", "record", "old_record", ...}}``;
    the flat ``record``/``new`` shapes are accepted too.
    """
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict) and "record" in data:
        return data.get("record") or None
    for key in ("record", "new"):
        if key in payload:
            return payload.get(key) or None
    return None


class NotificationListener:
    """Subscribes to row changes on the notifications table and feeds them,
    one at a time, to ``handler``.

    Callbacks from the realtime client only enqueue; a single worker task
    drains the queue so a slow or failing send never blocks the socket.
    There is no reconnect: if the channel errors the state stays ERROR.
    """

    def __init__(
        self,
        client: Any,
        handler: RowHandler,
        *,
        channel_name: str = "new_notification_channel",
        schema: str = "public",
        table: str = "notifications",
        event: str = "*",
    ) -> None:
        self._client = client
        self._handler = handler
        self.channel_name = channel_name
        self.schema = schema
        self.table = table
        self.event = event
        self.state = SubscriptionState.INIT
        self.last_error: Exception | None = None
        self._channel: Any = None
        self._queue: asyncio.Queue[dict[str, Any] | None] | None = None
        self._worker: asyncio.Task | None = None

    async def start(self) -> None:
        if self.state is not SubscriptionState.INIT:
            raise RuntimeError(f"Listener already started (state={self.state.value})")
        self.state = SubscriptionState.SUBSCRIBING
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._drain(), name=f"{self.channel_name}-worker")

        channel = self._client.channel(self.channel_name)
        channel.on_postgres_changes(
            self.event, schema=self.schema, table=self.table, callback=self._on_change
        )
        self._channel = channel
        try:
            await channel.subscribe(self._on_status)
        except Exception as exc:
            self._on_status("CHANNEL_ERROR", exc)
            raise

    async def stop(self) -> None:
        if self._channel is not None:
            try:
                await self._client.remove_channel(self._channel)
            except Exception:
                logger.exception("Failed to remove channel %s", self.channel_name)
            self._channel = None
        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None
        self.state = SubscriptionState.CLOSED
        logger.info("Stopped listening on %s", self.channel_name)

    async def join(self) -> None:
        """Wait until every queued event has been handled."""
        if self._queue is not None:
            await self._queue.join()

    def _on_change(self, payload: Any) -> None:
        logger.info("Change received! %s", payload)
        if self._queue is None:
            logger.error("Change received before the listener started, dropping it")
            return
        self._queue.put_nowait(extract_new_row(payload))

    def _on_status(self, status: Any, err: Exception | None = None) -> None:
        status = getattr(status, "value", status)
        if status == "SUBSCRIBED":
            self.state = SubscriptionState.SUBSCRIBED
            logger.info("Successfully subscribed to %s!", self.channel_name)
        elif status in ("CHANNEL_ERROR", "TIMED_OUT"):
            self.state = SubscriptionState.ERROR
            self.last_error = err
            logger.error("Subscription error on %s (%s): %s", self.channel_name, status, err)
        elif status == "CLOSED":
            self.state = SubscriptionState.CLOSED
            logger.warning("Channel %s closed", self.channel_name)

    async def _drain(self) -> None:
        assert self._queue is not None
        while True:
            row = await self._queue.get()
            try:
                await self._handler(row)
            except Exception:
                logger.exception("Notification handler failed")
            finally:
                self._queue.task_done()
