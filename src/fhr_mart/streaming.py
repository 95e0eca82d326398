"""SSE streaming manager for storefront notifications.

Provides a per-session event bus that the storefront session writes to
(toasts, orders, assistant replies) and that the API consumes via
``async for`` iteration.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, AsyncIterator

import structlog

from fhr_mart.models import StorefrontEvent

logger = structlog.get_logger(__name__)

# Canonical event type constants
EVENT_TOAST_SHOWN = "toast_shown"
EVENT_TOAST_CLEARED = "toast_cleared"
EVENT_ORDER_PLACED = "order_placed"
EVENT_ASSISTANT_REPLY = "assistant_reply"
EVENT_SESSION_CLOSED = "session_closed"


class StorefrontEventStream:
    """In-memory pub/sub for storefront session SSE events.

    Each subscriber gets its own ``asyncio.Queue``. Publishing never
    blocks, so synchronous session operations can emit events directly.
    """

    def __init__(self, max_queue_size: int = 256, max_history: int = 100) -> None:
        self._queues: dict[str, list[asyncio.Queue[StorefrontEvent | None]]] = {}
        self._max_queue_size = max_queue_size
        self._max_history = max_history
        self._history: dict[str, list[StorefrontEvent]] = {}

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish(
        self,
        session_id: str,
        event_type: str,
        data: dict[str, Any] | None = None,
        message: str = "",
    ) -> StorefrontEvent:
        """Push an event to all subscribers of *session_id*."""
        event = StorefrontEvent(
            event_type=event_type,
            session_id=session_id,
            data=data or {},
            message=message,
            timestamp=datetime.now(tz=timezone.utc),
        )

        history = self._history.setdefault(session_id, [])
        history.append(event)
        if len(history) > self._max_history:
            del history[: len(history) - self._max_history]

        queues = self._queues.get(session_id, [])
        for queue in queues:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(
                    "event_queue_full",
                    session_id=session_id,
                    event_type=event_type,
                )

        logger.debug(
            "event_published",
            session_id=session_id,
            event_type=event_type,
            subscribers=len(queues),
        )
        return event

    # ------------------------------------------------------------------
    # Subscribing
    # ------------------------------------------------------------------

    async def subscribe(
        self, session_id: str, replay: bool = False
    ) -> AsyncIterator[StorefrontEvent]:
        """Yield events for *session_id* as they arrive.

        Terminates on a ``session_closed`` event or when ``close`` is
        called. Pass ``replay=True`` to receive past events first.
        """
        queue: asyncio.Queue[StorefrontEvent | None] = asyncio.Queue(
            maxsize=self._max_queue_size
        )
        self._queues.setdefault(session_id, []).append(queue)

        if replay:
            for past_event in list(self._history.get(session_id, [])):
                yield past_event

        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
                if event.event_type == EVENT_SESSION_CLOSED:
                    break
        finally:
            session_queues = self._queues.get(session_id, [])
            if queue in session_queues:
                session_queues.remove(queue)

    # ------------------------------------------------------------------
    # Lifecycle helpers
    # ------------------------------------------------------------------

    def subscriber_count(self, session_id: str) -> int:
        return len(self._queues.get(session_id, []))

    def close(self, session_id: str) -> None:
        """Signal all subscribers of *session_id* to stop iterating."""
        for queue in self._queues.get(session_id, []):
            try:
                queue.put_nowait(None)
            except asyncio.QueueFull:
                logger.warning("event_queue_full_on_close", session_id=session_id)
        self._queues.pop(session_id, None)

    def get_history(self, session_id: str) -> list[StorefrontEvent]:
        """Return the retained events for *session_id*."""
        return list(self._history.get(session_id, []))

    def clear(self, session_id: str) -> None:
        """Remove all state associated with a session."""
        self.close(session_id)
        self._history.pop(session_id, None)
