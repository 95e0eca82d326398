"""Toast emitter: one transient status message at a time.

Each ``show`` replaces the visible message and restarts its visibility
window. The previous clear is cancelled, so an older timer can never hide
a newer message. When no event loop is running the toast still expires,
lazily, the next time ``current`` is read.
"""

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime, timedelta, timezone
from typing import Callable

import structlog

from fhr_mart.models import Toast

logger = structlog.get_logger(__name__)

ToastListener = Callable[[str, Toast], None]

TOAST_SHOWN = "toast_shown"
TOAST_CLEARED = "toast_cleared"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class ToastEmitter:
    """Holds the current toast and schedules its automatic clearing."""

    def __init__(
        self,
        duration_seconds: float = 3.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._duration = duration_seconds
        self._clock = clock
        self._ids = itertools.count(1)
        self._current: Toast | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._listeners: list[ToastListener] = []

    @property
    def duration_seconds(self) -> float:
        return self._duration

    @property
    def current(self) -> Toast | None:
        """The visible toast, or ``None`` once its window has passed."""
        if self._current is not None and self._clock() >= self._current.expires_at:
            self._clear()
        return self._current

    def subscribe(self, listener: ToastListener) -> None:
        """Call *listener(event_type, toast)* on every show and clear."""
        self._listeners.append(listener)

    def show(self, message: str) -> Toast:
        """Display *message*, superseding any visible toast."""
        self._cancel_timer()
        now = self._clock()
        toast = Toast(
            id=next(self._ids),
            message=message,
            created_at=now,
            expires_at=now + timedelta(seconds=self._duration),
        )
        self._current = toast
        self._schedule_clear(toast.id)
        logger.debug("toast_shown", toast_id=toast.id, message=message)
        self._notify(TOAST_SHOWN, toast)
        return toast

    def dismiss(self) -> None:
        """Hide the current toast immediately."""
        self._cancel_timer()
        if self._current is not None:
            self._clear()

    def close(self) -> None:
        """Cancel any pending timer; used when the owning session ends."""
        self._cancel_timer()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _schedule_clear(self, toast_id: int) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._handle = loop.call_later(self._duration, self._expire, toast_id)

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _expire(self, toast_id: int) -> None:
        self._handle = None
        if self._current is not None and self._current.id == toast_id:
            self._clear()

    def _clear(self) -> None:
        toast = self._current
        self._current = None
        if toast is not None:
            logger.debug("toast_cleared", toast_id=toast.id)
            self._notify(TOAST_CLEARED, toast)

    def _notify(self, event_type: str, toast: Toast) -> None:
        for listener in list(self._listeners):
            try:
                listener(event_type, toast)
            except Exception:
                logger.warning("toast_listener_failed", event_type=event_type, exc_info=True)
