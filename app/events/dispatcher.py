"""Fire-and-forget delivery of events off the request path.

A single worker (the default) keeps events in submission order. When the
queue is full new events are dropped with a warning rather than blocking the
caller: notifications are best effort.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Dict, Optional

from app.events.emitter import EventEmitter

logger = logging.getLogger(__name__)


class EventDispatcher:
    def __init__(
        self,
        emitter: EventEmitter,
        max_workers: int = 1,
        max_pending: int = 1000,
    ) -> None:
        self.emitter = emitter
        self.max_pending = max_pending
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="event-dispatch"
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()
        self._closed = False

    def dispatch(
        self,
        event_type: str,
        payload: Dict[str, Any],
        metadata: Optional[Dict[str, str]] = None,
    ) -> bool:
        """Queue an event. Returns False if it was dropped."""
        with self._lock:
            if self._closed:
                logger.warning("Dispatcher closed, dropping %s event", event_type)
                return False
            if len(self._pending) >= self.max_pending:
                logger.warning(
                    "Event queue full (%d pending), dropping %s event",
                    len(self._pending),
                    event_type,
                )
                return False
            future = self._executor.submit(
                self.emitter.emit_with_metadata, event_type, payload, metadata
            )
            self._pending.add(future)
        future.add_done_callback(lambda f: self._on_done(f, event_type))
        return True

    def _on_done(self, future: Future, event_type: str) -> None:
        with self._lock:
            self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Failed to emit %s event", event_type, exc_info=exc)

    def wait_idle(self, timeout: Optional[float] = None) -> None:
        """Block until every queued event has been attempted."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=True)
        self.emitter.close()
