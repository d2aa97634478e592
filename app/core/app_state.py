from __future__ import annotations

from typing import Optional

from app.config import Settings
from app.events.dispatcher import EventDispatcher
from app.events.emitter import EventEmitter, NoopEventEmitter, build_event_emitter


class AppState:
    """Process-wide collaborators created at startup and torn down at shutdown."""

    def __init__(self) -> None:
        self.dispatcher: Optional[EventDispatcher] = None

    def start(self, settings: Settings, emitter: Optional[EventEmitter] = None) -> None:
        if self.dispatcher is not None:
            return
        self.dispatcher = EventDispatcher(
            emitter or build_event_emitter(settings),
            max_workers=settings.event_dispatch_workers,
            max_pending=settings.event_dispatch_max_pending,
        )

    def get_dispatcher(self) -> EventDispatcher:
        if self.dispatcher is None:
            # Outside the app lifespan (scripts, shells): drop notifications
            self.dispatcher = EventDispatcher(NoopEventEmitter())
        return self.dispatcher

    def stop(self) -> None:
        if self.dispatcher is not None:
            self.dispatcher.shutdown()
            self.dispatcher = None


state = AppState()
