from app.events.dispatcher import EventDispatcher
from app.events.emitter import (
    Event,
    EventEmitter,
    NoopEventEmitter,
    RedisEventEmitter,
    build_event_emitter,
)

__all__ = [
    "Event",
    "EventDispatcher",
    "EventEmitter",
    "NoopEventEmitter",
    "RedisEventEmitter",
    "build_event_emitter",
]
