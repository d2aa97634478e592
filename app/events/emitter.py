"""Notification events published to Redis pub/sub.

Each event is published on a pub/sub channel named after its type, e.g.
``chat.message.new``. Consumers (the dashboard backend, push notifiers) only
need to subscribe to the types they care about.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import redis
from pydantic import BaseModel, Field
from redis.exceptions import RedisError

from app.config import Settings
from app.exceptions import EmitError

logger = logging.getLogger(__name__)


class Event(BaseModel):
    """Envelope published for every notification."""

    id: str
    type: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: str
    payload: Dict[str, Any]
    metadata: Optional[Dict[str, str]] = None

    @classmethod
    def build(
        cls,
        event_type: str,
        payload: Dict[str, Any],
        source: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> "Event":
        return cls(
            id=f"{event_type}-{time.time_ns()}",
            type=event_type,
            source=source,
            payload=payload,
            metadata=metadata,
        )

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class EventEmitter(ABC):
    """Publishes named events with a JSON-serializable payload."""

    def emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        self.emit_with_metadata(event_type, payload, None)

    @abstractmethod
    def emit_with_metadata(
        self,
        event_type: str,
        payload: Dict[str, Any],
        metadata: Optional[Dict[str, str]],
    ) -> None: ...

    @abstractmethod
    def close(self) -> None: ...


class NoopEventEmitter(EventEmitter):
    """Used when the event bus is disabled. Drops everything."""

    def emit_with_metadata(self, event_type, payload, metadata) -> None:
        return None

    def close(self) -> None:
        return None


class RedisEventEmitter(EventEmitter):
    def __init__(self, client: redis.Redis, source: str) -> None:
        self.client = client
        self.source = source

    @classmethod
    def connect(cls, settings: Settings) -> "RedisEventEmitter":
        """Create a client and verify the server answers a PING."""
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            socket_connect_timeout=settings.event_connect_timeout_seconds,
            socket_timeout=settings.event_publish_timeout_seconds,
        )
        try:
            client.ping()
        except RedisError as e:
            client.close()
            raise EmitError(f"failed to connect to Redis: {e}") from e
        return cls(client, settings.event_source)

    def emit_with_metadata(
        self,
        event_type: str,
        payload: Dict[str, Any],
        metadata: Optional[Dict[str, str]],
    ) -> None:
        event = Event.build(event_type, payload, self.source, metadata)
        try:
            data = event.to_json()
        except ValueError as e:
            raise EmitError(f"failed to marshal event: {e}") from e
        try:
            self.client.publish(event_type, data)
        except RedisError as e:
            raise EmitError(f"failed to publish event: {e}") from e

    def close(self) -> None:
        self.client.close()


def build_event_emitter(settings: Settings) -> EventEmitter:
    if not settings.redis_enabled:
        logger.info("Event bus disabled, notifications will be dropped")
        return NoopEventEmitter()
    emitter = RedisEventEmitter.connect(settings)
    logger.info("Publishing events to %s", settings.redis_url)
    return emitter
