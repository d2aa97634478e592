"""Append-only audit log of every webhook the service received."""

from __future__ import annotations

from typing import Optional

from app.models import WebhookEvent
from app.models.mixins import utcnow
from app.repositories.base import SQLAlchemyRepository, WebhookEventRepository


class SQLAlchemyWebhookEventRepository(SQLAlchemyRepository, WebhookEventRepository):
    def create(self, channel_id: int, event_type: str, payload: str) -> WebhookEvent:
        event = WebhookEvent(
            channel_id=channel_id,
            event_type=event_type,
            payload=payload,
            processed=False,
            created_at=utcnow(),
        )
        return self._save(event, "create webhook event")

    def get_by_id(self, event_id: int) -> Optional[WebhookEvent]:
        with self._guard("get webhook event"):
            return (
                self.db.query(WebhookEvent).filter(WebhookEvent.id == event_id).first()
            )

    def list_unprocessed(self, channel_id: int, limit: int = 20) -> list[WebhookEvent]:
        """Oldest first, for replay."""
        with self._guard("list unprocessed webhook events"):
            return (
                self.db.query(WebhookEvent)
                .filter(
                    WebhookEvent.channel_id == channel_id,
                    WebhookEvent.processed.is_(False),
                )
                .order_by(WebhookEvent.created_at.asc(), WebhookEvent.id.asc())
                .limit(limit)
                .all()
            )

    def mark_processed(self, event_id: int) -> None:
        self._finish(event_id, error=None)

    def mark_failed(self, event_id: int, error: str) -> None:
        self._finish(event_id, error=error)

    def _finish(self, event_id: int, error: Optional[str]) -> None:
        with self._guard("finalize webhook event"):
            self.db.query(WebhookEvent).filter(WebhookEvent.id == event_id).update(
                {
                    WebhookEvent.processed: True,
                    WebhookEvent.processed_at: utcnow(),
                    WebhookEvent.error: error,
                },
                synchronize_session="evaluate",
            )
            self.db.commit()
