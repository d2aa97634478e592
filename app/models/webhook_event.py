"""
WebhookEvent model: append-only audit record of one inbound webhook call.

Rows are written before any processing and finalized exactly once.
processed=True means "handled", not "succeeded"; check error for the outcome.
"""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from app.db import Base
from app.models.mixins import utcnow


class WebhookEvent(Base):
    __tablename__ = "webhook_events"

    __table_args__ = (
        Index(
            "ix_webhook_events_channel_processed_created",
            "channel_id",
            "processed",
            "created_at",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    channel_id = Column(
        Integer, ForeignKey("channels.id", ondelete="CASCADE"), nullable=False
    )
    event_type = Column(String(64), nullable=False)
    payload = Column(Text, nullable=False)  # canonical JSON, stored verbatim
    processed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    processed_at = Column(DateTime, nullable=True)
    error = Column(Text, nullable=True)
