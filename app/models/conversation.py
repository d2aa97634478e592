"""Conversation model: a thread between one external user and one channel."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from app.constants.chat import ConversationPriority, ConversationStatus
from app.db import Base
from app.models.mixins import JSONDocument, TimestampMixin

_REUSABLE_STATUS_CLAUSE = text("status IN ('open', 'pending')")


class Conversation(Base, TimestampMixin):
    """
    At most one open/pending conversation exists per (channel, external user).

    The partial unique index enforces it at the storage layer so concurrent
    first-contact webhooks cannot both create a thread.
    """

    __tablename__ = "conversations"

    __table_args__ = (
        Index(
            "uq_conversations_channel_user_active",
            "channel_id",
            "external_user_id",
            unique=True,
            postgresql_where=_REUSABLE_STATUS_CLAUSE,
            sqlite_where=_REUSABLE_STATUS_CLAUSE,
        ),
        Index("ix_conversations_channel_updated", "channel_id", "updated_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    channel_id = Column(
        Integer, ForeignKey("channels.id", ondelete="CASCADE"), nullable=False
    )
    external_user_id = Column(
        Integer, ForeignKey("external_users.id", ondelete="CASCADE"), nullable=False
    )
    assigned_to_external_id = Column(String(256), nullable=True)
    status = Column(String(16), nullable=False, default=ConversationStatus.OPEN.value)
    priority = Column(
        String(16), nullable=False, default=ConversationPriority.NORMAL.value
    )
    subject = Column(String(200), nullable=True)
    first_message_at = Column(DateTime, nullable=True)
    last_message_at = Column(DateTime, nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    extra = Column("metadata", JSONDocument, nullable=True)

    messages = relationship(
        "Message",
        back_populates="conversation",
        order_by="Message.id",
    )
