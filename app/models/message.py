"""Message model: one chat message inside a conversation."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import JSONDocument, utcnow


class Message(Base):
    """Immutable except for status and the delivered_at/read_at it gates."""

    __tablename__ = "messages"

    __table_args__ = (
        Index("ix_messages_conversation_created", "conversation_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    conversation_id = Column(
        Integer, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
    )
    platform_message_id = Column(String(256), nullable=True)
    sender_type = Column(String(16), nullable=False)
    sender_id = Column(Integer, nullable=True)
    content = Column(Text, nullable=False)
    message_type = Column(String(16), nullable=False)
    media_url = Column(String(1024), nullable=True)
    direction = Column(String(16), nullable=False)  # 'inbound' | 'outbound'
    status = Column(String(16), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    delivered_at = Column(DateTime, nullable=True)
    read_at = Column(DateTime, nullable=True)
    extra = Column("metadata", JSONDocument, nullable=True)

    conversation = relationship("Conversation", back_populates="messages")
