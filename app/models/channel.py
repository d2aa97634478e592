"""Channel model: one platform integration owned by an organization."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.constants.chat import ChannelStatus
from app.db import Base
from app.models.mixins import JSONDocument, TimestampMixin


class Channel(Base, TimestampMixin):
    """A platform integration (e.g. one WhatsApp Business number).

    access_token is stored but never exposed by any read schema.
    """

    __tablename__ = "channels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    platform = Column(String(32), nullable=False)
    name = Column(String(100), nullable=False)
    account_identifier = Column(String(256), nullable=False)
    status = Column(String(16), nullable=False, default=ChannelStatus.PENDING.value)
    webhook_secret = Column(String(256), nullable=True)
    access_token = Column(Text, nullable=True)
    config = Column(JSONDocument, nullable=True)
    last_message_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    organization = relationship("Organization", back_populates="channels")
