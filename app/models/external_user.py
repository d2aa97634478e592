"""ExternalUser model: a platform end-user as seen through one channel."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from app.db import Base
from app.models.mixins import JSONDocument, utcnow


class ExternalUser(Base):
    """Scoped to a single channel; the same person on two channels is two rows."""

    __tablename__ = "external_users"

    __table_args__ = (
        UniqueConstraint(
            "channel_id",
            "platform_user_id",
            name="uq_external_users_channel_platform_user",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    channel_id = Column(
        Integer, ForeignKey("channels.id", ondelete="CASCADE"), nullable=False
    )
    platform_user_id = Column(String(256), nullable=False)
    platform_username = Column(String(256), nullable=True)
    display_name = Column(String(256), nullable=True)
    phone_number = Column(String(64), nullable=True)
    email = Column(String(256), nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    extra = Column("metadata", JSONDocument, nullable=True)
    first_seen_at = Column(DateTime, nullable=False, default=utcnow)
    last_seen_at = Column(DateTime, nullable=True)
    is_blocked = Column(Boolean, nullable=False, default=False)
