"""Pydantic schemas for Message."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field

from app.constants.chat import (
    MessageDirection,
    MessageStatus,
    MessageType,
    SenderType,
)


class MessageCreate(BaseModel):
    """Fully-specified message row; services decide direction/status."""

    conversation_id: int
    platform_message_id: Optional[str] = None
    sender_type: SenderType
    sender_id: Optional[int] = None
    content: str
    message_type: MessageType = MessageType.TEXT
    media_url: Optional[str] = None
    direction: MessageDirection
    status: MessageStatus
    created_at: Optional[datetime] = None
    metadata: Optional[dict[str, Any]] = None


class MessageRead(BaseModel):
    id: int
    conversation_id: int
    platform_message_id: Optional[str] = None
    sender_type: SenderType
    sender_id: Optional[int] = None
    content: str
    message_type: MessageType
    media_url: Optional[str] = None
    direction: MessageDirection
    status: MessageStatus
    created_at: datetime
    delivered_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("extra", "metadata")
    )

    model_config = {"from_attributes": True}


class MessageHistoryRead(BaseModel):
    """Newest-first page of a conversation's messages."""

    data: list[MessageRead]
    limit: int
    offset: int


# -----------------------------------------------------------------------------
# Service requests
# -----------------------------------------------------------------------------


class IncomingMessageRequest(BaseModel):
    """A platform message to thread into a conversation."""

    channel_id: int
    platform_user_id: str = Field(min_length=1)
    content: str = Field(min_length=1)
    platform_message_id: Optional[str] = None
    user_display_name: Optional[str] = None
    user_phone: Optional[str] = None
    user_email: Optional[str] = None
    message_type: MessageType = MessageType.TEXT
    media_url: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class OutgoingMessageRequest(BaseModel):
    """An agent- or system-authored reply. Also the POST body of the API."""

    content: str = Field(min_length=1)
    message_type: MessageType = MessageType.TEXT
    media_url: Optional[str] = None
    sender_id: Optional[int] = None
    metadata: Optional[dict[str, Any]] = None
