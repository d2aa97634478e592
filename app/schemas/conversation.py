"""Pydantic schemas for Conversation."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field

from app.constants.chat import ConversationPriority, ConversationStatus


class ConversationCreate(BaseModel):
    channel_id: int
    external_user_id: int
    subject: Optional[str] = Field(default=None, max_length=200)
    priority: ConversationPriority = ConversationPriority.NORMAL


class ConversationUpdate(BaseModel):
    """Schema for updating a conversation. Only set fields are applied."""

    assigned_to_external_id: Optional[str] = None
    status: Optional[ConversationStatus] = None
    priority: Optional[ConversationPriority] = None
    subject: Optional[str] = Field(default=None, max_length=200)
    metadata: Optional[dict[str, Any]] = None


class ConversationRead(BaseModel):
    id: int
    channel_id: int
    external_user_id: int
    assigned_to_external_id: Optional[str] = None
    status: ConversationStatus
    priority: ConversationPriority
    subject: Optional[str] = None
    first_message_at: Optional[datetime] = None
    last_message_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("extra", "metadata")
    )

    model_config = {"from_attributes": True}


# -----------------------------------------------------------------------------
# Request bodies for the conversation API
# -----------------------------------------------------------------------------


class ConversationAssignRequest(BaseModel):
    assignee_id: str = Field(min_length=1)


class ConversationStatusRequest(BaseModel):
    status: ConversationStatus


class ConversationPriorityRequest(BaseModel):
    priority: ConversationPriority
