"""Pydantic schemas for WebhookEvent (read-only audit trail)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class WebhookEventRead(BaseModel):
    id: int
    channel_id: int
    event_type: str
    payload: str
    processed: bool
    created_at: datetime
    processed_at: Optional[datetime] = None
    error: Optional[str] = None

    model_config = {"from_attributes": True}


class WebhookEventList(BaseModel):
    items: list[WebhookEventRead]
