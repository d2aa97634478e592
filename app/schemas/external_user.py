"""Pydantic schemas for ExternalUser."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class ExternalUserCreate(BaseModel):
    """Schema for find-or-create / create of an external user."""

    channel_id: int
    platform_user_id: str = Field(min_length=1)
    platform_username: Optional[str] = None
    display_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class ExternalUserUpdate(BaseModel):
    """Schema for updating an external user. All fields optional."""

    display_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    is_blocked: Optional[bool] = None
