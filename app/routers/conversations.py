"""Conversations API: list per channel, get, assign, status, priority."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.auth.jwt import get_current_claims
from app.constants.chat import ConversationStatus
from app.models import Channel
from app.routers.utils.dependencies import get_channel_by_id, get_conversation_service
from app.schemas.conversation import (
    ConversationAssignRequest,
    ConversationPriorityRequest,
    ConversationRead,
    ConversationStatusRequest,
)
from app.services.conversation_service import ConversationService

router = APIRouter(
    tags=["conversations"],
    dependencies=[Depends(get_current_claims)],
    responses={
        404: {"description": "Not found"},
        409: {"description": "Conflicts with another active conversation"},
    },
)


@router.get(
    "/channels/{channel_id}/conversations", response_model=list[ConversationRead]
)
def list_channel_conversations(
    status: Optional[ConversationStatus] = Query(None),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    channel: Channel = Depends(get_channel_by_id),
    service: ConversationService = Depends(get_conversation_service),
) -> list[ConversationRead]:
    """Most recently active first. Out-of-range limit/offset fall back to defaults."""
    conversations = service.list_by_channel(
        channel.id, status=status, limit=limit, offset=offset
    )
    return [ConversationRead.model_validate(c) for c in conversations]


@router.get("/conversations/{conversation_id}", response_model=ConversationRead)
def get_conversation(
    conversation_id: int,
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationRead:
    conversation = service.get_conversation(conversation_id)
    return ConversationRead.model_validate(conversation)


@router.post(
    "/conversations/{conversation_id}/assign", response_model=ConversationRead
)
def assign_conversation(
    conversation_id: int,
    body: ConversationAssignRequest,
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationRead:
    conversation = service.assign(conversation_id, body.assignee_id)
    return ConversationRead.model_validate(conversation)


@router.patch(
    "/conversations/{conversation_id}/status", response_model=ConversationRead
)
def update_conversation_status(
    conversation_id: int,
    body: ConversationStatusRequest,
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationRead:
    conversation = service.update_status(conversation_id, body.status)
    return ConversationRead.model_validate(conversation)


@router.patch(
    "/conversations/{conversation_id}/priority", response_model=ConversationRead
)
def update_conversation_priority(
    conversation_id: int,
    body: ConversationPriorityRequest,
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationRead:
    conversation = service.update_priority(conversation_id, body.priority)
    return ConversationRead.model_validate(conversation)
