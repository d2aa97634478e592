"""Messages API: send, history, delivery and read receipts."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.auth.jwt import get_current_claims
from app.exceptions import MessagePersistenceError
from app.models import Conversation
from app.routers.utils.dependencies import get_conversation_by_id, get_message_service
from app.schemas.message import (
    MessageHistoryRead,
    MessageRead,
    OutgoingMessageRequest,
)
from app.services.message_service import MessageService
from app.utils.pagination import DEFAULT_MESSAGE_LIMIT, normalize_limit, normalize_offset

router = APIRouter(
    tags=["messages"],
    dependencies=[Depends(get_current_claims)],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    body: OutgoingMessageRequest,
    conversation: Conversation = Depends(get_conversation_by_id),
    service: MessageService = Depends(get_message_service),
) -> MessageRead:
    """Send an agent reply into a conversation."""
    try:
        message = service.send_outgoing_message(conversation.id, body)
    except MessagePersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return MessageRead.model_validate(message)


@router.get(
    "/conversations/{conversation_id}/messages", response_model=MessageHistoryRead
)
def get_message_history(
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    before: Optional[int] = Query(None, description="Only messages with id < before"),
    conversation: Conversation = Depends(get_conversation_by_id),
    service: MessageService = Depends(get_message_service),
) -> MessageHistoryRead:
    """Newest first."""
    messages = service.get_message_history(
        conversation.id, limit=limit, offset=offset, before_id=before
    )
    return MessageHistoryRead(
        data=[MessageRead.model_validate(m) for m in messages],
        limit=normalize_limit(limit, default=DEFAULT_MESSAGE_LIMIT),
        offset=normalize_offset(offset),
    )


@router.post("/messages/{message_id}/delivered", response_model=MessageRead)
def mark_message_delivered(
    message_id: int,
    service: MessageService = Depends(get_message_service),
) -> MessageRead:
    message = service.mark_delivered(message_id)
    return MessageRead.model_validate(message)


@router.post("/messages/{message_id}/read", response_model=MessageRead)
def mark_message_read(
    message_id: int,
    service: MessageService = Depends(get_message_service),
) -> MessageRead:
    message = service.mark_read(message_id)
    return MessageRead.model_validate(message)
