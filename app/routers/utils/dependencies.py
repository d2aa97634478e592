from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.app_state import state
from app.db import get_db
from app.events.dispatcher import EventDispatcher
from app.exceptions import ChannelNotFoundError, ConversationNotFoundError
from app.models import Channel, Conversation
from app.repositories import (
    SQLAlchemyChannelRepository,
    SQLAlchemyConversationRepository,
    SQLAlchemyExternalUserRepository,
    SQLAlchemyMessageRepository,
    SQLAlchemyWebhookEventRepository,
)
from app.services.conversation_service import ConversationService
from app.services.message_service import MessageService
from app.services.webhook_service import WebhookService


def get_event_dispatcher() -> EventDispatcher:
    return state.get_dispatcher()


def get_message_service(
    db: Session = Depends(get_db),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
) -> MessageService:
    return MessageService(
        users=SQLAlchemyExternalUserRepository(db),
        conversations=SQLAlchemyConversationRepository(db),
        messages=SQLAlchemyMessageRepository(db),
        dispatcher=dispatcher,
    )


def get_conversation_service(
    db: Session = Depends(get_db),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
) -> ConversationService:
    return ConversationService(SQLAlchemyConversationRepository(db), dispatcher)


def get_webhook_service(
    db: Session = Depends(get_db),
    message_service: MessageService = Depends(get_message_service),
) -> WebhookService:
    return WebhookService(SQLAlchemyWebhookEventRepository(db), message_service)


def get_channel_by_id(
    channel_id: int,
    db: Session = Depends(get_db),
) -> Channel:
    """FastAPI dependency to get a channel by ID."""
    channel = SQLAlchemyChannelRepository(db).get_by_id(channel_id)
    if channel is None:
        raise ChannelNotFoundError(channel_id)
    return channel


def get_conversation_by_id(
    conversation_id: int,
    db: Session = Depends(get_db),
) -> Conversation:
    """FastAPI dependency to get a conversation by ID."""
    conversation = SQLAlchemyConversationRepository(db).get_by_id(conversation_id)
    if conversation is None:
        raise ConversationNotFoundError(conversation_id)
    return conversation
