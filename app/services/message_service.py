"""Message threading (inbound) and outbound delivery."""

from __future__ import annotations

import logging
from typing import Optional

from app.constants.chat import (
    MessageDirection,
    MessageStatus,
    SenderType,
)
from app.constants.events import (
    EVENT_CONVERSATION_CREATED,
    EVENT_MESSAGE_DELIVERED,
    EVENT_MESSAGE_READ,
    EVENT_NEW_MESSAGE,
)
from app.events.dispatcher import EventDispatcher
from app.exceptions import (
    ConversationNotFoundError,
    ConversationResolutionError,
    MessageNotFoundError,
    MessagePersistenceError,
    UserResolutionError,
)
from app.models import Conversation, ExternalUser, Message
from app.repositories import (
    ConversationRepository,
    ExternalUserRepository,
    MessageRepository,
)
from app.schemas.external_user import ExternalUserCreate
from app.schemas.message import (
    IncomingMessageRequest,
    MessageCreate,
    OutgoingMessageRequest,
)
from app.utils.pagination import DEFAULT_MESSAGE_LIMIT, normalize_limit, normalize_offset

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(
        self,
        users: ExternalUserRepository,
        conversations: ConversationRepository,
        messages: MessageRepository,
        dispatcher: EventDispatcher,
    ) -> None:
        self.users = users
        self.conversations = conversations
        self.messages = messages
        self.dispatcher = dispatcher

    def process_incoming_message(self, request: IncomingMessageRequest) -> Message:
        """
        Thread an inbound platform message.

        Resolves the sender to an external user, reuses their open (or pending)
        conversation on the channel or starts a new one, then appends the
        message. The three writes are not one transaction: a user or
        conversation created before a failed message insert stays.

        Raises:
            UserResolutionError, ConversationResolutionError,
            MessagePersistenceError: wrapping the underlying failure.
        """
        try:
            user, _ = self.users.find_or_create(
                ExternalUserCreate(
                    channel_id=request.channel_id,
                    platform_user_id=request.platform_user_id,
                    display_name=request.user_display_name,
                    phone_number=request.user_phone,
                    email=request.user_email,
                )
            )
        except Exception as e:
            raise UserResolutionError(f"failed to find/create user: {e}") from e

        try:
            conversation, created = self.conversations.get_or_create_open_for_user(
                request.channel_id, user.id
            )
        except Exception as e:
            raise ConversationResolutionError(
                f"failed to get/create conversation: {e}"
            ) from e
        if created:
            self._emit_conversation_created(conversation)

        try:
            message = self.messages.create(
                MessageCreate(
                    conversation_id=conversation.id,
                    platform_message_id=request.platform_message_id,
                    sender_type=SenderType.EXTERNAL,
                    sender_id=user.id,
                    content=request.content,
                    message_type=request.message_type,
                    media_url=request.media_url,
                    direction=MessageDirection.INBOUND,
                    status=MessageStatus.RECEIVED,
                    metadata=request.metadata,
                )
            )
        except Exception as e:
            raise MessagePersistenceError(f"failed to create message: {e}") from e

        self._touch_conversation(conversation.id)
        self._touch_user(user)

        self.dispatcher.dispatch(
            EVENT_NEW_MESSAGE,
            {
                "message_id": message.id,
                "conversation_id": conversation.id,
                "channel_id": request.channel_id,
                "external_user_id": user.id,
                "content": message.content,
                "message_type": message.message_type,
                "direction": MessageDirection.INBOUND.value,
                "timestamp": message.created_at.isoformat(),
            },
        )
        return message

    def send_outgoing_message(
        self, conversation_id: int, request: OutgoingMessageRequest
    ) -> Message:
        conversation = self.conversations.get_by_id(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)

        try:
            message = self.messages.create(
                MessageCreate(
                    conversation_id=conversation.id,
                    sender_type=SenderType.INTERNAL,
                    sender_id=request.sender_id,
                    content=request.content,
                    message_type=request.message_type,
                    media_url=request.media_url,
                    direction=MessageDirection.OUTBOUND,
                    status=MessageStatus.SENT,
                    metadata=request.metadata,
                )
            )
        except Exception as e:
            raise MessagePersistenceError(f"failed to create message: {e}") from e

        self._touch_conversation(conversation.id)

        self.dispatcher.dispatch(
            EVENT_NEW_MESSAGE,
            {
                "message_id": message.id,
                "conversation_id": conversation.id,
                "channel_id": conversation.channel_id,
                "content": message.content,
                "message_type": message.message_type,
                "direction": MessageDirection.OUTBOUND.value,
                "timestamp": message.created_at.isoformat(),
            },
        )
        return message

    def get_message_history(
        self,
        conversation_id: int,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        before_id: Optional[int] = None,
    ) -> list[Message]:
        """Newest first. `before_id` pages backwards from a known message."""
        return self.messages.list_by_conversation(
            conversation_id,
            limit=normalize_limit(limit, default=DEFAULT_MESSAGE_LIMIT),
            offset=normalize_offset(offset),
            before_id=before_id,
        )

    def mark_delivered(self, message_id: int) -> Message:
        return self._set_status(message_id, MessageStatus.DELIVERED, EVENT_MESSAGE_DELIVERED)

    def mark_read(self, message_id: int) -> Message:
        return self._set_status(message_id, MessageStatus.READ, EVENT_MESSAGE_READ)

    def _set_status(
        self, message_id: int, status: MessageStatus, event_type: str
    ) -> Message:
        # No ordering check: a read receipt may arrive before the delivery one
        message = self.messages.update_status(message_id, status)
        if message is None:
            raise MessageNotFoundError(message_id)
        self.dispatcher.dispatch(
            event_type, {"message_id": message.id, "status": status.value}
        )
        return message

    def _emit_conversation_created(self, conversation: Conversation) -> None:
        self.dispatcher.dispatch(
            EVENT_CONVERSATION_CREATED,
            {
                "conversation_id": conversation.id,
                "channel_id": conversation.channel_id,
                "external_user_id": conversation.external_user_id,
                "status": conversation.status,
                "priority": conversation.priority,
            },
        )

    def _touch_conversation(self, conversation_id: int) -> None:
        try:
            self.conversations.touch_last_message(conversation_id)
        except Exception as e:
            logger.warning(
                "Failed to update last message time of conversation %s: %s",
                conversation_id,
                e,
            )

    def _touch_user(self, user: ExternalUser) -> None:
        try:
            self.users.touch_last_seen(user.id)
        except Exception as e:
            logger.warning("Failed to update last seen of user %s: %s", user.id, e)
