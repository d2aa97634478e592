"""Agent-facing conversation management."""

from __future__ import annotations

from typing import Any, Dict, Optional

from app.constants.chat import ConversationPriority, ConversationStatus
from app.constants.events import EVENT_CONVERSATION_UPDATED
from app.events.dispatcher import EventDispatcher
from app.exceptions import ConversationNotFoundError
from app.models import Conversation
from app.repositories import ConversationRepository
from app.schemas.conversation import ConversationUpdate
from app.utils.pagination import normalize_limit, normalize_offset


class ConversationService:
    def __init__(
        self, conversations: ConversationRepository, dispatcher: EventDispatcher
    ) -> None:
        self.conversations = conversations
        self.dispatcher = dispatcher

    def get_conversation(self, conversation_id: int) -> Conversation:
        conversation = self.conversations.get_by_id(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    def list_by_channel(
        self,
        channel_id: int,
        status: Optional[ConversationStatus] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[Conversation]:
        """Most recently active first."""
        return self.conversations.list(
            channel_id,
            status=status.value if status else None,
            limit=normalize_limit(limit),
            offset=normalize_offset(offset),
        )

    def assign(self, conversation_id: int, assignee_id: str) -> Conversation:
        return self._update(
            conversation_id,
            ConversationUpdate(assigned_to_external_id=assignee_id),
            {"assigned_to_external_id": assignee_id},
        )

    def update_status(
        self, conversation_id: int, status: ConversationStatus
    ) -> Conversation:
        """Resolving or closing stamps resolved_at."""
        return self._update(
            conversation_id,
            ConversationUpdate(status=status),
            {"status": status.value},
        )

    def update_priority(
        self, conversation_id: int, priority: ConversationPriority
    ) -> Conversation:
        return self._update(
            conversation_id,
            ConversationUpdate(priority=priority),
            {"priority": priority.value},
        )

    def _update(
        self,
        conversation_id: int,
        data: ConversationUpdate,
        changes: Dict[str, Any],
    ) -> Conversation:
        conversation = self.conversations.update(conversation_id, data)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        self.dispatcher.dispatch(
            EVENT_CONVERSATION_UPDATED, {"conversation_id": conversation.id, **changes}
        )
        return conversation
