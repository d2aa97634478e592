"""Conversation persistence and the open-conversation reuse policy."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError

from app.constants.chat import (
    REUSABLE_CONVERSATION_STATUSES,
    TERMINAL_CONVERSATION_STATUSES,
    ConversationPriority,
    ConversationStatus,
)
from app.exceptions import ConversationConflictError, PersistenceError
from app.models import Conversation
from app.models.mixins import utcnow
from app.repositories.base import ConversationRepository, SQLAlchemyRepository
from app.schemas.conversation import ConversationCreate, ConversationUpdate

logger = logging.getLogger(__name__)


class SQLAlchemyConversationRepository(SQLAlchemyRepository, ConversationRepository):
    def create(self, data: ConversationCreate) -> Conversation:
        conversation = Conversation(
            channel_id=data.channel_id,
            external_user_id=data.external_user_id,
            subject=data.subject,
            priority=data.priority.value,
            status=ConversationStatus.OPEN.value,
        )
        return self._save(conversation, "create conversation")

    def get_by_id(self, conversation_id: int) -> Optional[Conversation]:
        with self._guard("get conversation"):
            return (
                self.db.query(Conversation)
                .filter(Conversation.id == conversation_id)
                .first()
            )

    def get_or_create_open_for_user(
        self, channel_id: int, external_user_id: int
    ) -> Tuple[Conversation, bool]:
        conversation = self._find_reusable(channel_id, external_user_id)
        if conversation is not None:
            return conversation, False

        try:
            conversation = self.create(
                ConversationCreate(
                    channel_id=channel_id,
                    external_user_id=external_user_id,
                    priority=ConversationPriority.NORMAL,
                )
            )
            return conversation, True
        except PersistenceError as e:
            if not isinstance(e.__cause__, IntegrityError):
                raise
            logger.info(
                "Concurrent open conversation for channel=%s user=%s, reusing it",
                channel_id,
                external_user_id,
            )

        conversation = self._find_reusable(channel_id, external_user_id)
        if conversation is None:
            raise PersistenceError(
                f"open conversation for user {external_user_id} vanished after conflict"
            )
        return conversation, False

    def list(
        self,
        channel_id: int,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Conversation]:
        with self._guard("list conversations"):
            query = self.db.query(Conversation).filter(
                Conversation.channel_id == channel_id
            )
            if status:
                query = query.filter(Conversation.status == status)
            return (
                query.order_by(Conversation.updated_at.desc(), Conversation.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )

    def update(
        self, conversation_id: int, data: ConversationUpdate
    ) -> Optional[Conversation]:
        conversation = self.get_by_id(conversation_id)
        if conversation is None:
            return None
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "metadata" in update_data:
            update_data["extra"] = update_data.pop("metadata")
        for key, value in update_data.items():
            setattr(conversation, key, value)
        if data.status in TERMINAL_CONVERSATION_STATUSES:
            conversation.resolved_at = utcnow()
        try:
            return self._save(conversation, "update conversation")
        except PersistenceError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise ConversationConflictError(
                    f"conversation {conversation_id} conflicts with another active "
                    "conversation for the same user"
                ) from e
            raise

    def touch_last_message(self, conversation_id: int) -> None:
        conversation = self.get_by_id(conversation_id)
        if conversation is None:
            raise PersistenceError(f"conversation {conversation_id} does not exist")
        now = utcnow()
        conversation.last_message_at = now
        if conversation.first_message_at is None:
            conversation.first_message_at = now
        self._save(conversation, "touch conversation")

    def _find_reusable(
        self, channel_id: int, external_user_id: int
    ) -> Optional[Conversation]:
        with self._guard("find open conversation"):
            return (
                self.db.query(Conversation)
                .filter(
                    Conversation.channel_id == channel_id,
                    Conversation.external_user_id == external_user_id,
                    Conversation.status.in_(
                        [s.value for s in REUSABLE_CONVERSATION_STATUSES]
                    ),
                )
                .order_by(Conversation.created_at.desc(), Conversation.id.desc())
                .first()
            )
