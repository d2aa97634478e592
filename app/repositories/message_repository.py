"""Message persistence. Rows are append-only except for delivery status."""

from __future__ import annotations

from typing import Optional

from app.constants.chat import MessageStatus
from app.models import Message
from app.models.mixins import utcnow
from app.repositories.base import MessageRepository, SQLAlchemyRepository
from app.schemas.message import MessageCreate


class SQLAlchemyMessageRepository(SQLAlchemyRepository, MessageRepository):
    def create(self, data: MessageCreate) -> Message:
        values = data.model_dump(exclude={"metadata", "created_at"})
        message = Message(
            **values,
            extra=data.metadata,
            created_at=data.created_at or utcnow(),
        )
        return self._save(message, "create message")

    def get_by_id(self, message_id: int) -> Optional[Message]:
        with self._guard("get message"):
            return self.db.query(Message).filter(Message.id == message_id).first()

    def list_by_conversation(
        self,
        conversation_id: int,
        limit: int = 50,
        offset: int = 0,
        before_id: Optional[int] = None,
    ) -> list[Message]:
        """Newest first; ties on created_at fall back to id."""
        with self._guard("list messages"):
            query = self.db.query(Message).filter(
                Message.conversation_id == conversation_id
            )
            if before_id is not None:
                query = query.filter(Message.id < before_id)
            return (
                query.order_by(Message.created_at.desc(), Message.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )

    def update_status(
        self, message_id: int, status: MessageStatus
    ) -> Optional[Message]:
        message = self.get_by_id(message_id)
        if message is None:
            return None
        message.status = status.value
        if status == MessageStatus.DELIVERED:
            message.delivered_at = utcnow()
        elif status == MessageStatus.READ:
            message.read_at = utcnow()
        return self._save(message, "update message status")
