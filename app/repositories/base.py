"""Repository capabilities and the shared SQLAlchemy plumbing.

Services depend on the abstract classes below, never on the ORM directly, so
tests can swap in fakes and the storage engine stays an implementation detail.
"""

from __future__ import annotations

import contextlib
import logging
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from app.constants.chat import MessageStatus
from app.exceptions import PersistenceError
from app.models import Channel, Conversation, ExternalUser, Message, WebhookEvent
from app.schemas.conversation import ConversationCreate, ConversationUpdate
from app.schemas.external_user import ExternalUserCreate, ExternalUserUpdate
from app.schemas.message import MessageCreate

logger = logging.getLogger(__name__)


class SQLAlchemyRepository:
    """Holds the session and turns driver errors into PersistenceError."""

    def __init__(self, db: DBSession) -> None:
        self.db = db

    @contextlib.contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.debug("Rolled back after failing to %s", action, exc_info=True)
            raise PersistenceError(f"failed to {action}: {e}") from e

    def _save(self, obj, action: str):
        with self._guard(action):
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        return obj


class ChannelRepository(ABC):
    @abstractmethod
    def get_by_id(self, channel_id: int) -> Optional[Channel]: ...


class ExternalUserRepository(ABC):
    @abstractmethod
    def create(self, data: ExternalUserCreate) -> ExternalUser: ...

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[ExternalUser]: ...

    @abstractmethod
    def get_by_channel_and_platform_id(
        self, channel_id: int, platform_user_id: str
    ) -> Optional[ExternalUser]: ...

    @abstractmethod
    def find_or_create(self, data: ExternalUserCreate) -> Tuple[ExternalUser, bool]:
        """Return (user, created). An existing user has last_seen_at touched."""

    @abstractmethod
    def update(
        self, user_id: int, data: ExternalUserUpdate
    ) -> Optional[ExternalUser]: ...

    @abstractmethod
    def touch_last_seen(self, user_id: int) -> None: ...


class ConversationRepository(ABC):
    @abstractmethod
    def create(self, data: ConversationCreate) -> Conversation: ...

    @abstractmethod
    def get_by_id(self, conversation_id: int) -> Optional[Conversation]: ...

    @abstractmethod
    def get_or_create_open_for_user(
        self, channel_id: int, external_user_id: int
    ) -> Tuple[Conversation, bool]:
        """Return (conversation, created), reusing an open or pending one."""

    @abstractmethod
    def list(
        self,
        channel_id: int,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Conversation]: ...

    @abstractmethod
    def update(
        self, conversation_id: int, data: ConversationUpdate
    ) -> Optional[Conversation]: ...

    @abstractmethod
    def touch_last_message(self, conversation_id: int) -> None: ...


class MessageRepository(ABC):
    @abstractmethod
    def create(self, data: MessageCreate) -> Message: ...

    @abstractmethod
    def get_by_id(self, message_id: int) -> Optional[Message]: ...

    @abstractmethod
    def list_by_conversation(
        self,
        conversation_id: int,
        limit: int = 50,
        offset: int = 0,
        before_id: Optional[int] = None,
    ) -> list[Message]: ...

    @abstractmethod
    def update_status(
        self, message_id: int, status: MessageStatus
    ) -> Optional[Message]: ...


class WebhookEventRepository(ABC):
    @abstractmethod
    def create(self, channel_id: int, event_type: str, payload: str) -> WebhookEvent: ...

    @abstractmethod
    def get_by_id(self, event_id: int) -> Optional[WebhookEvent]: ...

    @abstractmethod
    def list_unprocessed(self, channel_id: int, limit: int = 20) -> list[WebhookEvent]: ...

    @abstractmethod
    def mark_processed(self, event_id: int) -> None: ...

    @abstractmethod
    def mark_failed(self, event_id: int, error: str) -> None: ...
