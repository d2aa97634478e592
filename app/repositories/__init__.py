from app.repositories.base import (
    ChannelRepository,
    ConversationRepository,
    ExternalUserRepository,
    MessageRepository,
    WebhookEventRepository,
)
from app.repositories.channel_repository import SQLAlchemyChannelRepository
from app.repositories.conversation_repository import (
    SQLAlchemyConversationRepository,
)
from app.repositories.external_user_repository import (
    SQLAlchemyExternalUserRepository,
)
from app.repositories.message_repository import SQLAlchemyMessageRepository
from app.repositories.webhook_event_repository import (
    SQLAlchemyWebhookEventRepository,
)

__all__ = [
    "ChannelRepository",
    "ConversationRepository",
    "ExternalUserRepository",
    "MessageRepository",
    "WebhookEventRepository",
    "SQLAlchemyChannelRepository",
    "SQLAlchemyConversationRepository",
    "SQLAlchemyExternalUserRepository",
    "SQLAlchemyMessageRepository",
    "SQLAlchemyWebhookEventRepository",
]
