from app.services.conversation_service import ConversationService
from app.services.message_service import MessageService
from app.services.webhook_service import WebhookService

__all__ = [
    "ConversationService",
    "MessageService",
    "WebhookService",
]
