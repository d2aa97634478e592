from app.models.channel import Channel
from app.models.conversation import Conversation
from app.models.external_user import ExternalUser
from app.models.message import Message
from app.models.organization import Organization
from app.models.webhook_event import WebhookEvent

__all__ = [
    "Channel",
    "Conversation",
    "ExternalUser",
    "Message",
    "Organization",
    "WebhookEvent",
]
