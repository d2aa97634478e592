"""Enumerations shared by the chat data model."""

from enum import StrEnum


class Platform(StrEnum):
    """Messaging platforms a channel can integrate with."""

    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    SMS = "sms"
    EMAIL = "email"
    WEB = "web"


class ChannelStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"


class ConversationStatus(StrEnum):
    OPEN = "open"
    PENDING = "pending"
    RESOLVED = "resolved"
    CLOSED = "closed"


# Statuses a conversation can be reused from when new messages arrive.
REUSABLE_CONVERSATION_STATUSES = (ConversationStatus.OPEN, ConversationStatus.PENDING)

# Statuses that stamp resolved_at.
TERMINAL_CONVERSATION_STATUSES = (
    ConversationStatus.RESOLVED,
    ConversationStatus.CLOSED,
)


class ConversationPriority(StrEnum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class SenderType(StrEnum):
    EXTERNAL = "external"
    INTERNAL = "internal"
    SYSTEM = "system"


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"
    LOCATION = "location"
    CONTACT = "contact"
    STICKER = "sticker"
    SYSTEM = "system"


class MessageDirection(StrEnum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class MessageStatus(StrEnum):
    """Delivery status. received|sent -> delivered -> read; failed is terminal."""

    RECEIVED = "received"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"


class WebhookEventType(StrEnum):
    """Webhook event tags the pipeline knows how to dispatch."""

    MESSAGE = "message"
    STATUS_UPDATE = "status_update"
