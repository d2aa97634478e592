"""
Domain error taxonomy.

Fatal-immediate errors (SerializationError, PersistenceError on the initial
webhook insert) mean no audit row exists. Everything raised during dispatch is
a processing failure: it is recorded on the webhook event row and re-raised.
NotFoundError subclasses are mapped to 404 and ConversationConflictError to
409 at the API boundary.
"""

from __future__ import annotations


class ChatlineError(Exception):
    """Base class for all domain errors."""


class SerializationError(ChatlineError):
    """Webhook payload could not be serialized to canonical JSON."""


class PersistenceError(ChatlineError):
    """The persistence layer failed (connection, constraint, commit)."""


class EmitError(ChatlineError):
    """The event bus rejected or timed out a publish."""


# --- payload failures ---------------------------------------------------------


class InvalidWebhookPayloadError(ChatlineError):
    """Payload is structurally unusable for its event type."""


class MissingRequiredFieldsError(InvalidWebhookPayloadError):
    pass


class UnknownEventTypeError(InvalidWebhookPayloadError):
    def __init__(self, event_type: str) -> None:
        super().__init__(f"unknown event type: {event_type}")
        self.event_type = event_type


# --- threading failures -------------------------------------------------------


class UserResolutionError(ChatlineError):
    pass


class ConversationResolutionError(ChatlineError):
    pass


class MessagePersistenceError(ChatlineError):
    pass


class ConversationConflictError(ChatlineError):
    """Change would leave a user with two open or pending conversations."""


# --- not found ----------------------------------------------------------------


class NotFoundError(ChatlineError):
    """Lookup by id missed. Distinct from transport-level failures."""

    entity = "record"

    def __init__(self, entity_id: object) -> None:
        super().__init__(f"{self.entity} not found: {entity_id}")
        self.entity_id = entity_id


class ChannelNotFoundError(NotFoundError):
    entity = "channel"


class ConversationNotFoundError(NotFoundError):
    entity = "conversation"


class MessageNotFoundError(NotFoundError):
    entity = "message"


class WebhookEventNotFoundError(NotFoundError):
    entity = "webhook event"
