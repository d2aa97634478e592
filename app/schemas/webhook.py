"""Typed views over inbound webhook payloads.

Platform payloads are arbitrary JSON objects. The pipeline pulls only the
fields it needs out of them; a field of the wrong JSON type is treated as
absent rather than rejected.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from app.constants.chat import MessageType
from app.exceptions import InvalidWebhookPayloadError, MissingRequiredFieldsError


def _as_object(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidWebhookPayloadError("invalid payload format")
    return payload


def _str_field(payload: dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    return value if isinstance(value, str) else None


def _int_field(payload: dict[str, Any], key: str) -> Optional[int]:
    value = payload.get(key)
    # JSON numbers may arrive as floats; bool is an int subclass, skip it
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class MessageEventFields(BaseModel):
    """Fields of a `message` webhook event."""

    message_id: Optional[str] = None
    user_id: str
    user_name: Optional[str] = None
    content: str
    message_type: MessageType = MessageType.TEXT

    model_config = {"frozen": True}

    @classmethod
    def from_payload(cls, payload: Any) -> "MessageEventFields":
        data = _as_object(payload)
        user_id = _str_field(data, "user_id")
        content = _str_field(data, "content")
        if not user_id or not content:
            raise MissingRequiredFieldsError("missing required fields")

        raw_type = _str_field(data, "message_type")
        try:
            message_type = MessageType(raw_type) if raw_type else MessageType.TEXT
        except ValueError:
            message_type = MessageType.TEXT

        return cls(
            message_id=_str_field(data, "message_id") or None,
            user_id=user_id,
            user_name=_str_field(data, "user_name"),
            content=content,
            message_type=message_type,
        )


class StatusUpdateEventFields(BaseModel):
    """Fields of a `status_update` webhook event."""

    message_id: int
    status: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_payload(cls, payload: Any) -> "StatusUpdateEventFields":
        data = _as_object(payload)
        message_id = _int_field(data, "message_id")
        if message_id is None:
            raise MissingRequiredFieldsError("missing message_id")
        return cls(message_id=message_id, status=_str_field(data, "status"))
