"""
Webhook ingestion pipeline.

Every webhook is written to the audit log before it is acted on, and the row
is finalized exactly once with the outcome. Processing is never retried here;
failed rows stay queryable so an operator can replay them.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from app.constants.chat import MessageStatus, WebhookEventType
from app.exceptions import SerializationError, UnknownEventTypeError
from app.repositories import WebhookEventRepository
from app.schemas.message import IncomingMessageRequest
from app.schemas.webhook import MessageEventFields, StatusUpdateEventFields
from app.services.message_service import MessageService

logger = logging.getLogger(__name__)


def canonical_json(payload: Any) -> str:
    """Sorted keys, no NaN/Infinity. Raises SerializationError."""
    try:
        return json.dumps(payload, sort_keys=True, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to marshal payload: {e}") from e


class WebhookService:
    def __init__(
        self, events: WebhookEventRepository, message_service: MessageService
    ) -> None:
        self.events = events
        self.message_service = message_service

    def process_webhook(self, channel_id: int, event_type: str, payload: Any) -> None:
        """
        Record and process one inbound webhook.

        Serialization and the initial insert fail fast without an audit row.
        Anything raised while dispatching is written to the row's `error` and
        re-raised to the caller.
        """
        body = canonical_json(payload)
        event = self.events.create(channel_id, event_type, body)

        try:
            self._dispatch(channel_id, event_type, payload)
        except Exception as e:
            logger.info(
                "Webhook event %s (%s) on channel %s failed: %s",
                event.id,
                event_type,
                channel_id,
                e,
            )
            self._finalize(event.id, error=str(e))
            raise

        logger.info(
            "Webhook event %s (%s) on channel %s processed",
            event.id,
            event_type,
            channel_id,
        )
        self._finalize(event.id, error=None)

    def _dispatch(self, channel_id: int, event_type: str, payload: Any) -> None:
        if event_type == WebhookEventType.MESSAGE:
            self._process_message_event(channel_id, payload)
        elif event_type == WebhookEventType.STATUS_UPDATE:
            self._process_status_update(payload)
        else:
            raise UnknownEventTypeError(event_type)

    def _process_message_event(self, channel_id: int, payload: Any) -> None:
        fields = MessageEventFields.from_payload(payload)
        self.message_service.process_incoming_message(
            IncomingMessageRequest(
                channel_id=channel_id,
                platform_user_id=fields.user_id,
                platform_message_id=fields.message_id,
                user_display_name=fields.user_name,
                content=fields.content,
                message_type=fields.message_type,
            )
        )

    def _process_status_update(self, payload: Any) -> None:
        fields = StatusUpdateEventFields.from_payload(payload)
        if fields.status == MessageStatus.DELIVERED:
            self.message_service.mark_delivered(fields.message_id)
        elif fields.status == MessageStatus.READ:
            self.message_service.mark_read(fields.message_id)
        else:
            logger.debug(
                "Ignoring status %r for message %s", fields.status, fields.message_id
            )

    def _finalize(self, event_id: int, error: Optional[str]) -> None:
        # Finalize failures are logged; they never replace the dispatch outcome
        try:
            if error is None:
                self.events.mark_processed(event_id)
            else:
                self.events.mark_failed(event_id, error)
        except Exception:
            logger.exception("Failed to finalize webhook event %s", event_id)
