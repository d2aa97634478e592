"""
Command to handle inbound platform webhooks for a channel.

Checks the channel and its shared secret, decodes the JSON body and hands it
to the ingestion pipeline. Pipeline errors are mapped to HTTP statuses here.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any

from fastapi import HTTPException, Request
from starlette.concurrency import run_in_threadpool

from app.constants.chat import WebhookEventType
from app.exceptions import (
    ChatlineError,
    InvalidWebhookPayloadError,
    NotFoundError,
    SerializationError,
)
from app.models import Channel
from app.repositories import ChannelRepository
from app.services.webhook_service import WebhookService

WEBHOOK_SECRET_HEADER = "X-Webhook-Secret"
EVENT_TYPE_KEY = "event_type"


class ChannelWebhookCommand:
    """
    Validate and process one platform webhook.

    The body must be a JSON object; its `event_type` (default "message")
    selects the pipeline handler. The whole body is the payload.
    """

    def __init__(
        self, channels: ChannelRepository, webhook_service: WebhookService
    ) -> None:
        self.channels = channels
        self.webhook_service = webhook_service
        self.logger = logging.getLogger(__name__)

    async def execute(
        self, request: Request, channel_id: int, platform: str
    ) -> dict[str, str]:
        """
        Returns:
            dict: {"status": "processed"} on success.

        Raises:
            HTTPException: 404 unknown/inactive channel or missing message,
                400 platform mismatch or bad body, 403 bad secret,
                422 unusable payload, 500 any other processing failure.
        """
        channel = await run_in_threadpool(self._get_active_channel, channel_id)
        if channel.platform != platform.lower():
            raise HTTPException(
                status_code=400,
                detail=f"channel {channel_id} is not a {platform} channel",
            )
        if not self.verify_secret(channel, request.headers.get(WEBHOOK_SECRET_HEADER)):
            raise HTTPException(status_code=403, detail="Invalid webhook secret")

        payload = await self._read_payload(request)
        event_type = payload.get(EVENT_TYPE_KEY)
        if not isinstance(event_type, str):
            event_type = WebhookEventType.MESSAGE.value

        try:
            await run_in_threadpool(
                self.webhook_service.process_webhook, channel.id, event_type, payload
            )
        except SerializationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except InvalidWebhookPayloadError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        except ChatlineError as e:
            self.logger.error(
                "Webhook processing failed for channel %s: %s", channel.id, e
            )
            raise HTTPException(status_code=500, detail=str(e)) from e

        return {"status": "processed"}

    @staticmethod
    def verify_secret(channel: Channel, provided: str | None) -> bool:
        """Channels without a secret accept any caller."""
        if not channel.webhook_secret:
            return True
        if provided is None:
            return False
        return hmac.compare_digest(
            channel.webhook_secret.encode("utf-8"), provided.encode("utf-8")
        )

    def _get_active_channel(self, channel_id: int) -> Channel:
        channel = self.channels.get_by_id(channel_id)
        if channel is None or not channel.is_active:
            raise HTTPException(status_code=404, detail="Channel not found")
        return channel

    async def _read_payload(self, request: Request) -> dict[str, Any]:
        try:
            body = await request.json()
        except ValueError as e:
            self.logger.warning("Webhook invalid JSON: %s", e)
            raise HTTPException(status_code=400, detail="Invalid JSON body") from e
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Body must be a JSON object")
        return body
