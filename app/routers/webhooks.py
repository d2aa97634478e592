"""
Webhook routes for inbound chat platform updates.

Platforms POST raw updates here. Webhooks are authenticated by the channel's
shared secret, never by JWT.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.commands.webhooks import ChannelWebhookCommand
from app.db import get_db
from app.repositories import SQLAlchemyChannelRepository
from app.routers.utils.dependencies import get_webhook_service
from app.services.webhook_service import WebhookService

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/{channel_id}/{platform}")
async def channel_webhook(
    channel_id: int,
    platform: str,
    request: Request,
    db: Session = Depends(get_db),
    webhook_service: WebhookService = Depends(get_webhook_service),
) -> dict[str, str]:
    """Record and process a webhook for one channel."""
    command = ChannelWebhookCommand(SQLAlchemyChannelRepository(db), webhook_service)
    return await command.execute(request, channel_id, platform)
