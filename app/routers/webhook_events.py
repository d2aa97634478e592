"""Read-only access to the webhook audit log, for replay tooling."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth.jwt import get_current_claims
from app.db import get_db
from app.exceptions import WebhookEventNotFoundError
from app.models import Channel
from app.repositories import SQLAlchemyWebhookEventRepository
from app.routers.utils.dependencies import get_channel_by_id
from app.schemas.webhook_event import WebhookEventList, WebhookEventRead
from app.utils.pagination import normalize_limit

router = APIRouter(
    tags=["webhook-events"],
    dependencies=[Depends(get_current_claims)],
)


@router.get("/webhook-events/{event_id}", response_model=WebhookEventRead)
def get_webhook_event(
    event_id: int,
    db: Session = Depends(get_db),
) -> WebhookEventRead:
    event = SQLAlchemyWebhookEventRepository(db).get_by_id(event_id)
    if event is None:
        raise WebhookEventNotFoundError(event_id)
    return WebhookEventRead.model_validate(event)


@router.get(
    "/channels/{channel_id}/webhook-events/unprocessed",
    response_model=WebhookEventList,
)
def list_unprocessed_webhook_events(
    limit: Optional[int] = Query(None),
    channel: Channel = Depends(get_channel_by_id),
    db: Session = Depends(get_db),
) -> WebhookEventList:
    """Oldest first."""
    events = SQLAlchemyWebhookEventRepository(db).list_unprocessed(
        channel.id, limit=normalize_limit(limit)
    )
    return WebhookEventList(items=[WebhookEventRead.model_validate(e) for e in events])
