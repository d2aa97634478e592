"""Tests for the webhook audit log router."""

from app.models import WebhookEvent
from app.repositories import SQLAlchemyWebhookEventRepository


def _post(client, channel, body):
    return client.post(f"/api/v1/webhooks/{channel.id}/{channel.platform}", json=body)


def test_failed_events_are_not_listed_as_unprocessed(client, setup_channel):
    _post(client, setup_channel, {"event_type": "typing"})
    listing = client.get(
        f"/api/v1/channels/{setup_channel.id}/webhook-events/unprocessed"
    )
    assert listing.json() == {"items": []}


def test_webhook_event_detail(db, client, setup_channel):
    _post(client, setup_channel, {"user_id": "u", "content": "c"})
    event = db.query(WebhookEvent).one()

    r = client.get(f"/api/v1/webhook-events/{event.id}")
    assert r.status_code == 200
    data = r.json()
    assert data["processed"] is True
    assert data["event_type"] == "message"
    assert data["channel_id"] == setup_channel.id


def test_webhook_event_not_found(client):
    r = client.get("/api/v1/webhook-events/123456")
    assert r.status_code == 404
    assert r.json()["detail"] == "webhook event not found: 123456"


def test_list_unprocessed(db, client, setup_channel):
    repo = SQLAlchemyWebhookEventRepository(db)
    older = repo.create(setup_channel.id, "message", "{}")
    newer = repo.create(setup_channel.id, "message", "{}")

    r = client.get(
        f"/api/v1/channels/{setup_channel.id}/webhook-events/unprocessed",
        params={"limit": 0},
    )
    assert r.status_code == 200
    assert [e["id"] for e in r.json()["items"]] == [older.id, newer.id]


def test_no_access_token_in_any_response(client, setup_channel, setup_conversation):
    r = client.get(f"/api/v1/channels/{setup_channel.id}/conversations")
    assert "access_token" not in r.text
    assert setup_channel.access_token not in r.text
