"""Tests for the conversations router."""

from app.constants.events import EVENT_CONVERSATION_UPDATED
from app.models import Conversation


def test_list_channel_conversations(client, setup_channel, setup_conversation):
    r = client.get(f"/api/v1/channels/{setup_channel.id}/conversations")
    assert r.status_code == 200
    data = r.json()
    assert [c["id"] for c in data] == [setup_conversation.id]
    assert data[0]["status"] == "open"
    assert data[0]["priority"] == "normal"


def test_list_clamps_out_of_range_limit(client, setup_channel, setup_conversation):
    r = client.get(
        f"/api/v1/channels/{setup_channel.id}/conversations",
        params={"limit": 0, "offset": -4},
    )
    assert r.status_code == 200
    assert len(r.json()) == 1


def test_list_filters_by_status(client, setup_channel, setup_conversation):
    r = client.get(
        f"/api/v1/channels/{setup_channel.id}/conversations", params={"status": "closed"}
    )
    assert r.status_code == 200
    assert r.json() == []


def test_list_unknown_channel(client):
    r = client.get("/api/v1/channels/4040/conversations")
    assert r.status_code == 404
    assert r.json()["detail"] == "channel not found: 4040"


def test_get_conversation(client, setup_conversation):
    r = client.get(f"/api/v1/conversations/{setup_conversation.id}")
    assert r.status_code == 200
    assert r.json()["external_user_id"] == setup_conversation.external_user_id


def test_get_conversation_not_found(client):
    r = client.get("/api/v1/conversations/777")
    assert r.status_code == 404
    assert r.json()["detail"] == "conversation not found: 777"


def test_assign(client, setup_conversation, dispatcher, event_emitter):
    r = client.post(
        f"/api/v1/conversations/{setup_conversation.id}/assign",
        json={"assignee_id": "agent-3"},
    )
    assert r.status_code == 200
    assert r.json()["assigned_to_external_id"] == "agent-3"
    dispatcher.wait_idle()
    assert len(event_emitter.of_type(EVENT_CONVERSATION_UPDATED)) == 1


def test_resolve_stamps_resolved_at(client, setup_conversation):
    r = client.patch(
        f"/api/v1/conversations/{setup_conversation.id}/status",
        json={"status": "resolved"},
    )
    assert r.status_code == 200
    assert r.json()["status"] == "resolved"
    assert r.json()["resolved_at"] is not None


def test_invalid_status_rejected(client, setup_conversation):
    r = client.patch(
        f"/api/v1/conversations/{setup_conversation.id}/status",
        json={"status": "archived"},
    )
    assert r.status_code == 422


def test_update_priority(client, setup_conversation):
    r = client.patch(
        f"/api/v1/conversations/{setup_conversation.id}/priority",
        json={"priority": "high"},
    )
    assert r.status_code == 200
    assert r.json()["priority"] == "high"


def test_update_priority_not_found(client):
    r = client.patch("/api/v1/conversations/31/priority", json={"priority": "low"})
    assert r.status_code == 404


def test_reopen_conflicts_with_newer_open_conversation(
    client, db, setup_channel, setup_external_user, setup_conversation
):
    r = client.patch(
        f"/api/v1/conversations/{setup_conversation.id}/status",
        json={"status": "closed"},
    )
    assert r.status_code == 200

    r = client.post(
        f"/api/v1/webhooks/{setup_channel.id}/{setup_channel.platform}",
        json={
            "event_type": "message",
            "user_id": setup_external_user.platform_user_id,
            "content": "still there?",
        },
    )
    assert r.status_code == 200
    newer = (
        db.query(Conversation)
        .filter(Conversation.id != setup_conversation.id)
        .one()
    )
    assert newer.status == "open"

    r = client.patch(
        f"/api/v1/conversations/{setup_conversation.id}/status",
        json={"status": "open"},
    )
    assert r.status_code == 409
    assert "conflicts" in r.json()["detail"]

    r = client.get(f"/api/v1/conversations/{setup_conversation.id}")
    assert r.json()["status"] == "closed"
