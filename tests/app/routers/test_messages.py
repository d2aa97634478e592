"""Tests for the messages router."""

from app.constants.events import EVENT_NEW_MESSAGE


def test_send_message(client, setup_conversation, dispatcher, event_emitter):
    r = client.post(
        f"/api/v1/conversations/{setup_conversation.id}/messages",
        json={"content": "Hello from support", "metadata": {"agent": "a-1"}},
    )
    assert r.status_code == 201
    data = r.json()
    assert data["direction"] == "outbound"
    assert data["status"] == "sent"
    assert data["message_type"] == "text"
    assert data["metadata"] == {"agent": "a-1"}

    dispatcher.wait_idle()
    assert len(event_emitter.of_type(EVENT_NEW_MESSAGE)) == 1


def test_send_message_requires_content(client, setup_conversation):
    r = client.post(
        f"/api/v1/conversations/{setup_conversation.id}/messages", json={"content": ""}
    )
    assert r.status_code == 422


def test_send_message_unknown_conversation(client):
    r = client.post("/api/v1/conversations/5555/messages", json={"content": "hi"})
    assert r.status_code == 404


def test_history_newest_first_with_cursor(client, setup_conversation):
    ids = []
    for i in range(3):
        r = client.post(
            f"/api/v1/conversations/{setup_conversation.id}/messages",
            json={"content": f"m{i}"},
        )
        ids.append(r.json()["id"])

    r = client.get(f"/api/v1/conversations/{setup_conversation.id}/messages")
    assert r.status_code == 200
    body = r.json()
    assert [m["id"] for m in body["data"]] == list(reversed(ids))
    assert body["limit"] == 50
    assert body["offset"] == 0

    r = client.get(
        f"/api/v1/conversations/{setup_conversation.id}/messages",
        params={"before": ids[2], "limit": 500},
    )
    body = r.json()
    assert [m["id"] for m in body["data"]] == [ids[1], ids[0]]
    assert body["limit"] == 50


def test_mark_delivered_and_read(client, setup_message):
    r = client.post(f"/api/v1/messages/{setup_message.id}/read")
    assert r.status_code == 200
    assert r.json()["status"] == "read"
    assert r.json()["read_at"] is not None

    r = client.post(f"/api/v1/messages/{setup_message.id}/delivered")
    assert r.status_code == 200
    assert r.json()["status"] == "delivered"


def test_mark_unknown_message(client):
    assert client.post("/api/v1/messages/8080/read").status_code == 404
    assert client.post("/api/v1/messages/8080/delivered").status_code == 404
