from __future__ import annotations

from prometheus_client import REGISTRY

CONVERSATION_ID = "5fe0cce861c8ea54018385b0"
SENDER_ID = "5fe0cce861c8ea54018385af"
LIKER_ID = "5fe0cce861c8ea54018385aa"
MISSING_ID = "0123456789abcdef01234567"


def _create(client, text="Hello world", tags=None, user_id=SENDER_ID):
    payload = {"conversationId": CONVERSATION_ID, "text": text}
    if tags is not None:
        payload["tags"] = tags
    return client.post("/api/messages", json=payload, headers={"X-User-Id": user_id})


def test_create_message(client):
    response = _create(client)
    assert response.status_code == 201

    body = response.get_json()
    assert body["text"] == "Hello world"
    assert body["conversationId"] == CONVERSATION_ID
    assert body["senderId"] == SENDER_ID
    assert body["likes"] == []
    assert body["likesCount"] == 0
    assert body["reactions"] == []
    assert body["tags"] == []
    assert body["deleted"] is False
    assert body["resolved"] is False
    assert body["conversation"] == {"id": CONVERSATION_ID}
    assert body["sender"] == {"id": SENDER_ID}


def test_create_requires_authenticated_sender(client):
    response = client.post("/api/messages", json={"conversationId": CONVERSATION_ID, "text": "hi"})
    assert response.status_code == 400
    assert response.get_json()["status"] == "error"


def test_create_rejects_non_json_body(client):
    response = client.post("/api/messages", data="nope", headers={"X-User-Id": SENDER_ID})
    assert response.status_code == 400


def test_get_and_delete_message(client):
    message_id = _create(client).get_json()["id"]

    assert client.get(f"/api/messages/{message_id}").get_json()["deleted"] is False

    response = client.delete(f"/api/messages/{message_id}")
    assert response.status_code == 200
    assert response.get_json()["deleted"] is True

    assert client.get(f"/api/messages/{message_id}").get_json()["deleted"] is True
    assert client.delete(f"/api/messages/{message_id}").status_code == 200


def test_get_missing_message(client):
    response = client.get(f"/api/messages/{MISSING_ID}")
    assert response.status_code == 404
    assert MISSING_ID in response.get_json()["message"]


def test_tags_endpoints(client):
    message_id = _create(client, tags=["oldTag"]).get_json()["id"]

    response = client.post(f"/api/messages/{message_id}/tags", json={"tags": ["a", "b"]})
    assert response.get_json()["tags"] == ["oldTag", "a", "b"]

    response = client.put(f"/api/messages/{message_id}/tags", json={"tags": ["newTag"]})
    assert response.get_json()["tags"] == ["newTag"]

    response = client.put(f"/api/messages/{message_id}/tags", json={"tags": [""]})
    assert response.status_code == 400


def test_tags_on_deleted_message_conflict(client):
    message_id = _create(client).get_json()["id"]
    client.delete(f"/api/messages/{message_id}")

    response = client.post(f"/api/messages/{message_id}/tags", json={"tags": ["a"]})
    assert response.status_code == 409


def test_get_messages_by_tags(client):
    first = _create(client, text="Message with tag1", tags=["tag1"]).get_json()["id"]
    second = _create(client, text="Message with tag2", tags=["tag2"]).get_json()["id"]

    response = client.get("/api/messages?tag=tag1&tag=tag2")
    assert response.status_code == 200
    assert [m["id"] for m in response.get_json()["messages"]] == [first, second]
    for item in response.get_json()["messages"]:
        assert "conversation" not in item
        assert "sender" not in item

    assert client.get("/api/messages?tag=nonexistent").get_json()["messages"] == []
    assert client.get("/api/messages").status_code == 400


def test_likes_reactions_and_resolved(client):
    message_id = _create(client).get_json()["id"]
    headers = {"X-User-Id": LIKER_ID}

    body = client.post(f"/api/messages/{message_id}/likes", headers=headers).get_json()
    assert body["likes"] == [LIKER_ID]
    assert body["likesCount"] == 1

    body = client.delete(f"/api/messages/{message_id}/likes", headers=headers).get_json()
    assert body["likesCount"] == 0

    body = client.post(
        f"/api/messages/{message_id}/reactions", json={"reaction": "🎉"}, headers=headers
    ).get_json()
    assert body["reactions"] == [{"userId": LIKER_ID, "reaction": "🎉"}]

    body = client.delete(
        f"/api/messages/{message_id}/reactions", json={"reaction": "🎉"}, headers=headers
    ).get_json()
    assert body["reactions"] == []

    assert client.post(f"/api/messages/{message_id}/resolved").get_json()["resolved"] is True
    assert client.delete(f"/api/messages/{message_id}/resolved").get_json()["resolved"] is False


def test_conversation_messages(client):
    first = _create(client, text="one").get_json()["id"]
    second = _create(client, text="two").get_json()["id"]
    client.delete(f"/api/messages/{first}")

    response = client.get(f"/api/conversations/{CONVERSATION_ID}/messages")
    assert [m["id"] for m in response.get_json()["messages"]] == [second]

    response = client.get(f"/api/conversations/{CONVERSATION_ID}/messages?include_deleted=true&limit=1")
    assert [m["id"] for m in response.get_json()["messages"]] == [first]

    response = client.get(f"/api/conversations/{CONVERSATION_ID}/messages?limit=abc")
    assert response.status_code == 400


def test_health_endpoints(client):
    assert client.get("/health").get_json()["status"] == "healthy"
    assert client.get("/health/live").status_code == 200

    ready = client.get("/health/ready")
    assert ready.status_code == 200
    assert ready.get_json()["checks"]["storage"] is True


def test_unknown_route_returns_json_404(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.get_json()["status"] == "error"


def _duration_count(endpoint):
    value = REGISTRY.get_sample_value(
        "chat_messages_api_request_duration_seconds_count", {"endpoint": endpoint}
    )
    return value or 0.0


def test_failed_requests_are_timed(client):
    before = _duration_count("get_message")
    assert client.get(f"/api/messages/{MISSING_ID}").status_code == 404
    assert _duration_count("get_message") == before + 1
