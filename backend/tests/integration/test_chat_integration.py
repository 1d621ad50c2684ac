"""
Integration tests for chats and the mocked assistant reply job.
"""

import math
import uuid

import pytest

from app.core.config import settings


@pytest.fixture
def chat_owner(client, register):
    """A user with a model and a chat on it."""
    headers, user = register(name="Chatter")
    model = client.post("/api/models", headers=headers, json={"name": "Helper"}).json()["data"]
    chat = client.post("/api/chat", headers=headers, json={"modelId": model["id"]}).json()["data"]
    return headers, user, model, chat


class TestChats:

    def test_create_chat_defaults(self, chat_owner):
        _, user, model, chat = chat_owner

        assert chat["title"] == "New Chat"
        assert chat["language"] == "english"
        assert chat["aiModelId"] == model["id"]
        assert chat["userId"] == user["id"]
        assert chat["messages"] == []
        assert chat["replyPending"] is False

    def test_chat_on_unknown_model(self, client, register):
        headers, _ = register()

        response = client.post("/api/chat", headers=headers, json={"modelId": str(uuid.uuid4())})

        assert response.status_code == 404

    def test_chat_on_strangers_model(self, client, register, chat_owner):
        _, _, model, _ = chat_owner
        stranger_headers, _ = register()

        response = client.post("/api/chat", headers=stranger_headers, json={"modelId": model["id"]})

        assert response.status_code == 403

    def test_unsupported_language(self, client, chat_owner):
        headers, _, model, _ = chat_owner

        response = client.post(
            "/api/chat", headers=headers, json={"modelId": model["id"], "language": "klingon"}
        )

        assert response.status_code == 400

    def test_list_rename_delete(self, client, chat_owner):
        headers, _, _, chat = chat_owner

        listed = client.get("/api/chat", headers=headers).json()
        renamed = client.put(f"/api/chat/{chat['id']}", headers=headers, json={"title": "Questions"})
        deleted = client.delete(f"/api/chat/{chat['id']}", headers=headers)

        assert listed["count"] == 1
        assert renamed.json()["data"]["title"] == "Questions"
        assert deleted.status_code == 200
        assert client.get(f"/api/chat/{chat['id']}", headers=headers).status_code == 404

    def test_stranger_cannot_read_chat(self, client, register, chat_owner):
        _, _, _, chat = chat_owner
        stranger_headers, _ = register()

        response = client.get(f"/api/chat/{chat['id']}", headers=stranger_headers)

        assert response.status_code == 403


class TestMessages:

    def test_send_message_returns_pending(self, client, chat_owner):
        headers, _, _, chat = chat_owner

        response = client.post(
            f"/api/chat/{chat['id']}/messages", headers=headers, json={"content": "Hello there"}
        )

        assert response.status_code == 202
        body = response.json()["data"]
        assert body["replyStatus"] == "pending"
        assert body["message"]["role"] == "user"
        assert body["message"]["content"] == "Hello there"
        assert body["message"]["tokenCount"] == math.ceil(len("Hello there") / 4)
        assert body["chat"]["replyPending"] is True

    def test_reply_is_appended(self, client, chat_owner, drain):
        headers, _, _, chat = chat_owner

        client.post(
            f"/api/chat/{chat['id']}/messages",
            headers=headers,
            json={"content": "What does the handbook say about leave?"},
        )
        drain()

        updated = client.get(f"/api/chat/{chat['id']}", headers=headers).json()["data"]
        assert [m["role"] for m in updated["messages"]] == ["user", "assistant"]
        reply = updated["messages"][1]["content"]
        assert "Helper" in reply
        assert "What does the handbook say about leave?" in reply
        assert updated["replyPending"] is False
        assert updated["totalTokensUsed"] > 0

        usage = client.get("/api/users/usage", headers=headers).json()["data"]
        counts = {entry["kind"]: entry["count"] for entry in usage["usageByKind"]}
        assert counts["chat"] == 1
        assert usage["totalTokens"] == updated["totalTokensUsed"]

        profile = client.get("/api/users/profile", headers=headers).json()["data"]
        assert profile["totalTokensUsed"] == updated["totalTokensUsed"]

    def test_reply_uses_chat_language(self, client, chat_owner, drain):
        headers, _, model, _ = chat_owner
        chat = client.post(
            "/api/chat", headers=headers, json={"modelId": model["id"], "language": "spanish"}
        ).json()["data"]

        client.post(f"/api/chat/{chat['id']}/messages", headers=headers, json={"content": "Hola"})
        drain()

        updated = client.get(f"/api/chat/{chat['id']}", headers=headers).json()["data"]
        assert updated["messages"][-1]["content"].startswith("¡Hola!")

    def test_empty_message_rejected(self, client, chat_owner):
        headers, _, _, chat = chat_owner

        response = client.post(f"/api/chat/{chat['id']}/messages", headers=headers, json={"content": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "Please add a message"

    def test_message_to_unknown_chat(self, client, register):
        headers, _ = register()

        response = client.post(f"/api/chat/{uuid.uuid4()}/messages", headers=headers, json={"content": "Hi"})

        assert response.status_code == 404

    def test_second_message_while_reply_pending(self, client, chat_owner, monkeypatch):
        monkeypatch.setattr(settings.simulation, "reply_delay_seconds", 30.0)
        headers, _, _, chat = chat_owner

        first = client.post(f"/api/chat/{chat['id']}/messages", headers=headers, json={"content": "One"})
        second = client.post(f"/api/chat/{chat['id']}/messages", headers=headers, json={"content": "Two"})

        assert first.status_code == 202
        assert second.status_code == 400
        assert second.json()["error"] == "Please wait for the previous reply"

    def test_failed_reply_releases_chat(self, client, chat_owner, drain, monkeypatch):
        def broken_reply(*args, **kwargs):
            raise RuntimeError("responder unavailable")

        monkeypatch.setattr("app.workers.simulation.generate_reply", broken_reply)
        headers, _, _, chat = chat_owner

        client.post(f"/api/chat/{chat['id']}/messages", headers=headers, json={"content": "One"})
        drain()

        stuck = client.get(f"/api/chat/{chat['id']}", headers=headers).json()["data"]
        assert stuck["replyPending"] is False
        assert [m["role"] for m in stuck["messages"]] == ["user"]

        again = client.post(f"/api/chat/{chat['id']}/messages", headers=headers, json={"content": "Two"})
        assert again.status_code == 202

    def test_stranger_cannot_send(self, client, register, chat_owner):
        _, _, _, chat = chat_owner
        stranger_headers, _ = register()

        response = client.post(f"/api/chat/{chat['id']}/messages", headers=stranger_headers, json={"content": "Hi"})

        assert response.status_code == 403
