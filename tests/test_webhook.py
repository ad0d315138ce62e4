"""Tests for the WhatsApp webhook."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from comicgenius_api.app import create_app
from comicgenius_api.deps import Settings
from comicgenius_services import webhook


def payload(*texts, obj="whatsapp_business_account", field="messages"):
    messages = [
        {"from": "15551234567", "type": "text", "text": {"body": text}} for text in texts
    ]
    return {
        "object": obj,
        "entry": [{"changes": [{"field": field, "value": {"messages": messages}}]}],
    }


class TestVerify:
    def test_matching_token_returns_challenge(self):
        assert webhook.verify("subscribe", "secret", "1158201444", "secret") == "1158201444"

    def test_wrong_token(self):
        assert webhook.verify("subscribe", "guess", "1158201444", "secret") is None

    def test_unset_token_never_verifies(self):
        assert webhook.verify("subscribe", None, "1158201444", None) is None


class TestReplies:
    def test_comic_gets_welcome_with_url(self):
        reply = webhook.reply_for("I want a COMIC", app_url="https://comics.example")
        assert "Welcome to ComicGenius!" in reply
        assert "Visit: https://comics.example" in reply

    def test_story_beats_help(self):
        assert "Welcome" in webhook.reply_for("help me with my story")

    def test_help(self):
        assert "ComicGenius Commands" in webhook.reply_for("HELP")

    def test_about_uses_default_url(self):
        reply = webhook.reply_for("tell me about it")
        assert "Start creating: https://comicgenius.vercel.app" in reply

    def test_unmatched(self):
        assert webhook.reply_for("hello there") is None


class TestHandlePayload:
    def test_replies_to_matching_messages(self):
        sent = []

        async def sender(to, message):
            sent.append((to, message))

        count = asyncio.run(webhook.handle_payload(payload("comic", "hi", "help"), sender=sender))

        assert count == 2
        assert sent[0][0] == "15551234567"
        assert sent[0][1]["type"] == "text"
        assert "ComicGenius Commands" in sent[1][1]["text"]["body"]

    def test_other_objects_ignored(self):
        assert asyncio.run(webhook.handle_payload(payload("comic", obj="page"))) == 0

    def test_other_fields_ignored(self):
        assert asyncio.run(webhook.handle_payload(payload("comic", field="statuses"))) == 0

    def test_non_object_body_ignored(self):
        assert asyncio.run(webhook.handle_payload([1, 2])) == 0
        assert asyncio.run(webhook.handle_payload("comic")) == 0

    def test_non_text_messages_ignored(self):
        body = payload()
        body["entry"][0]["changes"][0]["value"]["messages"] = [{"from": "1", "type": "image"}]
        assert asyncio.run(webhook.handle_payload(body)) == 0


class TestRoutes:
    @pytest.fixture
    def api(self):
        app = create_app(Settings(whatsapp_verify_token="secret"))
        return TestClient(app)

    def test_handshake(self, api):
        response = api.get(
            "/api/webhook/whatsapp",
            params={"hub.mode": "subscribe", "hub.verify_token": "secret", "hub.challenge": "42"},
        )
        assert response.status_code == 200
        assert response.text == "42"

    def test_handshake_rejected(self, api):
        response = api.get(
            "/api/webhook/whatsapp",
            params={"hub.mode": "subscribe", "hub.verify_token": "nope", "hub.challenge": "42"},
        )
        assert response.status_code == 403
        assert response.text == "Forbidden"

    def test_post_ok(self, api, caplog):
        with caplog.at_level("INFO"):
            response = api.post("/api/webhook/whatsapp", json=payload("comic"))
        assert response.status_code == 200
        assert response.text == "OK"
        assert "Sending WhatsApp message to 15551234567" in caplog.text

    def test_post_array_body_ok(self, api):
        response = api.post("/api/webhook/whatsapp", json=[1, 2])
        assert response.status_code == 200
        assert response.text == "OK"

    def test_post_invalid_json(self, api):
        response = api.post(
            "/api/webhook/whatsapp",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 500
        assert response.text == "Error"
