"""
Tests for the menu assistant endpoints.

The client fixture runs the assistant in demo mode; the model-backed path is
exercised by patching call_chat_model.
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
from openai import APIConnectionError

import vite_gourmand.config as config_mod
from vite_gourmand.routes import limiter
from vite_gourmand.services import ai_agent


def send(client, message, conversation_id=None, **extra):
    body = {"message": message, **extra}
    if conversation_id:
        body["conversationId"] = conversation_id
    resp = client.post("/api/ai-agent/chat", json=body)
    assert resp.status_code == 200
    return resp.json()["data"]


class TestDemoConversation:

    def test_demo_flow(self, client):
        """Test greeting, then budget question, then dietary question."""
        first = send(client, "Bonjour")
        assert first["conversationId"].startswith("conv_")
        assert first["message"] == ai_agent.DEMO_GREETING
        assert first["messageCount"] == 2

        conv_id = first["conversationId"]
        second = send(client, "Un mariage pour 80 personnes", conv_id)
        assert second["conversationId"] == conv_id
        assert second["message"] == ai_agent.DEMO_ASK_BUDGET
        assert second["messageCount"] == 4

        third = send(client, "Budget de 45€ par tête", conv_id)
        assert third["message"] == ai_agent.DEMO_ASK_DIET

        fourth = send(client, "Rien de particulier", conv_id)
        assert fourth["message"] == ai_agent.DEMO_FALLBACK

    def test_constraints_are_kept_in_context(self, client):
        data = send(client, "Bonjour", guestCount=40, budgetPerPerson=30)
        assert data["context"] == {"guestCount": 40, "budgetPerPerson": 30.0}

    def test_empty_message_rejected(self, client):
        resp = client.post("/api/ai-agent/chat", json={"message": "   "})
        assert resp.status_code == 400

    def test_status_in_demo_mode(self, client):
        send(client, "Bonjour")
        data = client.get("/api/ai-agent/status").json()["data"]
        assert data == {"aiEnabled": False, "model": "demo", "activeConversations": 1}


class TestModelBackedConversation:

    @pytest.fixture
    def llm_enabled(self, client, monkeypatch):
        monkeypatch.setattr(config_mod, "LLM_API_KEY", "test-key")
        return client

    def test_full_history_is_sent(self, llm_enabled):
        """Test the model receives the catalog system prompt and the user turns."""
        with patch.object(ai_agent, "call_chat_model", return_value="Voici une idée de menu") as mock_call:
            data = send(llm_enabled, "Un cocktail pour 50 personnes", guestCount=50)

        assert data["message"] == "Voici une idée de menu"
        messages = mock_call.call_args.args[0]
        assert messages[0]["role"] == "system"
        assert "Menu Mariage Élégance" in messages[0]["content"]
        assert "50 convives" in messages[1]["content"]
        assert {"role": "user", "content": "Un cocktail pour 50 personnes"} in messages

    def test_model_error_becomes_apology(self, llm_enabled):
        error = APIConnectionError(request=None)
        with patch.object(ai_agent, "call_chat_model", side_effect=error):
            data = send(llm_enabled, "Bonjour")

        assert data["message"] == ai_agent.LLM_ERROR_REPLY


class TestConversationAdmin:

    def test_requires_admin(self, client):
        assert client.get("/api/ai-agent/conversations").status_code == 401

    def test_list_get_delete(self, client, admin_auth):
        conv_id = send(client, "Bonjour")["conversationId"]

        listing = client.get("/api/ai-agent/conversations", auth=admin_auth).json()["data"]
        assert listing[0]["id"] == conv_id
        assert listing[0]["messageCount"] == 2

        detail = client.get(f"/api/ai-agent/conversations/{conv_id}", auth=admin_auth).json()["data"]
        assert [m["role"] for m in detail["messages"]] == ["user", "assistant"]

        resp = client.delete(f"/api/ai-agent/conversations/{conv_id}", auth=admin_auth)
        assert resp.json()["data"] == {"deleted": True}
        assert client.get(f"/api/ai-agent/conversations/{conv_id}", auth=admin_auth).status_code == 404
        assert client.delete(f"/api/ai-agent/conversations/{conv_id}", auth=admin_auth).status_code == 404

    def test_expired_conversations_are_dropped(self, client, monkeypatch):
        send(client, "Bonjour")
        monkeypatch.setattr(config_mod, "CONVERSATION_TTL_SECONDS", -1)
        assert ai_agent.list_conversations() == []


class TestRateLimiting:

    @pytest.fixture
    def limited_client(self, client, monkeypatch):
        monkeypatch.setattr(limiter, "enabled", True)
        monkeypatch.setattr(config_mod, "RATE_LIMIT_CHAT", "1 per minute")
        limiter.reset()
        yield client
        limiter.reset()

    def test_limit_hit_uses_error_envelope(self, limited_client):
        """Test the 429 response carries the same envelope as other errors."""
        first = limited_client.post("/api/ai-agent/chat", json={"message": "Bonjour"})
        assert first.status_code == 200

        second = limited_client.post("/api/ai-agent/chat", json={"message": "Encore"})
        assert second.status_code == 429

        body = second.json()
        assert body["success"] is False
        assert body["statusCode"] == 429
        assert body["path"] == "/api/ai-agent/chat"
        assert body["message"].startswith("Rate limit exceeded")


class TestConcurrentTurns:

    @pytest.fixture(autouse=True)
    def empty_store(self, monkeypatch):
        monkeypatch.setattr(config_mod, "LLM_API_KEY", "")
        ai_agent.clear_conversations()
        yield
        ai_agent.clear_conversations()

    def test_simultaneous_first_messages_share_one_conversation(self):
        """Test two first messages for one id both land in the stored history."""
        both_building = threading.Barrier(2, timeout=5)

        def slow_catalog(db):
            both_building.wait()
            return "CATALOGUE"

        with patch.object(ai_agent, "build_catalog_context", side_effect=slow_catalog):
            with ThreadPoolExecutor(max_workers=2) as pool:
                futures = [
                    pool.submit(ai_agent.chat, None, text, "conv_shared")
                    for text in ("Bonjour", "Un mariage pour 80 personnes")
                ]
                results = [f.result() for f in futures]

        assert sorted(r["messageCount"] for r in results) == [2, 4]

        conversation = ai_agent.get_conversation("conv_shared")
        roles = [m["role"] for m in conversation["messages"]]
        assert roles == ["user", "assistant", "user", "assistant"]
        contents = {m["content"] for m in conversation["messages"]}
        assert {"Bonjour", "Un mariage pour 80 personnes"} <= contents
