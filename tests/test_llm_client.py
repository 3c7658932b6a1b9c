"""
Tests for the chat model client.
"""
from unittest.mock import MagicMock, patch

import pytest

from vite_gourmand import config, llm_client


@pytest.fixture(autouse=True)
def fresh_client():
    llm_client.reset_client()
    yield
    llm_client.reset_client()


def completion(content):
    mock_completion = MagicMock()
    mock_completion.choices = [MagicMock(message=MagicMock(content=content))]
    return mock_completion


class TestConfiguration:

    def test_disabled_without_key(self, monkeypatch):
        monkeypatch.setattr(config, "LLM_API_KEY", "")
        assert not llm_client.is_llm_enabled()
        with pytest.raises(RuntimeError):
            llm_client.get_client()

    def test_client_is_shared(self, monkeypatch):
        monkeypatch.setattr(config, "LLM_API_KEY", "test-key")
        with patch.object(llm_client, "OpenAI") as mock_openai:
            first = llm_client.get_client()
            second = llm_client.get_client()

        assert first is second
        mock_openai.assert_called_once_with(api_key="test-key", base_url=config.LLM_BASE_URL)


class TestCallChatModel:

    def test_uses_configured_model(self, monkeypatch):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = completion("Bonjour !")
        messages = [{"role": "user", "content": "Salut"}]

        with patch.object(llm_client, "get_client", return_value=mock_client):
            reply = llm_client.call_chat_model(messages)

        assert reply == "Bonjour !"
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == config.LLM_MODEL
        assert kwargs["messages"] == messages
        assert kwargs["temperature"] == llm_client.DEFAULT_TEMPERATURE
        assert kwargs["max_tokens"] == llm_client.DEFAULT_MAX_TOKENS

    def test_model_override(self):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = completion("ok")

        with patch.object(llm_client, "get_client", return_value=mock_client):
            llm_client.call_chat_model([], model="other-model")

        assert mock_client.chat.completions.create.call_args.kwargs["model"] == "other-model"

    def test_empty_reply_fallback(self):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = completion(None)

        with patch.object(llm_client, "get_client", return_value=mock_client):
            assert llm_client.call_chat_model([]) == llm_client.EMPTY_REPLY
