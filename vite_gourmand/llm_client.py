"""
OpenAI-compatible chat client for the menu assistant.

The assistant talks to any OpenAI-compatible endpoint (Groq by default) with
the ``openai`` SDK. When LLM_API_KEY is empty the client is never built and
the assistant answers from canned demo replies instead.
"""

import logging
from typing import Dict, List, Optional

from openai import OpenAI

from . import config

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048

EMPTY_REPLY = "Désolé, je n'ai pas pu générer de réponse."

_client: Optional[OpenAI] = None


def is_llm_enabled() -> bool:
    return bool(config.LLM_API_KEY)


def get_client() -> OpenAI:
    """Return the shared OpenAI client, creating it on first use."""
    global _client
    if _client is None:
        if not is_llm_enabled():
            raise RuntimeError("LLM_API_KEY is not set; the assistant runs in demo mode")
        logger.info("Initializing chat client for %s (model %s)", config.LLM_BASE_URL, config.LLM_MODEL)
        _client = OpenAI(api_key=config.LLM_API_KEY, base_url=config.LLM_BASE_URL)
    return _client


def reset_client() -> None:
    global _client
    _client = None


def call_chat_model(
    messages: List[Dict[str, str]],
    model: Optional[str] = None,
    temperature: float = DEFAULT_TEMPERATURE,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> str:
    """
    Send the full conversation and return the assistant text.

    Args:
        messages: OpenAI-format messages (``role`` / ``content``), system
            prompt included.
        model: Model name (defaults to LLM_MODEL)

    Raises:
        openai.OpenAIError: Propagated to the caller, which decides on the
            user-facing fallback.
    """
    if model is None:
        model = config.LLM_MODEL

    completion = get_client().chat.completions.create(
        model=model,
        messages=messages,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    content = completion.choices[0].message.content if completion.choices else None
    return content or EMPTY_REPLY
