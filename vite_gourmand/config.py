"""
Configuration Module for Vite & Gourmand
========================================

This module centralizes the configuration settings, environment variables and
constants used by both halves of the project: the API backend and the
client-side ordering workflow.

Configuration Categories:
-------------------------
- **Database**: SQLAlchemy connection URL.

- **Rate Limiting**: Throttling for the AI assistant endpoint, which is the
  only endpoint that costs money per call.

- **AI Assistant**: OpenAI-compatible endpoint, model and conversation TTL.
  Without an API key the assistant runs in demo mode.

- **Input Validation**: Maximum message length for the assistant.

- **CORS Settings**: Allowed origins for the frontend.

- **Admin Authentication**: HTTP Basic credentials for /api/admin/*.

- **Email**: Owner address and SMTP settings for ticket notifications.

- **Ordering Client**: API base URL and the authentication entry point used
  when an order is submitted without a session.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./vite_gourmand.db")
- RATE_LIMIT_CHAT: AI chat rate limit (default: "20 per minute")
- RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: "true")
- LLM_API_KEY: API key for the assistant (empty = demo mode)
- LLM_BASE_URL: OpenAI-compatible base URL (default: Groq)
- LLM_MODEL: Chat model name (default: "llama-3.3-70b-versatile")
- CONVERSATION_TTL_SECONDS: Assistant conversation lifetime (default: 7200)
- MAX_MESSAGE_LENGTH: Max assistant message length (default: 2000)
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")
- ADMIN_USERNAME / ADMIN_PASSWORD: Admin credentials
- OWNER_EMAIL: Address notified when a ticket is created
- API_BASE_URL: Backend base URL used by the ordering client
- AUTH_ENTRY_URL: Where unauthenticated order submissions are redirected

Usage:
------
    from vite_gourmand.config import (
        RATE_LIMIT_CHAT,
        MAX_MESSAGE_LENGTH,
    )
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./vite_gourmand.db")


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Uses slowapi with in-memory storage (use Redis for multi-worker prod).

RATE_LIMIT_CHAT: str = os.getenv("RATE_LIMIT_CHAT", "20 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_chat() -> str:
    """
    Return the current chat rate limit.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return RATE_LIMIT_CHAT


# =============================================================================
# AI Assistant Configuration
# =============================================================================

LLM_API_KEY: str = os.getenv("LLM_API_KEY", "")
LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://api.groq.com/openai/v1")
LLM_MODEL: str = os.getenv("LLM_MODEL", "llama-3.3-70b-versatile")

# Conversations older than this are dropped from the in-memory store
CONVERSATION_TTL_SECONDS: int = int(os.getenv("CONVERSATION_TTL_SECONDS", "7200"))  # 2 hours


# =============================================================================
# Input Validation Configuration
# =============================================================================

MAX_MESSAGE_LENGTH: int = int(os.getenv("MAX_MESSAGE_LENGTH", "2000"))


# =============================================================================
# CORS Configuration
# =============================================================================
# Format: comma-separated list of origins.
# Default "*" allows all origins (suitable for development only)

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]


# =============================================================================
# Admin Authentication Configuration
# =============================================================================
# ADMIN_PASSWORD must be set in production for admin access to work.

ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")

# Lifetime of a user bearer token created by the seed command
USER_SESSION_TTL_DAYS: int = int(os.getenv("USER_SESSION_TTL_DAYS", "30"))


# =============================================================================
# Email Configuration
# =============================================================================

OWNER_EMAIL: str = os.getenv("OWNER_EMAIL", "contact@vite-gourmand.fr")
COMPANY_NAME: str = os.getenv("COMPANY_NAME", "Vite & Gourmand")


# =============================================================================
# Ordering Client Configuration
# =============================================================================

API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000")
AUTH_ENTRY_URL: str = os.getenv("AUTH_ENTRY_URL", "/portal?redirect=/order")

# Client-side request timeout in seconds
API_TIMEOUT: float = float(os.getenv("API_TIMEOUT", "15"))
