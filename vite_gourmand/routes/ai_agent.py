"""
Menu Assistant Routes for Vite & Gourmand
=========================================

Endpoints:
----------
- POST /api/ai-agent/chat: Send a message to the assistant (rate limited)
- GET /api/ai-agent/status: Whether a real model is configured (public)
- GET /api/ai-agent/conversations: List live conversations (admin)
- GET /api/ai-agent/conversations/{id}: Read one conversation (admin)
- DELETE /api/ai-agent/conversations/{id}: Drop a conversation (admin)

Rate Limiting:
--------------
The chat endpoint calls a paid model, so it is limited per client IP
(default: 20/minute, see RATE_LIMIT_CHAT). The limiter is attached to the
application in app_factory.py.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..config import RATE_LIMIT_ENABLED, get_rate_limit_chat
from ..db import get_db
from ..responses import envelope
from ..schemas import (
    AgentStatusOut,
    ChatMessageRequest,
    ChatMessageResponse,
    ConversationOut,
    ConversationSummary,
)
from ..services import ai_agent

logger = logging.getLogger(__name__)

ai_agent_router = APIRouter(prefix="/ai-agent", tags=["AI Assistant"])


# =============================================================================
# Rate Limiting Setup
# =============================================================================

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)


# =============================================================================
# Public Endpoints
# =============================================================================

@ai_agent_router.post("/chat")
@limiter.limit(get_rate_limit_chat)
def chat_message(
    request: Request,
    payload: ChatMessageRequest,
    db: Session = Depends(get_db),
):
    constraints = {
        "guestCount": payload.guest_count,
        "budgetPerPerson": payload.budget_per_person,
        "dietId": payload.diet_id,
        "themeId": payload.theme_id,
        "excludeAllergens": payload.exclude_allergens or None,
    }
    result = ai_agent.chat(
        db,
        payload.message,
        conversation_id=payload.conversation_id,
        constraints=constraints,
    )
    data = ChatMessageResponse.model_validate(result)
    return envelope(request, data.model_dump(by_alias=True), "Message processed")


@ai_agent_router.get("/status")
def agent_status(request: Request):
    data = AgentStatusOut.model_validate(ai_agent.get_status())
    return envelope(request, data.model_dump(by_alias=True), "Assistant status")


# =============================================================================
# Admin Endpoints
# =============================================================================

@ai_agent_router.get("/conversations")
def list_conversations(
    request: Request,
    _admin: str = Depends(verify_admin_credentials),
):
    items = [
        ConversationSummary.model_validate(c).model_dump(by_alias=True)
        for c in ai_agent.list_conversations()
    ]
    return envelope(request, items, "Conversations retrieved")


@ai_agent_router.get("/conversations/{conversation_id}")
def get_conversation(
    conversation_id: str,
    request: Request,
    _admin: str = Depends(verify_admin_credentials),
):
    conversation = ai_agent.get_conversation(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    data = ConversationOut.model_validate(conversation)
    return envelope(request, data.model_dump(by_alias=True), "Conversation retrieved")


@ai_agent_router.delete("/conversations/{conversation_id}")
def delete_conversation(
    conversation_id: str,
    request: Request,
    _admin: str = Depends(verify_admin_credentials),
):
    if not ai_agent.delete_conversation(conversation_id):
        raise HTTPException(status_code=404, detail="Conversation not found")
    logger.info("Conversation %s deleted by admin", conversation_id)
    return envelope(request, {"deleted": True}, "Conversation deleted")
