"""
AI Assistant Schemas for Vite & Gourmand
========================================

Models for the custom-menu assistant endpoints.

Endpoint Coverage:
------------------
- POST /api/ai-agent/chat: Send a message, receive the assistant reply
- GET /api/ai-agent/status: Whether a real model is configured
- GET /api/ai-agent/conversations: Admin listing of live conversations

Conversations:
--------------
The first message of a conversation has no ``conversationId``; the server
generates one and the client echoes it on every following message. Optional
constraints (guest count, budget, diet, theme, allergens) are only read when
the conversation is created.

Validation:
-----------
Message length is constrained by MAX_MESSAGE_LENGTH (default: 2000 chars).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import MAX_MESSAGE_LENGTH


class ChatMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1)
    conversation_id: Optional[str] = Field(default=None, alias="conversationId", max_length=100)
    guest_count: Optional[int] = Field(default=None, alias="guestCount", ge=1)
    budget_per_person: Optional[float] = Field(default=None, alias="budgetPerPerson", gt=0)
    diet_id: Optional[int] = Field(default=None, alias="dietId")
    theme_id: Optional[int] = Field(default=None, alias="themeId")
    exclude_allergens: Optional[List[int]] = Field(default=None, alias="excludeAllergens")

    @field_validator("message")
    @classmethod
    def validate_message_length(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        if len(v) > MAX_MESSAGE_LENGTH:
            raise ValueError(f"Message exceeds maximum length of {MAX_MESSAGE_LENGTH} characters")
        return v


class ChatMessageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(alias="conversationId")
    message: str
    context: Dict[str, Any] = {}
    message_count: int = Field(alias="messageCount")


class ConversationMessage(BaseModel):
    role: str
    content: str


class ConversationOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(alias="conversationId")
    messages: List[ConversationMessage]
    context: Dict[str, Any] = {}
    created_at: datetime = Field(alias="createdAt")


class ConversationSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    message_count: int = Field(alias="messageCount")
    created_at: datetime = Field(alias="createdAt")


class AgentStatusOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ai_enabled: bool = Field(alias="aiEnabled")
    model: str
    active_conversations: int = Field(alias="activeConversations")
