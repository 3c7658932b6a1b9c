"""
Contact Schemas for Vite & Gourmand
===================================

``POST /api/contact`` is used both by the plain contact form and by the custom
menu composer, which sends the assembled brief as ``description``. Each
submission creates a support ticket whose number is returned to the visitor.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=30)
    title: str = Field(min_length=3, max_length=200)
    description: str = Field(min_length=10, max_length=20000)


class ContactOut(BaseModel):
    id: int
    ticket_number: str
    title: str
    email: str
    created_at: Optional[datetime] = None


class TicketOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    ticket_number: str
    category: str
    subject: str
    description: str
    priority: str
    status: str
    created_at: Optional[datetime] = None
