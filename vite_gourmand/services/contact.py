"""
Contact Service for Vite & Gourmand
===================================

When a visitor submits the contact form (or the custom menu composer sends
its brief):

1. A ContactMessage row is persisted.
2. A SupportTicket is created so the team can track it.
3. Confirmation and owner notification emails are sent. The route schedules
   them as background tasks so a mail failure never fails the request.

Ticket Numbers:
---------------
``TK<year><month>-<6 random chars>``, e.g. ``TK202606-AB12CD``.

Categories:
-----------
Derived from the subject: event words (mariage, anniversaire, événement,
entreprise) map to ``order``, "menu" maps to ``menu``, anything else is
``other``.
"""

import logging
import secrets
import string
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..models import ContactMessage, SupportTicket
from ..schemas.contact import ContactCreate

logger = logging.getLogger(__name__)

_TICKET_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits

ORDER_KEYWORDS = ("mariage", "anniversaire", "événement", "entreprise")


def generate_ticket_number(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    suffix = "".join(secrets.choice(_TICKET_SUFFIX_ALPHABET) for _ in range(6))
    return f"TK{now.year}{now.month:02d}-{suffix}"


def map_category(subject: str) -> str:
    lowered = subject.lower()
    if any(keyword in lowered for keyword in ORDER_KEYWORDS):
        return "order"
    if "menu" in lowered:
        return "menu"
    return "other"


def _ticket_description(payload: ContactCreate) -> str:
    description = f"[Contact — {payload.name}] {payload.description}\n\n—\nEmail : {payload.email}"
    if payload.phone:
        description += f"\nTéléphone : {payload.phone}"
    return description


def create_contact(db: Session, payload: ContactCreate) -> Tuple[ContactMessage, SupportTicket]:
    """Persist the contact message and its support ticket."""
    message = ContactMessage(
        title=payload.title,
        description=payload.description,
        email=payload.email,
    )
    ticket = SupportTicket(
        ticket_number=generate_ticket_number(),
        category=map_category(payload.title),
        subject=payload.title,
        description=_ticket_description(payload),
        priority="normal",
        status="open",
    )
    db.add(message)
    db.add(ticket)
    db.commit()
    db.refresh(message)
    db.refresh(ticket)

    logger.info(
        "Ticket %s created from contact form (contact #%d, ticket #%d)",
        ticket.ticket_number,
        message.id,
        ticket.id,
    )
    return message, ticket


def list_tickets(
    db: Session,
    page: int,
    limit: int,
    status: Optional[str] = None,
) -> Tuple[List[SupportTicket], int]:
    query = db.query(SupportTicket)
    if status:
        query = query.filter(SupportTicket.status == status)
    total = query.count()
    tickets = (
        query.order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return tickets, total
