"""
Contact Routes for Vite & Gourmand
==================================

- POST /api/contact: Submit the contact form (also used by the custom menu
  composer). Creates a support ticket and returns its number.

Emails to the visitor and to the owner are scheduled as background tasks
after the response is built, so an SMTP outage never loses the ticket.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..email_service import send_owner_ticket_notification, send_ticket_confirmation_email
from ..responses import envelope
from ..schemas import ContactCreate, ContactOut
from ..services.contact import create_contact

logger = logging.getLogger(__name__)

contact_router = APIRouter(prefix="/contact", tags=["Contact"])


@contact_router.post("", status_code=status.HTTP_201_CREATED)
def submit_contact(
    payload: ContactCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    message, ticket = create_contact(db, payload)

    background_tasks.add_task(
        send_ticket_confirmation_email,
        to_email=payload.email,
        name=payload.name,
        ticket_number=ticket.ticket_number,
        subject_line=payload.title,
    )
    background_tasks.add_task(
        send_owner_ticket_notification,
        ticket_number=ticket.ticket_number,
        name=payload.name,
        email=payload.email,
        title=payload.title,
        description=payload.description,
        phone=payload.phone,
    )

    data = ContactOut(
        id=message.id,
        ticket_number=ticket.ticket_number,
        title=message.title,
        email=message.email,
        created_at=message.created_at,
    )
    return envelope(
        request,
        data,
        f"Votre demande a été enregistrée sous le numéro {ticket.ticket_number}",
        status_code=201,
    )
