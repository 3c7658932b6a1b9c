"""
Custom Menu Composer
====================

The composer pairs the assistant chat with the brief. Each exchange goes
through ``POST /api/ai-agent/chat`` and the reply feeds the brief extractor;
once the four required fields are filled the visitor leaves a name and an
email and the brief is sent as a contact ticket.

State kept on the composer:

- ``messages``: the visible chat (``ChatMessage(role, content)``)
- ``conversation_id``: echoed back to the assistant after the first reply
- ``brief``: the :class:`~vite_gourmand.ordering.brief.Brief` being built
- ``loading`` / ``submitting``: a request is in flight
- ``ticket_number`` / ``submitted``: set once the ticket is created
- ``error``: last user-facing submission error
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .api_client import CateringApiClient
from .brief import (
    Brief,
    build_brief_text,
    build_ticket_title,
    copy_to_proposal,
    extract_brief,
    is_brief_ready,
    missing_fields,
)
from .errors import NetworkError, ServerRejection, ValidationError

logger = logging.getLogger(__name__)

CHAT_ERROR_MESSAGE = "⚠️ Erreur de communication. Veuillez réessayer."
SUBMIT_ERROR_MESSAGE = "Erreur lors de l'envoi. Veuillez réessayer."


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" or "assistant"
    content: str


class BriefComposer:
    def __init__(
        self,
        api: CateringApiClient,
        on_brief_ready: Optional[Callable[[str], None]] = None,
    ):
        self.api = api
        self.on_brief_ready = on_brief_ready

        self.messages: List[ChatMessage] = []
        self.conversation_id: Optional[str] = None
        self.brief = Brief()
        self.loading = False
        self.submitting = False
        self.submitted = False
        self.ticket_number: Optional[str] = None
        self.error: Optional[str] = None

    def send(self, text: str) -> Optional[str]:
        """Send a chat message; returns the assistant reply, or None if nothing was sent."""
        text = text.strip()
        if not text or self.loading:
            return None

        self.messages.append(ChatMessage("user", text))
        self.loading = True
        try:
            data = self.api.send_chat_message(text, self.conversation_id)
        except (NetworkError, ServerRejection) as e:
            logger.warning("Assistant request failed: %s", e)
            self.messages.append(ChatMessage("assistant", CHAT_ERROR_MESSAGE))
            return CHAT_ERROR_MESSAGE
        finally:
            self.loading = False

        self.conversation_id = data.get("conversationId") or self.conversation_id
        reply = data.get("message") or ""
        self.messages.append(ChatMessage("assistant", reply))
        self.brief = extract_brief(self.brief, text, reply)
        return reply

    def edit_brief(self, **fields: str) -> Brief:
        self.brief = self.brief.edit(**fields)
        return self.brief

    def use_as_proposal(self, message: ChatMessage) -> Brief:
        self.brief = copy_to_proposal(self.brief, message.content)
        return self.brief

    @property
    def brief_text(self) -> str:
        return build_brief_text(self.brief)

    def submit(self, name: str, email: str, phone: Optional[str] = None) -> Optional[str]:
        """
        Send the brief as a contact ticket and return the ticket number.

        Raises:
            ValidationError: Required brief fields or contact details are
                missing; nothing is sent.
        """
        if self.submitted:
            return self.ticket_number
        if self.submitting:
            return None

        missing = missing_fields(self.brief)
        if missing:
            raise ValidationError(f"Brief incomplet : {', '.join(missing)}")
        if not name.strip() or not email.strip():
            raise ValidationError("Le nom et l'email sont obligatoires.")

        text = build_brief_text(self.brief)
        self.submitting = True
        self.error = None
        try:
            data = self.api.create_contact_ticket(
                name=name.strip(),
                email=email.strip(),
                phone=(phone or "").strip() or None,
                title=build_ticket_title(self.brief),
                description=text,
            )
        except (NetworkError, ServerRejection) as e:
            logger.warning("Brief submission failed: %s", e)
            self.error = SUBMIT_ERROR_MESSAGE
            return None
        finally:
            self.submitting = False

        self.ticket_number = (data or {}).get("ticket_number")
        self.submitted = True
        logger.info("Custom menu brief sent as ticket %s", self.ticket_number)
        if self.on_brief_ready is not None:
            self.on_brief_ready(text)
        return self.ticket_number

    @property
    def ready(self) -> bool:
        return is_brief_ready(self.brief)
