"""
Ordering Package for Vite & Gourmand
====================================

Client-side order-request workflow:

- draft.py: Wizard steps, the immutable order draft and its transitions
- flow.py: Wizard controller with the account-gated submission
- brief.py: Custom menu brief and its extraction from chat messages
- composer.py: Assistant chat + brief + ticket submission
- pricing.py: Display-only price estimate
- storage.py: Session token and pending draft stores
- api_client.py: HTTP client for the API endpoints used here
- errors.py: ValidationError, Unauthenticated, NetworkError, ServerRejection
"""

from .api_client import CateringApiClient
from .brief import (
    Brief,
    brief_progress,
    build_brief_text,
    build_ticket_title,
    copy_to_proposal,
    extract_brief,
    is_brief_ready,
)
from .composer import BriefComposer, ChatMessage
from .draft import (
    MenuSummary,
    OrderDraft,
    Step,
    can_decrement,
    choose_custom,
    decrement_persons,
    increment_persons,
    is_step_valid,
    minimum_persons,
    select_menu,
    set_delivery,
    set_instructions,
    set_person_count,
)
from .errors import (
    NetworkError,
    OrderingError,
    ServerRejection,
    Unauthenticated,
    ValidationError,
)
from .flow import Notification, OrderFlowController, SubmissionResult
from .pricing import estimate, estimate_for_menu, format_estimate
from .storage import (
    FileDraftStore,
    FileSessionStore,
    MemoryDraftStore,
    MemorySessionStore,
)

__all__ = [
    "CateringApiClient",
    "Brief",
    "brief_progress",
    "build_brief_text",
    "build_ticket_title",
    "copy_to_proposal",
    "extract_brief",
    "is_brief_ready",
    "BriefComposer",
    "ChatMessage",
    "MenuSummary",
    "OrderDraft",
    "Step",
    "can_decrement",
    "choose_custom",
    "decrement_persons",
    "increment_persons",
    "is_step_valid",
    "minimum_persons",
    "select_menu",
    "set_delivery",
    "set_instructions",
    "set_person_count",
    "NetworkError",
    "OrderingError",
    "ServerRejection",
    "Unauthenticated",
    "ValidationError",
    "Notification",
    "OrderFlowController",
    "SubmissionResult",
    "estimate",
    "estimate_for_menu",
    "format_estimate",
    "FileDraftStore",
    "FileSessionStore",
    "MemoryDraftStore",
    "MemorySessionStore",
]
