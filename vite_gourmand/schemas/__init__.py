"""
Schemas Package for Vite & Gourmand
===================================

Pydantic models used for API request validation and response serialization.

Schema Organization:
--------------------
- **common.py**: Pagination metadata
- **menu.py**: Read-only catalog (menus, dishes, diets, themes)
- **orders.py**: Order creation, listing and status updates
- **contact.py**: Contact form and support tickets
- **ai_agent.py**: Custom-menu assistant chat

Naming Conventions:
-------------------
- *Out: Response models (e.g., MenuOut)
- *Create: Request bodies for POST (e.g., OrderCreate)
- *Request / *Response: Complex request/response structures
"""

from .common import PaginationMeta, build_pagination_meta

from .menu import (
    DietOut,
    ThemeOut,
    AllergenOut,
    DishOut,
    MenuOut,
    MenuListData,
)

from .orders import (
    OrderCreate,
    OrderOut,
    OrderListData,
    OrderCancelRequest,
    OrderStatusUpdate,
)

from .contact import (
    ContactCreate,
    ContactOut,
    TicketOut,
)

from .ai_agent import (
    ChatMessageRequest,
    ChatMessageResponse,
    ConversationOut,
    ConversationSummary,
    AgentStatusOut,
)

__all__ = [
    "PaginationMeta",
    "build_pagination_meta",
    "DietOut",
    "ThemeOut",
    "AllergenOut",
    "DishOut",
    "MenuOut",
    "MenuListData",
    "OrderCreate",
    "OrderOut",
    "OrderListData",
    "OrderCancelRequest",
    "OrderStatusUpdate",
    "ContactCreate",
    "ContactOut",
    "TicketOut",
    "ChatMessageRequest",
    "ChatMessageResponse",
    "ConversationOut",
    "ConversationSummary",
    "AgentStatusOut",
]
