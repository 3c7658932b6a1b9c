"""
Routes Package for Vite & Gourmand
==================================

This package contains all API route definitions organized by domain. Each
module defines a FastAPI APIRouter with related endpoints grouped together.

**Public Routes:**
- menus.py: Read-only catalog
- contact.py: Contact form / custom menu requests (creates support tickets)
- ai_agent.py: Custom-menu assistant chat and status

**Customer Routes (bearer session):**
- orders.py: Order creation, listing and cancellation

**Admin Routes (HTTP Basic):**
- admin.py: Order management and support tickets
- ai_agent.py: Conversation inspection

Router Registration:
--------------------
All routers are mounted under the ``/api`` prefix in app_factory.py.

Error Handling:
---------------
Routes raise HTTPException; responses.py turns them into the standard error
envelope:
- 400: Bad request (validation errors)
- 401: Unauthorized (missing session or invalid admin credentials)
- 404: Not found (invalid ID)
- 409: Conflict (menu out of stock)
- 429: Too many requests (rate limited)
- 503: Service unavailable (missing configuration)
"""

from .menus import menus_router
from .orders import orders_router
from .contact import contact_router
from .ai_agent import ai_agent_router, limiter
from .admin import admin_router

__all__ = [
    "menus_router",
    "orders_router",
    "contact_router",
    "ai_agent_router",
    "admin_router",
    "limiter",
]
