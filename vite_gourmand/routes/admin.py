"""
Admin Routes for Vite & Gourmand
================================

Back-office endpoints for the team.

Endpoints:
----------
- GET /api/admin/orders: List all orders with pagination and status filter
- PATCH /api/admin/orders/{id}/status: Move an order through its lifecycle
- GET /api/admin/tickets: List support tickets created from the contact form

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.

Usage:
------
    # Orders waiting for confirmation
    GET /api/admin/orders?status=pending&page=1&limit=20

    # Confirm an order
    PATCH /api/admin/orders/12/status  {"status": "confirmed"}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..db import get_db
from ..responses import envelope
from ..schemas import (
    OrderListData,
    OrderOut,
    OrderStatusUpdate,
    TicketOut,
    build_pagination_meta,
)
from ..services import order as order_service
from ..services.contact import list_tickets
from ..services.order import OrderError

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/admin", tags=["Admin"])


# =============================================================================
# Order Endpoints
# =============================================================================

@admin_router.get("/orders")
def list_orders(
    request: Request,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
    status: Optional[str] = Query(None, description="Filter by order status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """Return all orders, newest first."""
    orders, total = order_service.list_orders(db, page, limit, status)
    data = OrderListData(
        items=[OrderOut.model_validate(o) for o in orders],
        meta=build_pagination_meta(page, limit, total),
    )
    return envelope(request, data.model_dump(by_alias=True), "Orders retrieved")


@admin_router.patch("/orders/{order_id}/status")
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: str = Depends(verify_admin_credentials),
):
    try:
        order = order_service.update_order_status(db, order_id, payload.status)
    except OrderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    logger.info("Admin %s set order %s to %s", admin, order.order_number, payload.status)
    return envelope(request, OrderOut.model_validate(order), "Order status updated")


# =============================================================================
# Ticket Endpoints
# =============================================================================

@admin_router.get("/tickets")
def get_tickets(
    request: Request,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
    status: Optional[str] = Query(None, description="Filter by ticket status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    tickets, total = list_tickets(db, page, limit, status)
    data = {
        "items": [TicketOut.model_validate(t) for t in tickets],
        "meta": build_pagination_meta(page, limit, total).model_dump(by_alias=True),
    }
    return envelope(request, data, "Tickets retrieved")
