"""
Order Routes for Vite & Gourmand
================================

Customer order endpoints. All of them require a bearer session token; a
missing or expired token is answered with 401 so that the ordering client can
save its draft and send the customer to the sign-in portal.

Endpoints:
----------
- POST /api/orders: Create a catalog order or a custom quote request
- GET /api/orders: List the customer's own orders (paginated)
- GET /api/orders/{id}: Get one of the customer's orders
- POST /api/orders/{id}/cancel: Cancel a pending or confirmed order

The pricing, stock and validation rules live in services/order.py.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..db import get_db
from ..models import User
from ..responses import envelope
from ..schemas import (
    OrderCancelRequest,
    OrderCreate,
    OrderListData,
    OrderOut,
    build_pagination_meta,
)
from ..services import order as order_service
from ..services.order import OrderError

logger = logging.getLogger(__name__)

orders_router = APIRouter(prefix="/orders", tags=["Orders"])


@orders_router.post("", status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        order = order_service.create_order(db, user, payload)
    except OrderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    return envelope(request, OrderOut.model_validate(order), "Order created", status_code=201)


@orders_router.get("")
def list_my_orders(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    orders, total = order_service.list_user_orders(db, user, page, limit)
    data = OrderListData(
        items=[OrderOut.model_validate(o) for o in orders],
        meta=build_pagination_meta(page, limit, total),
    )
    return envelope(request, data.model_dump(by_alias=True), "Orders retrieved")


@orders_router.get("/{order_id}")
def get_my_order(
    order_id: int,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        order = order_service.get_user_order(db, user, order_id)
    except OrderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return envelope(request, OrderOut.model_validate(order), "Order retrieved")


@orders_router.post("/{order_id}/cancel")
def cancel_my_order(
    order_id: int,
    payload: OrderCancelRequest,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        order = order_service.get_user_order(db, user, order_id)
        order = order_service.cancel_order(db, order, payload.reason)
    except OrderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return envelope(request, OrderOut.model_validate(order), "Order cancelled")
