"""
Order Service for Vite & Gourmand
=================================

This module contains the server-side order logic called by the order routes.

Key Functions:
--------------
- create_order: Validate a submission and persist it with authoritative pricing
- list_user_orders / get_user_order: Customer views of their own orders
- cancel_order: Customer cancellation of a pending or confirmed order
- list_orders / update_order_status: Admin views

Authoritative Pricing:
----------------------
The ordering client shows an estimate (price per person x guests) but the
server never trusts it. For catalog orders:

    menu_price  = menu.price_per_person
    total_price = menu.price_per_person * person_number

A client total that differs is logged and overwritten. Custom requests have no
menu and are stored as ``quote`` with zero amounts.

Stock:
------
``Menu.remaining_qty`` counts the orders a menu can still take. Each catalog
order consumes one unit; a menu at zero is rejected. Cancelling an order,
by its owner or by an admin, gives the unit back; an admin reopening a
cancelled order takes it again.
"""

import logging
import secrets
import string
from datetime import date, datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..models import Menu, Order, User
from ..schemas.orders import OrderCreate

logger = logging.getLogger(__name__)

CANCELLABLE_STATUSES = ("pending", "confirmed")
CUSTOM_REQUEST_MIN_LENGTH = 10

_ORDER_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


class OrderError(Exception):
    """Order cannot be created or changed; carries the HTTP status to report."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def generate_order_number(today: Optional[date] = None) -> str:
    """Return an order number such as ``VG-20260615-AB12CD``."""
    today = today or datetime.now(timezone.utc).date()
    suffix = "".join(secrets.choice(_ORDER_SUFFIX_ALPHABET) for _ in range(6))
    return f"VG-{today.strftime('%Y%m%d')}-{suffix}"


def compute_total(price_per_person: float, person_number: int) -> float:
    return round(price_per_person * person_number, 2)


def _validate_catalog_order(db: Session, payload: OrderCreate) -> Menu:
    menu = db.get(Menu, payload.menu_id)
    if menu is None or menu.status != "published":
        raise OrderError(404, "Menu not found")

    if menu.remaining_qty <= 0:
        raise OrderError(409, f"Menu '{menu.title}' is no longer available")

    if payload.person_number < menu.person_min:
        raise OrderError(
            400,
            f"This menu requires at least {menu.person_min} persons",
        )
    return menu


def create_order(db: Session, user: User, payload: OrderCreate) -> Order:
    """
    Create an order for ``user`` from a client submission.

    Raises:
        OrderError: Unknown menu (404), out of stock (409), or an invalid
            submission (400).
    """
    if payload.delivery_date < datetime.now(timezone.utc).date():
        raise OrderError(400, "Delivery date cannot be in the past")

    instructions = (payload.special_instructions or "").strip() or None

    if payload.menu_id is not None:
        menu = _validate_catalog_order(db, payload)
        menu_price = menu.price_per_person
        total_price = compute_total(menu.price_per_person, payload.person_number)

        if abs(total_price - payload.total_price) >= 0.01:
            logger.warning(
                "Client total %.2f differs from server total %.2f for menu %d; using server total",
                payload.total_price,
                total_price,
                menu.id,
            )

        menu.remaining_qty -= 1
        status = "pending"
    else:
        if not instructions or len(instructions) < CUSTOM_REQUEST_MIN_LENGTH:
            raise OrderError(
                400,
                f"A custom request needs a description of at least {CUSTOM_REQUEST_MIN_LENGTH} characters",
            )
        menu_price = 0.0
        total_price = 0.0
        status = "quote"

    order = Order(
        order_number=generate_order_number(),
        user_id=user.id,
        menu_id=payload.menu_id,
        status=status,
        delivery_date=payload.delivery_date,
        delivery_hour=payload.delivery_hour,
        delivery_address=payload.delivery_address.strip(),
        person_number=payload.person_number,
        menu_price=menu_price,
        total_price=total_price,
        special_instructions=instructions,
    )
    db.add(order)
    db.commit()
    db.refresh(order)

    logger.info(
        "Order %s created for user %d (%s, %d persons, total %.2f)",
        order.order_number,
        user.id,
        status,
        order.person_number,
        order.total_price,
    )
    return order


def list_user_orders(db: Session, user: User, page: int, limit: int) -> Tuple[List[Order], int]:
    query = db.query(Order).filter(Order.user_id == user.id)
    total = query.count()
    orders = (
        query.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return orders, total


def get_user_order(db: Session, user: User, order_id: int) -> Order:
    order = db.get(Order, order_id)
    # Other customers' orders are reported as missing
    if order is None or order.user_id != user.id:
        raise OrderError(404, "Order not found")
    return order


def _release_stock(order: Order) -> None:
    if order.menu is not None:
        order.menu.remaining_qty += 1


def _reserve_stock(order: Order) -> None:
    if order.menu is None:
        return
    if order.menu.remaining_qty <= 0:
        raise OrderError(409, f"Menu '{order.menu.title}' is no longer available")
    order.menu.remaining_qty -= 1


def cancel_order(db: Session, order: Order, reason: str) -> Order:
    if order.status not in CANCELLABLE_STATUSES:
        raise OrderError(400, "Order cannot be cancelled")

    order.status = "cancelled"
    order.cancellation_reason = reason.strip()
    _release_stock(order)
    db.commit()
    db.refresh(order)

    logger.info("Order %s cancelled", order.order_number)
    return order


def list_orders(
    db: Session,
    page: int,
    limit: int,
    status: Optional[str] = None,
) -> Tuple[List[Order], int]:
    query = db.query(Order)
    if status:
        query = query.filter(Order.status == status)

    total = query.count()
    orders = (
        query.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return orders, total


def update_order_status(db: Session, order_id: int, status: str) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise OrderError(404, "Order not found")

    previous = order.status
    if status == "cancelled" and previous != "cancelled":
        _release_stock(order)
    elif previous == "cancelled" and status != "cancelled":
        _reserve_stock(order)
    order.status = status
    db.commit()
    db.refresh(order)

    logger.info("Order %s status %s -> %s", order.order_number, previous, status)
    return order
