"""
Order Schemas for Vite & Gourmand
=================================

Request and response models for the order endpoints.

Order Kinds:
------------
- **Catalog order**: references a published menu (``menuId``). The server
  recomputes ``menu_price`` and ``total_price`` from the menu; the amounts the
  client sends are an estimate and are only compared for logging.
- **Custom request**: no ``menuId``; the customer's description travels in
  ``specialInstructions`` and the order is stored as a ``quote`` with zero
  prices until the team prices it.

Order Lifecycle:
----------------
quote/pending -> confirmed -> preparing -> delivery -> delivered
(pending and confirmed orders can be cancelled by their owner)

Field Naming:
-------------
Requests use the camelCase names of the public API (``deliveryDate``,
``personNumber``...); responses use the snake_case column names
(``order_number``, ``total_price``...).
"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import PaginationMeta

HOUR_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

OrderStatus = Literal[
    "quote",
    "pending",
    "confirmed",
    "preparing",
    "delivery",
    "delivered",
    "cancelled",
]


class OrderCreate(BaseModel):
    """Body of ``POST /api/orders``."""
    model_config = ConfigDict(populate_by_name=True)

    menu_id: Optional[int] = Field(default=None, alias="menuId", ge=1)
    delivery_date: date = Field(alias="deliveryDate")
    delivery_hour: str = Field(alias="deliveryHour", pattern=HOUR_PATTERN)
    delivery_address: str = Field(alias="deliveryAddress", min_length=5, max_length=500)
    person_number: int = Field(alias="personNumber", ge=1)
    menu_price: float = Field(default=0.0, alias="menuPrice", ge=0)
    total_price: float = Field(default=0.0, alias="totalPrice", ge=0)
    special_instructions: Optional[str] = Field(default=None, alias="specialInstructions", max_length=10000)


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    status: str
    menu_id: Optional[int] = None
    delivery_date: date
    delivery_hour: str
    delivery_address: str
    person_number: int
    menu_price: float
    total_price: float
    special_instructions: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None


class OrderListData(BaseModel):
    items: List[OrderOut]
    meta: PaginationMeta


class OrderCancelRequest(BaseModel):
    reason: str = Field(min_length=3, max_length=1000)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
