"""
Menu Schemas for Vite & Gourmand
================================

Read-only catalog models returned by ``GET /api/menus`` and
``GET /api/menus/{id}``. Menus are consumed by the ordering workflow for
selection and display-only price estimates; the server stays the authority on
prices, person minimums and stock.

All models are built straight from SQLAlchemy objects:

    menu = db.get(Menu, menu_id)
    return MenuOut.model_validate(menu)
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .common import PaginationMeta


class DietOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None


class ThemeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None


class AllergenOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class DishOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    course_type: str
    allergens: List[AllergenOut] = []


class MenuOut(BaseModel):
    """
    A published (or draft) catalog menu.

    Attributes:
        person_min: Minimum number of guests an order must cover
        price_per_person: Unit price used for estimates and server pricing
        remaining_qty: Orders still accepted for this menu
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    conditions: Optional[str] = None
    person_min: int
    price_per_person: float
    remaining_qty: int
    status: str
    is_seasonal: bool = False
    diet: Optional[DietOut] = None
    theme: Optional[ThemeOut] = None
    dishes: List[DishOut] = []


class MenuListData(BaseModel):
    items: List[MenuOut]
    meta: PaginationMeta
