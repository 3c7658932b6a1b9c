"""
Menu Routes for Vite & Gourmand
===============================

Public, read-only catalog endpoints used by the order wizard and the menu
pages.

Endpoints:
----------
- GET /api/menus: List menus with pagination and filtering
- GET /api/menus/{id}: Get one menu with its dishes

Filtering:
----------
- ?status=published (default) - only menus open to orders
- ?dietId=2 / ?themeId=1 - restrict to a diet or theme

Pagination:
-----------
Uses page/limit parameters (limit capped at 100) and returns
``{"items": [...], "meta": {page, limit, total, totalPages, hasNext, hasPrev}}``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session, selectinload

from ..db import get_db
from ..models import Dish, Menu
from ..responses import envelope
from ..schemas import MenuListData, MenuOut, build_pagination_meta

logger = logging.getLogger(__name__)

menus_router = APIRouter(prefix="/menus", tags=["Menus"])


def _menu_query(db: Session):
    return db.query(Menu).options(
        selectinload(Menu.diet),
        selectinload(Menu.theme),
        selectinload(Menu.dishes).selectinload(Dish.allergens),
    )


@menus_router.get("")
def list_menus(
    request: Request,
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: str = Query("published"),
    diet_id: Optional[int] = Query(None, alias="dietId"),
    theme_id: Optional[int] = Query(None, alias="themeId"),
):
    query = _menu_query(db).filter(Menu.status == status)
    if diet_id is not None:
        query = query.filter(Menu.diet_id == diet_id)
    if theme_id is not None:
        query = query.filter(Menu.theme_id == theme_id)

    total = query.count()
    menus = query.order_by(Menu.id).offset((page - 1) * limit).limit(limit).all()

    data = MenuListData(
        items=[MenuOut.model_validate(m) for m in menus],
        meta=build_pagination_meta(page, limit, total),
    )
    return envelope(request, data.model_dump(by_alias=True), "Menus retrieved")


@menus_router.get("/{menu_id}")
def get_menu(
    menu_id: int,
    request: Request,
    db: Session = Depends(get_db),
):
    menu = _menu_query(db).filter(Menu.id == menu_id).first()
    if menu is None:
        raise HTTPException(status_code=404, detail=f"Menu {menu_id} not found")
    return envelope(request, MenuOut.model_validate(menu), "Menu retrieved")
