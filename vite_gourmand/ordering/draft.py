"""
Order Draft and Wizard Steps
============================

The order wizard walks the customer through four steps:

    MENU_SELECTION -> DELIVERY -> DETAILS -> RECAP

Everything the customer enters lives in a single immutable :class:`OrderDraft`.
Each transition function takes a draft and returns a new one, so the step
guards below can be checked against any draft value.

Step Guards:
------------
- MENU_SELECTION: a catalog menu is selected, or the custom request text
  has at least 10 characters.
- DELIVERY: address of at least 5 characters, a date, and a 24-hour
  ``HH:MM`` hour.
- DETAILS: person count at or above the minimum. ``set_person_count``
  clamps, so this holds for any draft built through the transitions.
- RECAP: terminal.

Person Minimum:
---------------
A catalog menu imposes ``person_min``; a custom request starts at 1.
"""

import re
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

CUSTOM_DESCRIPTION_MIN_LENGTH = 10
ADDRESS_MIN_LENGTH = 5
DEFAULT_CITY = "Bordeaux"
DEFAULT_HOUR = "12:00"

HOUR_RE = re.compile(r"([01]\d|2[0-3]):[0-5]\d")


class Step(Enum):
    MENU_SELECTION = 1
    DELIVERY = 2
    DETAILS = 3
    RECAP = 4

    @property
    def previous(self) -> Optional["Step"]:
        return Step(self.value - 1) if self.value > 1 else None

    @property
    def following(self) -> Optional["Step"]:
        return Step(self.value + 1) if self.value < len(Step) else None


@dataclass(frozen=True)
class MenuSummary:
    """Read-only view of a catalog menu, as returned by ``GET /api/menus``."""
    id: int
    title: str
    price_per_person: float
    person_min: int = 1
    remaining_qty: int = 0
    description: Optional[str] = None
    diet: Optional[str] = None
    theme: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "MenuSummary":
        diet = data.get("diet") or {}
        theme = data.get("theme") or {}
        return cls(
            id=int(data["id"]),
            title=data.get("title", ""),
            price_per_person=float(data.get("price_per_person", 0)),
            person_min=int(data.get("person_min") or 1),
            remaining_qty=int(data.get("remaining_qty") or 0),
            description=data.get("description"),
            diet=diet.get("name"),
            theme=theme.get("name"),
        )

    @property
    def in_stock(self) -> bool:
        return self.remaining_qty > 0


@dataclass(frozen=True)
class OrderDraft:
    menu: Optional[MenuSummary] = None
    custom: bool = False
    custom_description: str = ""
    delivery_address: str = ""
    delivery_city: str = DEFAULT_CITY
    delivery_date: Optional[date] = None
    delivery_hour: str = DEFAULT_HOUR
    person_count: int = 1
    special_instructions: str = ""


# =============================================================================
# Transitions
# =============================================================================

def minimum_persons(draft: OrderDraft) -> int:
    if draft.menu is not None and not draft.custom:
        return max(draft.menu.person_min, 1)
    return 1


def select_menu(draft: OrderDraft, menu: MenuSummary) -> OrderDraft:
    return replace(
        draft,
        menu=menu,
        custom=False,
        custom_description="",
        person_count=max(menu.person_min, 1),
    )


def choose_custom(draft: OrderDraft, description: str = "") -> OrderDraft:
    return replace(
        draft,
        menu=None,
        custom=True,
        custom_description=description,
        person_count=max(draft.person_count, 1),
    )


def set_delivery(
    draft: OrderDraft,
    address: Optional[str] = None,
    city: Optional[str] = None,
    delivery_date: Optional[date] = None,
    hour: Optional[str] = None,
) -> OrderDraft:
    """Update any of the delivery fields; ``None`` keeps the current value."""
    return replace(
        draft,
        delivery_address=draft.delivery_address if address is None else address,
        delivery_city=draft.delivery_city if city is None else city,
        delivery_date=draft.delivery_date if delivery_date is None else delivery_date,
        delivery_hour=draft.delivery_hour if hour is None else hour,
    )


def set_person_count(draft: OrderDraft, count: int) -> OrderDraft:
    return replace(draft, person_count=max(int(count), minimum_persons(draft)))


def increment_persons(draft: OrderDraft) -> OrderDraft:
    return set_person_count(draft, draft.person_count + 1)


def decrement_persons(draft: OrderDraft) -> OrderDraft:
    return set_person_count(draft, draft.person_count - 1)


def can_decrement(draft: OrderDraft) -> bool:
    return draft.person_count > minimum_persons(draft)


def set_instructions(draft: OrderDraft, text: str) -> OrderDraft:
    return replace(draft, special_instructions=text)


# =============================================================================
# Step Guards
# =============================================================================

def _menu_step_valid(draft: OrderDraft) -> bool:
    if draft.custom:
        return len(draft.custom_description.strip()) >= CUSTOM_DESCRIPTION_MIN_LENGTH
    return draft.menu is not None


def _delivery_step_valid(draft: OrderDraft) -> bool:
    return (
        len(draft.delivery_address.strip()) >= ADDRESS_MIN_LENGTH
        and draft.delivery_date is not None
        and bool(HOUR_RE.fullmatch(draft.delivery_hour))
    )


def is_step_valid(step: Step, draft: OrderDraft) -> bool:
    if step is Step.MENU_SELECTION:
        return _menu_step_valid(draft)
    if step is Step.DELIVERY:
        return _delivery_step_valid(draft)
    if step is Step.DETAILS:
        return draft.person_count >= minimum_persons(draft)
    return True


STEP_ERRORS = {
    Step.MENU_SELECTION: "Choisissez un menu ou décrivez votre demande (10 caractères minimum).",
    Step.DELIVERY: "Indiquez une adresse (5 caractères minimum), une date et une heure au format HH:MM.",
    Step.DETAILS: "Le nombre de personnes est inférieur au minimum du menu.",
}
