"""
Display-only price estimate for the order wizard.

The estimate is price per person times guests, rounded to cents. It is shown
as an indication only: the API recomputes the real total from the menu when
the order is created.
"""

from .draft import MenuSummary


def estimate(price_per_person: float, person_count: int) -> float:
    return round(price_per_person * person_count, 2)


def estimate_for_menu(menu: MenuSummary, person_count: int) -> float:
    return estimate(menu.price_per_person, person_count)


def format_estimate(value: float) -> str:
    """Format an amount with two decimals, e.g. ``136.50``."""
    return f"{value:.2f}"
