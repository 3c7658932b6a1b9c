"""
Tests for the order draft transitions and step guards.
"""
from datetime import date

import pytest

from vite_gourmand.ordering.draft import (
    DEFAULT_CITY,
    DEFAULT_HOUR,
    MenuSummary,
    OrderDraft,
    Step,
    can_decrement,
    choose_custom,
    decrement_persons,
    increment_persons,
    is_step_valid,
    minimum_persons,
    select_menu,
    set_delivery,
    set_instructions,
    set_person_count,
)


class TestDefaults:

    def test_new_draft(self):
        """Test the wizard starts empty with Bordeaux at noon."""
        draft = OrderDraft()
        assert draft.menu is None
        assert draft.custom is False
        assert draft.delivery_city == DEFAULT_CITY == "Bordeaux"
        assert draft.delivery_hour == DEFAULT_HOUR == "12:00"
        assert draft.person_count == 1

    def test_draft_is_immutable(self):
        """Test that drafts cannot be mutated in place."""
        draft = OrderDraft()
        with pytest.raises(AttributeError):
            draft.person_count = 5


class TestPersonCount:

    def test_select_menu_resets_to_minimum(self, wedding_menu):
        """Test selecting a menu sets the person count to its minimum."""
        draft = set_person_count(OrderDraft(), 40)
        draft = select_menu(draft, wedding_menu)
        assert draft.person_count == 10

    def test_count_is_clamped_to_menu_minimum(self, wedding_menu):
        """Test a count below minPersons=10 stays at 10."""
        draft = select_menu(OrderDraft(), wedding_menu)
        draft = set_person_count(draft, 4)

        assert draft.person_count == 10
        assert not can_decrement(draft)
        assert decrement_persons(draft).person_count == 10

    def test_increment_then_decrement(self, wedding_menu):
        """Test the +/- controls around the minimum."""
        draft = increment_persons(select_menu(OrderDraft(), wedding_menu))
        assert draft.person_count == 11
        assert can_decrement(draft)

        draft = decrement_persons(draft)
        assert draft.person_count == 10
        assert not can_decrement(draft)

    def test_custom_minimum_is_one(self):
        """Test custom requests accept a single guest."""
        draft = choose_custom(OrderDraft(), "Buffet froid pour une réception")
        assert minimum_persons(draft) == 1
        assert set_person_count(draft, 0).person_count == 1

    def test_choose_custom_clears_menu(self, wedding_menu):
        draft = choose_custom(select_menu(OrderDraft(), wedding_menu), "Cocktail dînatoire")
        assert draft.menu is None
        assert draft.custom is True
        assert minimum_persons(draft) == 1

    def test_select_menu_clears_custom(self, wedding_menu):
        draft = select_menu(choose_custom(OrderDraft(), "Cocktail dînatoire"), wedding_menu)
        assert draft.custom is False
        assert draft.custom_description == ""


class TestStepGuards:

    def test_menu_step_requires_selection(self, wedding_menu):
        assert not is_step_valid(Step.MENU_SELECTION, OrderDraft())
        assert is_step_valid(Step.MENU_SELECTION, select_menu(OrderDraft(), wedding_menu))

    def test_custom_request_needs_ten_characters(self):
        """Test the custom description threshold ignores surrounding spaces."""
        assert not is_step_valid(Step.MENU_SELECTION, choose_custom(OrderDraft(), "  court   "))
        assert is_step_valid(Step.MENU_SELECTION, choose_custom(OrderDraft(), "0123456789"))

    @pytest.mark.parametrize("hour", ["25:00", "24:00", "9:00", "12:60", "12h00", "", "12:00\n", " 12:00"])
    def test_delivery_rejects_bad_hours(self, hour):
        """Test that invalid 24-hour times block the delivery step."""
        draft = set_delivery(OrderDraft(), address="12 rue Sainte-Catherine", delivery_date=date(2026, 6, 15), hour=hour)
        assert not is_step_valid(Step.DELIVERY, draft)

    @pytest.mark.parametrize("hour", ["00:00", "09:30", "19:45", "23:59"])
    def test_delivery_accepts_valid_hours(self, hour):
        draft = set_delivery(OrderDraft(), address="12 rue Sainte-Catherine", delivery_date=date(2026, 6, 15), hour=hour)
        assert is_step_valid(Step.DELIVERY, draft)

    def test_delivery_requires_address_and_date(self):
        no_date = set_delivery(OrderDraft(), address="12 rue Sainte-Catherine")
        short_address = set_delivery(OrderDraft(), address=" 1 r ", delivery_date=date(2026, 6, 15))

        assert not is_step_valid(Step.DELIVERY, no_date)
        assert not is_step_valid(Step.DELIVERY, short_address)

    def test_set_delivery_keeps_unspecified_fields(self):
        draft = set_delivery(OrderDraft(), address="12 rue Sainte-Catherine", city="Mérignac")
        draft = set_delivery(draft, hour="19:30")

        assert draft.delivery_address == "12 rue Sainte-Catherine"
        assert draft.delivery_city == "Mérignac"
        assert draft.delivery_hour == "19:30"

    def test_details_and_recap_are_valid(self, wedding_menu):
        draft = set_person_count(select_menu(OrderDraft(), wedding_menu), 3)
        assert is_step_valid(Step.DETAILS, draft)
        assert is_step_valid(Step.RECAP, draft)

    def test_instructions(self):
        assert set_instructions(OrderDraft(), "Sans coriandre").special_instructions == "Sans coriandre"


class TestMenuSummary:

    def test_from_api_payload(self):
        """Test parsing a menu as serialized by GET /api/menus."""
        menu = MenuSummary.from_api({
            "id": 2,
            "title": "Menu Séminaire",
            "price_per_person": 28,
            "person_min": 8,
            "remaining_qty": 0,
            "diet": {"id": 1, "name": "Classique"},
            "theme": None,
            "dishes": [],
        })

        assert menu.id == 2
        assert menu.price_per_person == 28.0
        assert menu.person_min == 8
        assert menu.diet == "Classique"
        assert menu.theme is None
        assert not menu.in_stock
