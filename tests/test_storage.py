"""
Tests for the session and pending draft stores.
"""
from datetime import date

from vite_gourmand.ordering import (
    FileDraftStore,
    FileSessionStore,
    MemoryDraftStore,
    MemorySessionStore,
    OrderDraft,
    select_menu,
    set_delivery,
)
from vite_gourmand.ordering.storage import parse_delivery_date, serialize_draft


class TestSessionStores:

    def test_memory_session(self):
        store = MemorySessionStore()
        assert not store.is_authenticated()

        store.set_token("abc")
        assert store.is_authenticated()
        assert store.get_token() == "abc"

        store.clear()
        assert not store.is_authenticated()

    def test_file_session(self, tmp_path):
        path = str(tmp_path / "auth" / "session.json")
        store = FileSessionStore(path)
        assert not store.is_authenticated()

        store.set_token("abc")
        assert FileSessionStore(path).get_token() == "abc"

        store.clear()
        assert not store.is_authenticated()

    def test_corrupt_session_file_means_signed_out(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        assert not FileSessionStore(str(path)).is_authenticated()


class TestDraftStores:

    def test_serialize_draft(self, wedding_menu):
        draft = set_delivery(
            select_menu(OrderDraft(), wedding_menu),
            address="12 rue Sainte-Catherine",
            delivery_date=date(2026, 6, 15),
        )

        assert serialize_draft(draft) == {
            "menuId": 1,
            "deliveryDate": "2026-06-15",
            "deliveryHour": "12:00",
            "deliveryAddress": "12 rue Sainte-Catherine",
            "deliveryCity": "Bordeaux",
            "personCount": 10,
            "custom": False,
            "customDescription": "",
            "specialInstructions": "",
        }

    def test_memory_draft_store_returns_copies(self):
        store = MemoryDraftStore()
        store.save({"menuId": 1})
        loaded = store.load()
        loaded["menuId"] = 99

        assert store.load() == {"menuId": 1}
        store.clear()
        assert store.load() is None

    def test_file_draft_store_round_trip(self, tmp_path):
        store = FileDraftStore(str(tmp_path / "pending.json"))
        assert store.load() is None

        store.save({"menuId": 2, "deliveryAddress": "Cours de l'Intendance"})
        assert FileDraftStore(store.path).load()["deliveryAddress"] == "Cours de l'Intendance"

        store.clear()
        store.clear()
        assert store.load() is None

    def test_parse_delivery_date(self):
        assert parse_delivery_date("2026-06-15") == date(2026, 6, 15)
        assert parse_delivery_date("15/06/2026") is None
        assert parse_delivery_date(None) is None
