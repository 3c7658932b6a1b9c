"""
Tests for the customer order endpoints and server-side pricing.
"""
import logging
import re
from datetime import date, timedelta

from vite_gourmand.models import Menu


def order_body(future_date, **overrides):
    body = {
        "menuId": 1,
        "deliveryDate": future_date.isoformat(),
        "deliveryHour": "19:30",
        "deliveryAddress": "12 rue Sainte-Catherine, Bordeaux",
        "personNumber": 12,
        "menuPrice": 45.5,
        "totalPrice": 546.0,
    }
    body.update(overrides)
    return body


class TestCreateOrder:

    def test_requires_session(self, client, future_date):
        """Test that an order without a bearer token is rejected with 401."""
        resp = client.post("/api/orders", json=order_body(future_date))
        assert resp.status_code == 401
        assert resp.json()["message"] == "Authentication required"

    def test_unknown_token(self, client, future_date):
        resp = client.post(
            "/api/orders",
            json=order_body(future_date),
            headers={"Authorization": "Bearer nope"},
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "Session expired or invalid"

    def test_catalog_order(self, client, auth_headers, future_date, db_session_factory):
        """Test a catalog order is created pending and consumes one unit of stock."""
        resp = client.post("/api/orders", json=order_body(future_date), headers=auth_headers)
        assert resp.status_code == 201

        order = resp.json()["data"]
        assert re.match(r"^VG-\d{8}-[A-Z0-9]{6}$", order["order_number"])
        assert order["status"] == "pending"
        assert order["total_price"] == 546.0
        assert order["menu_price"] == 45.5

        session = db_session_factory()
        try:
            assert session.get(Menu, 1).remaining_qty == 19
        finally:
            session.close()

    def test_client_total_is_overridden(self, client, auth_headers, future_date, caplog):
        """Test the server recomputes the total from the menu price."""
        with caplog.at_level(logging.WARNING, logger="vite_gourmand.services.order"):
            resp = client.post(
                "/api/orders",
                json=order_body(future_date, totalPrice=1.0, menuPrice=0.1),
                headers=auth_headers,
            )
        assert resp.status_code == 201
        assert resp.json()["data"]["total_price"] == 546.0
        assert any("differs from server total" in r.message for r in caplog.records)

    def test_below_menu_minimum(self, client, auth_headers, future_date):
        resp = client.post("/api/orders", json=order_body(future_date, personNumber=5), headers=auth_headers)
        assert resp.status_code == 400
        assert "at least 10" in resp.json()["message"]

    def test_out_of_stock(self, client, auth_headers, future_date, db_session_factory):
        session = db_session_factory()
        session.get(Menu, 1).remaining_qty = 0
        session.commit()
        session.close()

        resp = client.post("/api/orders", json=order_body(future_date), headers=auth_headers)
        assert resp.status_code == 409

    def test_unknown_menu(self, client, auth_headers, future_date):
        resp = client.post("/api/orders", json=order_body(future_date, menuId=999), headers=auth_headers)
        assert resp.status_code == 404

    def test_invalid_hour(self, client, auth_headers, future_date):
        resp = client.post("/api/orders", json=order_body(future_date, deliveryHour="25:00"), headers=auth_headers)
        assert resp.status_code == 400
        assert any("deliveryHour" in e for e in resp.json()["errors"])

    def test_past_date(self, client, auth_headers):
        past = date.today() - timedelta(days=2)
        resp = client.post("/api/orders", json=order_body(past), headers=auth_headers)
        assert resp.status_code == 400

    def test_custom_request_is_a_quote(self, client, auth_headers, future_date):
        """Test an order without a menu is stored as a zero-priced quote."""
        body = order_body(future_date, specialInstructions="Buffet provençal pour 30 personnes", personNumber=30)
        del body["menuId"]
        body["menuPrice"] = 0
        body["totalPrice"] = 0

        resp = client.post("/api/orders", json=body, headers=auth_headers)
        assert resp.status_code == 201

        order = resp.json()["data"]
        assert order["status"] == "quote"
        assert order["menu_id"] is None
        assert order["total_price"] == 0

    def test_custom_request_needs_description(self, client, auth_headers, future_date):
        body = order_body(future_date, specialInstructions="court")
        del body["menuId"]
        resp = client.post("/api/orders", json=body, headers=auth_headers)
        assert resp.status_code == 400


class TestMyOrders:

    def test_list_and_get(self, client, auth_headers, future_date):
        created = client.post("/api/orders", json=order_body(future_date), headers=auth_headers).json()["data"]

        listing = client.get("/api/orders", headers=auth_headers).json()["data"]
        assert listing["meta"]["total"] == 1
        assert listing["items"][0]["order_number"] == created["order_number"]

        detail = client.get(f"/api/orders/{created['id']}", headers=auth_headers)
        assert detail.status_code == 200
        assert detail.json()["data"]["delivery_hour"] == "19:30"

    def test_get_missing_order(self, client, auth_headers):
        assert client.get("/api/orders/42", headers=auth_headers).status_code == 404

    def test_cancel_restores_stock(self, client, auth_headers, future_date, db_session_factory):
        created = client.post("/api/orders", json=order_body(future_date), headers=auth_headers).json()["data"]

        resp = client.post(
            f"/api/orders/{created['id']}/cancel",
            json={"reason": "Changement de date"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "cancelled"
        assert resp.json()["data"]["cancellation_reason"] == "Changement de date"

        session = db_session_factory()
        try:
            assert session.get(Menu, 1).remaining_qty == 20
        finally:
            session.close()

        again = client.post(
            f"/api/orders/{created['id']}/cancel",
            json={"reason": "Encore"},
            headers=auth_headers,
        )
        assert again.status_code == 400
