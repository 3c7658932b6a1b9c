"""
Tests for the admin back-office endpoints.
"""
import vite_gourmand.config as config_mod
from vite_gourmand.models import Menu


def place_order(client, auth_headers, future_date):
    resp = client.post(
        "/api/orders",
        json={
            "menuId": 3,
            "deliveryDate": future_date.isoformat(),
            "deliveryHour": "12:00",
            "deliveryAddress": "3 place de la Bourse, Bordeaux",
            "personNumber": 6,
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.json()["data"]


def test_admin_orders_requires_auth(client):
    resp = client.get("/api/admin/orders")
    assert resp.status_code == 401


def test_admin_rejects_invalid_auth(client):
    resp = client.get("/api/admin/orders", auth=("wrong", "credentials"))
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == "Basic"


def test_admin_unconfigured_fails_closed(client, admin_auth, monkeypatch):
    """Test that admin routes answer 503 when no password is configured."""
    monkeypatch.setattr(config_mod, "ADMIN_PASSWORD", None)
    resp = client.get("/api/admin/orders", auth=admin_auth)
    assert resp.status_code == 503


def test_admin_lists_orders_with_filter(client, admin_auth, auth_headers, future_date):
    order = place_order(client, auth_headers, future_date)

    resp = client.get("/api/admin/orders", auth=admin_auth)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["meta"]["total"] == 1
    assert data["items"][0]["order_number"] == order["order_number"]
    assert data["items"][0]["total_price"] == 144.0

    empty = client.get("/api/admin/orders", params={"status": "delivered"}, auth=admin_auth)
    assert empty.json()["data"]["items"] == []


def test_admin_updates_status(client, admin_auth, auth_headers, future_date):
    order = place_order(client, auth_headers, future_date)

    resp = client.patch(
        f"/api/admin/orders/{order['id']}/status",
        json={"status": "confirmed"},
        auth=admin_auth,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "confirmed"

    bad = client.patch(
        f"/api/admin/orders/{order['id']}/status",
        json={"status": "lost"},
        auth=admin_auth,
    )
    assert bad.status_code == 400

    missing = client.patch("/api/admin/orders/999/status", json={"status": "confirmed"}, auth=admin_auth)
    assert missing.status_code == 404


def test_admin_lists_tickets(client, admin_auth):
    client.post("/api/contact", json={
        "name": "Camille",
        "email": "camille@example.fr",
        "title": "Question sur un menu",
        "description": "Le menu de Noël est-il disponible en janvier ?",
    })

    resp = client.get("/api/admin/tickets", auth=admin_auth)
    assert resp.status_code == 200
    items = resp.json()["data"]["items"]
    assert len(items) == 1
    assert items[0]["category"] == "menu"
    assert resp.json()["data"]["meta"]["totalPages"] == 1

    closed = client.get("/api/admin/tickets", params={"status": "closed"}, auth=admin_auth)
    assert closed.json()["data"]["items"] == []


def menu_stock(db_session_factory, menu_id=3):
    session = db_session_factory()
    try:
        return session.get(Menu, menu_id).remaining_qty
    finally:
        session.close()


def test_admin_cancel_restores_stock(client, admin_auth, auth_headers, future_date, db_session_factory):
    """Test an admin cancellation gives the menu unit back, and reopening takes it again."""
    order = place_order(client, auth_headers, future_date)
    assert menu_stock(db_session_factory) == 14

    resp = client.patch(
        f"/api/admin/orders/{order['id']}/status",
        json={"status": "cancelled"},
        auth=admin_auth,
    )
    assert resp.status_code == 200
    assert menu_stock(db_session_factory) == 15

    again = client.patch(
        f"/api/admin/orders/{order['id']}/status",
        json={"status": "cancelled"},
        auth=admin_auth,
    )
    assert again.status_code == 200
    assert menu_stock(db_session_factory) == 15

    reopened = client.patch(
        f"/api/admin/orders/{order['id']}/status",
        json={"status": "pending"},
        auth=admin_auth,
    )
    assert reopened.status_code == 200
    assert menu_stock(db_session_factory) == 14
