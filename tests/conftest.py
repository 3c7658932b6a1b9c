from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import vite_gourmand.config as config_mod
import vite_gourmand.db as db
from vite_gourmand.app_factory import create_app
from vite_gourmand.models import Base
from vite_gourmand.ordering import MenuSummary
from vite_gourmand.routes import limiter
from vite_gourmand.seed_menu import seed_catalog, seed_demo_user
from vite_gourmand.services import ai_agent

# Test admin credentials
TEST_ADMIN_USERNAME = "testadmin"
TEST_ADMIN_PASSWORD = "testpassword123"


@pytest.fixture
def db_session_factory():
    """Session factory bound to a fresh in-memory SQLite DB seeded with the demo catalog.

    Uses StaticPool so all connections share the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    seed_catalog(session)
    session.close()

    yield TestingSessionLocal

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(db_session_factory, monkeypatch):
    """Shared FastAPI TestClient using the in-memory SQLite DB.

    Sets up test admin credentials, disables rate limiting and forces the
    assistant into demo mode.
    """
    monkeypatch.setattr(config_mod, "ADMIN_USERNAME", TEST_ADMIN_USERNAME)
    monkeypatch.setattr(config_mod, "ADMIN_PASSWORD", TEST_ADMIN_PASSWORD)
    monkeypatch.setattr(config_mod, "LLM_API_KEY", "")
    monkeypatch.setattr(limiter, "enabled", False)

    app = create_app(init_database=False)

    # Override FastAPI DB dependency
    def override_get_db():
        db_sess = db_session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db

    ai_agent.clear_conversations()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    ai_agent.clear_conversations()


@pytest.fixture
def admin_auth():
    """Returns HTTP Basic Auth tuple for admin endpoints."""
    return (TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)


@pytest.fixture
def user_token(db_session_factory):
    """Bearer token of the seeded demo customer."""
    session = db_session_factory()
    try:
        return seed_demo_user(session)
    finally:
        session.close()


@pytest.fixture
def auth_headers(user_token):
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def future_date():
    return date.today() + timedelta(days=30)


# =============================================================================
# Ordering client fixtures
# =============================================================================

@pytest.fixture
def wedding_menu():
    return MenuSummary(
        id=1,
        title="Menu Mariage Élégance",
        price_per_person=45.5,
        person_min=10,
        remaining_qty=20,
    )


@pytest.fixture
def small_menu():
    return MenuSummary(
        id=3,
        title="Menu Végétarien du Marché",
        price_per_person=24.0,
        person_min=4,
        remaining_qty=15,
    )


@pytest.fixture
def mock_api(wedding_menu, small_menu):
    """MagicMock standing in for CateringApiClient."""
    api = MagicMock()
    api.list_menus.return_value = ([wedding_menu, small_menu], {"page": 1, "total": 2})
    api.get_menu.return_value = wedding_menu
    api.create_order.return_value = {"order_number": "VG-20260615-ABC123"}
    api.create_contact_ticket.return_value = {"ticket_number": "TK202606-XYZ789"}
    return api
