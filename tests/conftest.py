"""
Shared fixtures: a throwaway SQLite database, the app under TestClient and a
recording stand-in for the email client
"""

import os
import tempfile

import pytest

TEST_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
DB_PATH = os.path.join(TEST_DIR, "storefront-test.db")

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["UPLOAD_DIR"] = os.path.join(TEST_DIR, "uploads")
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "test-admin-pass"
os.environ["STORE_TIMEZONE"] = "Asia/Jakarta"
os.environ["ENVIRONMENT"] = "test"

from fastapi.testclient import TestClient  # noqa: E402

from storefront.main import app  # noqa: E402
from storefront.utils.email_brevo import get_email_service  # noqa: E402

ADMIN_CREDENTIALS = {"username": "admin", "password": "test-admin-pass"}


class RecordingMailer:
    """Collects what would have been emailed"""

    def __init__(self):
        self.order_notifications = []
        self.deliveries = []

    async def send_order_notification(self, order, settings=None):
        self.order_notifications.append((order, settings))
        return True

    async def send_delivery_email(self, order, download_url, settings=None):
        self.deliveries.append((order, download_url, settings))
        return True


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def client(mailer):
    if os.path.exists(DB_PATH):
        os.remove(DB_PATH)

    app.dependency_overrides[get_email_service] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    response = client.post("/api/auth/login", json=ADMIN_CREDENTIALS)
    assert response.status_code == 200
    return client


@pytest.fixture
def game_category(admin_client):
    response = admin_client.get("/api/categories")
    return next(c for c in response.json() if c["slug"] == "game")


@pytest.fixture
def product(admin_client, game_category):
    response = admin_client.post("/api/products", json={
        "category_id": game_category["id"],
        "name": "Mobile Legends",
        "slug": "mobile-legends",
        "service_type": "Game Top-Up",
        "input_fields": [
            {"name": "user_id", "label": "User ID", "type": "text", "required": True},
            {"name": "server_id", "label": "Server ID", "type": "text", "required": True},
        ],
    })
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def package(admin_client, product):
    response = admin_client.post("/api/packages", json={
        "product_id": product["id"],
        "name": "86 Diamonds",
        "price": 100000,
    })
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def create_promo(admin_client):
    def _create(**fields):
        payload = {"code": "SAVE10", "discount_type": "percentage", "discount_value": 10}
        payload.update(fields)
        response = admin_client.post("/api/promo", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create
