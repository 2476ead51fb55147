import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from storefront.utils.email_brevo import BrevoEmailService


def make_order(**fields):
    values = dict(
        id=42,
        product_name="Mobile Legends",
        category_name="Game",
        package_name="86 Diamonds",
        price=Decimal("95000.00"),
        original_price=Decimal("100000.00"),
        discount_amount=Decimal("5000.00"),
        promo_code="SAVE10",
        user_data={"user_id": "12345678", "email": "buyer@example.com", "name": "Budi"},
        payment_proof="/uploads/image-1.png",
        created_at=datetime(2026, 10, 19, 7, 30, tzinfo=timezone.utc),
    )
    values.update(fields)
    return SimpleNamespace(**values)


def make_service(sent):
    service = BrevoEmailService(
        api_key="test-key",
        sender_email="shop@example.com",
        site_name="Twenti Studio",
        admin_email="owner@example.com",
        public_base_url="https://api.example.com/",
    )

    async def fake_send_email(**kwargs):
        sent.append(kwargs)
        return True

    service.send_email = fake_send_email
    return service


def test_order_notification_goes_to_admin():
    sent = []
    service = make_service(sent)

    assert asyncio.run(service.send_order_notification(make_order())) is True

    email = sent[0]
    assert email["to_email"] == "owner@example.com"
    assert email["subject"] == "🛒 Pesanan Baru #42 - Mobile Legends"
    html = email["html_content"]
    assert "Rp 95.000" in html
    assert "Rp 100.000" in html
    assert "SAVE10" in html
    assert "https://api.example.com/uploads/image-1.png" in html
    assert "Senin, 19 Oktober 2026 pukul 14.30.00" in html


def test_settings_override_admin_address():
    sent = []
    service = make_service(sent)

    asyncio.run(service.send_order_notification(make_order(), {"admin_email": "ops@example.com"}))
    assert sent[0]["to_email"] == "ops@example.com"


def test_delivery_email_goes_to_customer():
    sent = []
    service = make_service(sent)

    asyncio.run(service.send_delivery_email(make_order(), "https://files.example.com/pack.zip"))

    email = sent[0]
    assert email["to_email"] == "buyer@example.com"
    assert "https://files.example.com/pack.zip" in email["html_content"]
    assert "Budi" in email["html_content"]


def test_delivery_skipped_without_customer_email():
    sent = []
    service = make_service(sent)

    result = asyncio.run(service.send_delivery_email(make_order(user_data={"user_id": "1"}), "https://x"))
    assert result is False
    assert sent == []


def test_send_without_api_key_returns_false():
    service = BrevoEmailService(api_key="")
    assert asyncio.run(service.send_email("a@example.com", None, "Hi", "<p>Hi</p>")) is False
