from datetime import datetime, timezone
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

from storefront.config.defaults import DEFAULT_CHECKOUT_TEMPLATE
from storefront.services.whatsapp import build_checkout_message, build_whatsapp_url

ORDER_TIME = datetime(2026, 10, 19, 7, 30, tzinfo=timezone.utc)


def test_default_template_message():
    message = build_checkout_message(
        DEFAULT_CHECKOUT_TEMPLATE,
        product_name="Mobile Legends",
        category_name="Game",
        package_name="86 Diamonds",
        price=Decimal("100000.00"),
        user_data={"user_id": "12345"},
        payment_proof="/uploads/image-1.png",
        order_time=ORDER_TIME,
    )

    assert "*Produk:* Mobile Legends" in message
    assert "*Kategori:* Game" in message
    assert "*Paket:* 86 Diamonds" in message
    assert "*Harga:* Rp 100.000" in message
    assert "*user_id:* 12345" in message
    assert "*Bukti Pembayaran:* /uploads/image-1.png" in message
    assert "*Waktu Pemesanan:* Senin, 19 Oktober 2026 pukul 14.30.00" in message


def test_blank_template_falls_back_to_default():
    message = build_checkout_message("", "A", "B", "C", 5000, order_time=ORDER_TIME)
    assert message.startswith("Halo! Saya ingin membeli:")


def test_url_encodes_like_encode_uri_component():
    url = build_whatsapp_url("6281234567890", "Halo! *Harga:* Rp 100.000\n(ok)")

    assert url == "https://wa.me/6281234567890?text=Halo!%20*Harga%3A*%20Rp%20100.000%0A(ok)"


def test_url_round_trips_message():
    message = "Produk: Mobile Legends & co\nHarga: Rp 100.000"
    url = build_whatsapp_url("6281234567890", message)
    assert parse_qs(urlparse(url).query)["text"] == [message]


def test_number_keeps_digits_only():
    assert build_whatsapp_url("+62 812-3456-7890", "x").startswith("https://wa.me/6281234567890?")
