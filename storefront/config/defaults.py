"""
Storefront defaults
Seed data, upload limits and well-known setting keys
"""

from typing import Dict, List

# Well-known setting keys
WHATSAPP_NUMBER_KEY = "whatsapp_number"
CHECKOUT_TEMPLATE_KEY = "checkout_message_template"
PAYMENT_SETTING_KEYS: Dict[str, str] = {
    "bank_name": "payment_bank_name",
    "account_number": "payment_account_number",
    "account_name": "payment_account_name",
    "qr_code": "payment_qr_code",
}

DEFAULT_WHATSAPP_NUMBER = "6281234567890"
DEFAULT_CHECKOUT_TEMPLATE = (
    "Halo! Saya ingin membeli:\n\n"
    "*Produk:* {product_name}\n"
    "*Kategori:* {category_name}\n"
    "*Paket:* {package_name}\n"
    "*Harga:* Rp {price}\n\n"
    "*Data yang diperlukan:*\n{user_data}\n\n"
    "{payment_proof}\n\n"
    "*Waktu Pemesanan:* {order_time}"
)

DEFAULT_SETTINGS: Dict[str, str] = {
    WHATSAPP_NUMBER_KEY: DEFAULT_WHATSAPP_NUMBER,
    CHECKOUT_TEMPLATE_KEY: DEFAULT_CHECKOUT_TEMPLATE,
}

DEFAULT_CATEGORIES: List[Dict[str, str]] = [
    {"name": "Game", "slug": "game", "description": "Game top-up services", "icon": "🎮"},
    {"name": "Digital Subscription", "slug": "digital-subscription", "description": "Digital subscription services", "icon": "📺"},
    {"name": "Social Media Services", "slug": "social-media-services", "description": "Social media growth services", "icon": "📱"},
]

# Uploads
MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5MB
# Accepted content type -> stored file extension
IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

# Admin uploads may also be SVG
ADMIN_IMAGE_EXTENSIONS = {**IMAGE_EXTENSIONS, "image/svg+xml": ".svg"}

FEATURED_PRODUCT_LIMIT = 6
