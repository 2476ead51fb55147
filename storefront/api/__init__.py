"""
API package initialization
"""

# Import all routers to make them available
from . import auth, categories, products, packages, orders, promo, settings, public, upload

__all__ = ["auth", "categories", "products", "packages", "orders", "promo", "settings", "public", "upload"]
