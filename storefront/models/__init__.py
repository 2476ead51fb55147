"""
Model package initialization
"""

from .category import Category
from .product import Product
from .package import Package
from .promo_code import PromoCode, DiscountType
from .order import Order, OrderStatus
from .setting import Setting
from .admin_user import AdminUser

__all__ = [
    # Catalog
    "Category",
    "Product",
    "Package",
    
    # Checkout
    "PromoCode",
    "Order",
    
    # Back office
    "Setting",
    "AdminUser",
    
    # Enums
    "DiscountType",
    "OrderStatus",
]
