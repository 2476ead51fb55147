"""
Public storefront endpoints
Homepage data, payment instructions and the WhatsApp checkout link
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_
import logging

from storefront.utils.database import get_db
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.config.defaults import (
    CHECKOUT_TEMPLATE_KEY,
    FEATURED_PRODUCT_LIMIT,
    PAYMENT_SETTING_KEYS,
    WHATSAPP_NUMBER_KEY,
)
from storefront.services.settings_store import get_settings
from storefront.services.order_service import CheckoutError, quote_for_checkout, resolve_checkout_items
from storefront.services.whatsapp import build_checkout_message, build_whatsapp_url
from storefront.api.schemas import (
    CategoryOut,
    CategoryWithCount,
    CheckoutUrlOut,
    CheckoutUrlRequest,
    HomepageOut,
    PaymentSettingsOut,
    ProductOut,
)

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/homepage", response_model=HomepageOut)
async def homepage(db: AsyncSession = Depends(get_db)):
    """Categories with enabled-product counts plus the newest enabled products"""
    result = await db.execute(
        select(Category, func.count(Product.id))
        .outerjoin(Product, and_(Product.category_id == Category.id, Product.enabled.is_(True)))
        .group_by(Category.id)
        .order_by(Category.name.asc())
    )
    categories = [
        CategoryWithCount(**CategoryOut.model_validate(category).model_dump(), product_count=count)
        for category, count in result.all()
    ]

    result = await db.execute(
        select(Product)
        .where(Product.enabled.is_(True))
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(FEATURED_PRODUCT_LIMIT)
    )
    featured = [ProductOut.from_product(p) for p in result.unique().scalars().all()]

    return HomepageOut(categories=categories, featured_products=featured)

@router.get("/payment-settings", response_model=PaymentSettingsOut)
async def payment_settings(db: AsyncSession = Depends(get_db)):
    """Bank transfer / QR details shown on the checkout page"""
    stored = await get_settings(db, PAYMENT_SETTING_KEYS.values())
    return PaymentSettingsOut(**{
        field: stored.get(key) or "" for field, key in PAYMENT_SETTING_KEYS.items()
    })

@router.post("/checkout-url", response_model=CheckoutUrlOut)
async def checkout_url(data: CheckoutUrlRequest, db: AsyncSession = Depends(get_db)):
    """Build the wa.me link that opens a chat with the shop, message prefilled"""
    try:
        product, package = await resolve_checkout_items(db, data.product_id, data.package_id, data.user_data)
    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    quote = await quote_for_checkout(db, data.promo_code, package.price)
    price = quote.final_price if quote else package.price

    settings = await get_settings(db, [WHATSAPP_NUMBER_KEY, CHECKOUT_TEMPLATE_KEY])
    message = build_checkout_message(
        settings.get(CHECKOUT_TEMPLATE_KEY),
        product_name=product.name,
        category_name=product.category.name,
        package_name=package.name,
        price=price,
        user_data=data.user_data,
        payment_proof=data.payment_proof,
    )

    return CheckoutUrlOut(url=build_whatsapp_url(settings.get(WHATSAPP_NUMBER_KEY), message))
