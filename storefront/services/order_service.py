"""
Order Service
Checkout pipeline: resolve catalog rows, apply promo, persist the snapshot,
and the notification side effects that follow
"""

import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import joinedload

from storefront.models.product import Product
from storefront.models.package import Package
from storefront.models.order import Order, OrderStatus
from storefront.services.promo_engine import PromoQuote, PromoRejected, quote_promo, redeem_promo
from storefront.utils.email_brevo import BrevoEmailService

logger = logging.getLogger(__name__)

VALID_STATUSES = {status.value for status in OrderStatus}

# Settings the email templates read
MAIL_SETTING_KEYS = ("site_name", "admin_email", "mail_sender")


class CheckoutError(Exception):
    """Raised when a checkout request can't be turned into an order"""
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


async def load_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    result = await db.execute(
        select(Product)
        .options(joinedload(Product.category))
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def resolve_checkout_items(db: AsyncSession, product_id: Optional[int],
                                 package_id: Optional[int],
                                 user_data: Optional[Mapping[str, Any]]) -> Tuple[Product, Package]:
    """Validate the (product, package) pair a shopper picked"""
    if not product_id or not package_id or not user_data:
        raise CheckoutError("Missing required fields")

    product = await load_product(db, product_id)
    if not product:
        raise CheckoutError("Product not found", status_code=404)

    result = await db.execute(
        select(Package).where(
            Package.id == package_id,
            Package.product_id == product.id,
            Package.enabled.is_(True),
        )
    )
    package = result.scalar_one_or_none()
    if not package:
        raise CheckoutError("Package not found or disabled", status_code=404)

    return product, package


async def quote_for_checkout(db: AsyncSession, promo_code: Optional[str], price,
                             now: Optional[datetime] = None) -> Optional[PromoQuote]:
    """Re-validate a promo against the authoritative price; None if it no longer applies"""
    if not promo_code or not promo_code.strip():
        return None
    try:
        return await quote_promo(db, promo_code, price, now)
    except PromoRejected as e:
        logger.info(f"Promo '{promo_code}' dropped at checkout: {e.reason}")
        return None


async def create_order(
    db: AsyncSession,
    product_id: Optional[int],
    package_id: Optional[int],
    user_data: Optional[Dict[str, Any]],
    payment_proof: Optional[str] = None,
    promo_code: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Order:
    """
    Create an order snapshot

    Any discount figures the client computed are ignored: the promo is
    re-checked against the package price and redeemed in the same
    transaction as the insert, so a promo is only counted for orders that
    commit.
    """
    product, package = await resolve_checkout_items(db, product_id, package_id, user_data)

    quote = await quote_for_checkout(db, promo_code, package.price, now)
    if quote is not None and not await redeem_promo(db, quote.code):
        quote = None

    order = Order(
        product_id=product.id,
        package_id=package.id,
        product_name=product.name,
        category_name=product.category.name,
        package_name=package.name,
        price=quote.final_price if quote else package.price,
        original_price=quote.original_price if quote else None,
        discount_amount=quote.discount_amount if quote else None,
        promo_code=quote.code if quote else None,
        user_data=dict(user_data),
        payment_proof=payment_proof or None,
        status=OrderStatus.PENDING.value,
    )

    try:
        db.add(order)
        await db.commit()
        await db.refresh(order)
    except Exception:
        await db.rollback()
        raise

    logger.info(
        f"Order {order.id} created: product={product.slug}, package={package.id}, "
        f"price={order.price}, promo={order.promo_code or '-'}"
    )
    return order


async def update_order_status(db: AsyncSession, order_id: int, status: Optional[str]) -> Tuple[Order, str]:
    """Set an order's status; returns (order, previous_status)"""
    if status not in VALID_STATUSES:
        raise CheckoutError("Invalid status")

    result = await db.execute(select(Order).where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if not order:
        raise CheckoutError("Order not found", status_code=404)

    previous_status = order.status
    order.status = status
    await db.commit()
    await db.refresh(order)

    logger.info(f"Order {order.id} status: {previous_status} -> {status}")
    return order, previous_status


async def get_download_url(db: AsyncSession, order: Order) -> Optional[str]:
    result = await db.execute(select(Package.download_url).where(Package.id == order.package_id))
    return result.scalar_one_or_none()


async def notify_admin_of_order(mailer: BrevoEmailService, order: Order,
                                settings: Optional[Mapping[str, str]] = None) -> None:
    """Background task: new-order email to the admin. Failures are logged only."""
    try:
        sent = await mailer.send_order_notification(order, settings)
        if not sent:
            logger.warning(f"Order notification for order {order.id} was not sent")
    except Exception as e:
        logger.error(f"Error sending order notification for order {order.id}: {e}", exc_info=True)


async def deliver_digital_order(mailer: BrevoEmailService, order: Order, download_url: str,
                                settings: Optional[Mapping[str, str]] = None) -> None:
    """Background task: download link to the customer. Failures are logged only."""
    try:
        sent = await mailer.send_delivery_email(order, download_url, settings)
        if not sent:
            logger.warning(f"Delivery email for order {order.id} was not sent")
    except Exception as e:
        logger.error(f"Error sending delivery email for order {order.id}: {e}", exc_info=True)
