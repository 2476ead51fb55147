"""
Promo Engine
Validates promo codes and computes discounts; redeems usage atomically
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_

from storefront.models.promo_code import PromoCode, DiscountType
from storefront.utils.formatting import Number, as_utc, format_number, format_rupiah, quantize_money, to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class PromoRejected(Exception):
    """Raised when a promo code cannot be applied to a purchase"""

    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"
    BELOW_MINIMUM = "below_minimum"

    def __init__(self, reason: str, message: str):
        self.reason = reason
        self.message = message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return 404 if self.reason == self.NOT_FOUND else 400


class PromoQuote(BaseModel):
    """Outcome of applying a promo to a price"""
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    original_price: Decimal
    discount_amount: Decimal
    final_price: Decimal

    @property
    def message(self) -> str:
        if self.discount_type == DiscountType.PERCENTAGE:
            label = f"{format_number(self.discount_value)}%"
        else:
            label = format_rupiah(self.discount_value)
        return f"Diskon {label} berhasil diterapkan!"


def normalize_code(code: str) -> str:
    return code.strip().upper()


def compute_discount(discount_type: str, discount_value: Number, price: Number,
                     max_discount: Optional[Number] = None) -> Decimal:
    """
    Discount for a price, never more than the price itself

    Percentage discounts are capped at ``max_discount`` when one is set;
    fixed discounts ignore the cap.
    """
    price = to_decimal(price)
    value = to_decimal(discount_value)

    if discount_type == DiscountType.PERCENTAGE:
        discount = quantize_money(price * value / HUNDRED)
        if max_discount is not None and discount > to_decimal(max_discount):
            discount = to_decimal(max_discount)
    else:
        discount = value

    if discount > price:
        discount = price
    if discount < ZERO:
        discount = ZERO
    return quantize_money(discount)


def evaluate_promo(promo: PromoCode, price: Number, now: Optional[datetime] = None) -> PromoQuote:
    """
    Check a promo record against a price and return the discount breakdown

    Checks run in a fixed order (enabled, date window, usage cap, minimum
    purchase) so the first failing rule decides the rejection message.
    """
    now = now or datetime.now(timezone.utc)
    price = quantize_money(price)

    if not promo.enabled:
        raise PromoRejected(PromoRejected.INACTIVE, "Kode promo tidak aktif")

    if promo.start_date is not None and now < as_utc(promo.start_date):
        raise PromoRejected(PromoRejected.NOT_STARTED, "Kode promo belum berlaku")
    if promo.end_date is not None and now > as_utc(promo.end_date):
        raise PromoRejected(PromoRejected.EXPIRED, "Kode promo sudah kadaluarsa")

    if promo.usage_limit is not None and (promo.usage_count or 0) >= promo.usage_limit:
        raise PromoRejected(PromoRejected.EXHAUSTED, "Kode promo sudah mencapai batas penggunaan")

    if promo.min_purchase is not None and price < to_decimal(promo.min_purchase):
        raise PromoRejected(
            PromoRejected.BELOW_MINIMUM,
            f"Minimum pembelian {format_rupiah(promo.min_purchase)} untuk kode ini"
        )

    discount = compute_discount(promo.discount_type, promo.discount_value, price, promo.max_discount)

    return PromoQuote(
        code=promo.code,
        discount_type=DiscountType(promo.discount_type),
        discount_value=to_decimal(promo.discount_value),
        original_price=price,
        discount_amount=discount,
        final_price=price - discount,
    )


async def get_promo_by_code(db: AsyncSession, code: str) -> Optional[PromoCode]:
    result = await db.execute(select(PromoCode).where(PromoCode.code == normalize_code(code)))
    return result.scalar_one_or_none()


async def quote_promo(db: AsyncSession, code: str, price: Number,
                      now: Optional[datetime] = None) -> PromoQuote:
    """Look a code up and evaluate it, raising PromoRejected when it can't be used"""
    promo = await get_promo_by_code(db, code)
    if not promo:
        raise PromoRejected(PromoRejected.NOT_FOUND, "Kode promo tidak ditemukan")
    return evaluate_promo(promo, price, now)


async def redeem_promo(db: AsyncSession, code: str) -> bool:
    """
    Count one use of a promo code inside the caller's transaction

    The increment is conditional on the usage cap, so two checkouts racing for
    the last redemption can't both succeed. Returns False when nothing was
    counted; the caller decides whether to drop the discount.
    """
    stmt = (
        update(PromoCode)
        .where(
            PromoCode.code == normalize_code(code),
            PromoCode.enabled.is_(True),
            or_(PromoCode.usage_limit.is_(None), PromoCode.usage_count < PromoCode.usage_limit),
        )
        .values(usage_count=PromoCode.usage_count + 1)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    redeemed = result.rowcount == 1
    if not redeemed:
        logger.warning(f"Promo redemption refused: code={normalize_code(code)} (limit reached or disabled)")
    return redeemed
