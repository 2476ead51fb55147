"""
Promo code API endpoints
Public code validation for the checkout page, admin voucher management
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from datetime import timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from storefront.utils.database import get_db
from storefront.models.promo_code import PromoCode, DiscountType
from storefront.middleware.auth import require_auth
from storefront.services.promo_engine import PromoRejected, normalize_code, quote_promo
from storefront.api.schemas import (
    PromoCreate,
    PromoOut,
    PromoUpdate,
    PromoValidateRequest,
    PromoValidationOut,
)

logger = logging.getLogger(__name__)
router = APIRouter()

DUPLICATE_MESSAGE = "Promo code already exists"
DISCOUNT_TYPES = {t.value for t in DiscountType}

# Blank/zero means "no limit" for these
OPTIONAL_LIMITS = ("min_purchase", "max_discount", "usage_limit")

def _normalize_fields(update_data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and clean admin input before it hits the model"""
    if "code" in update_data:
        if not update_data["code"] or not update_data["code"].strip():
            raise HTTPException(status_code=400, detail="Code cannot be empty")
        update_data["code"] = normalize_code(update_data["code"])

    if "discount_type" in update_data and update_data["discount_type"] not in DISCOUNT_TYPES:
        raise HTTPException(status_code=400, detail='Discount type must be "percentage" or "fixed"')

    if "discount_value" in update_data:
        value = update_data["discount_value"]
        if value is None or value < 0:
            raise HTTPException(status_code=400, detail="Discount value must be a positive number")

    for field in ("start_date", "end_date"):
        moment = update_data.get(field)
        if moment is not None and moment.tzinfo is not None:
            # Stored as naive UTC
            update_data[field] = moment.astimezone(timezone.utc).replace(tzinfo=None)

    for field in OPTIONAL_LIMITS:
        if field in update_data and not update_data[field]:
            update_data[field] = None

    if "enabled" in update_data and update_data["enabled"] is None:
        raise HTTPException(status_code=400, detail="enabled cannot be empty")

    return update_data

async def _get_promo_or_404(db: AsyncSession, promo_id: int) -> PromoCode:
    result = await db.execute(select(PromoCode).where(PromoCode.id == promo_id))
    promo = result.scalar_one_or_none()
    if not promo:
        raise HTTPException(status_code=404, detail="Promo code not found")
    return promo

async def _ensure_code_free(db: AsyncSession, code: str, current_id: Optional[int] = None):
    result = await db.execute(select(PromoCode.id).where(PromoCode.code == code))
    existing_id = result.scalar_one_or_none()
    if existing_id is not None and existing_id != current_id:
        raise HTTPException(status_code=400, detail=DUPLICATE_MESSAGE)

async def _commit_promo(db: AsyncSession, promo: PromoCode) -> PromoCode:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail=DUPLICATE_MESSAGE)
    await db.refresh(promo)
    return promo

@router.post("/validate", response_model=PromoValidationOut)
async def validate_promo(data: PromoValidateRequest, db: AsyncSession = Depends(get_db)):
    """Check a code against a price and return the discount breakdown (public)"""
    if not data.code or not data.code.strip():
        raise HTTPException(status_code=400, detail="Promo code is required")

    price = data.price if data.price is not None and data.price > 0 else Decimal("0")

    try:
        quote = await quote_promo(db, data.code, price)
    except PromoRejected as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return PromoValidationOut(
        valid=True,
        code=quote.code,
        discount_type=quote.discount_type.value,
        discount_value=float(quote.discount_value),
        discount_amount=float(quote.discount_amount),
        original_price=float(quote.original_price),
        final_price=float(quote.final_price),
        message=quote.message,
    )

@router.get("", response_model=List[PromoOut], dependencies=[Depends(require_auth)])
async def list_promos(db: AsyncSession = Depends(get_db)):
    """Get all promo codes, newest first (admin only)"""
    result = await db.execute(select(PromoCode).order_by(PromoCode.created_at.desc(), PromoCode.id.desc()))
    return result.scalars().all()

@router.get("/{promo_id}", response_model=PromoOut, dependencies=[Depends(require_auth)])
async def get_promo(promo_id: int, db: AsyncSession = Depends(get_db)):
    """Get single promo code (admin only)"""
    return await _get_promo_or_404(db, promo_id)

@router.post("", response_model=PromoOut, status_code=201, dependencies=[Depends(require_auth)])
async def create_promo(data: PromoCreate, db: AsyncSession = Depends(get_db)):
    """Create promo code (admin only)"""
    if not data.code or not data.discount_type or data.discount_value is None:
        raise HTTPException(status_code=400, detail="Code, discount type, and discount value are required")

    fields = data.model_dump()
    enabled = fields.pop("enabled")
    fields = _normalize_fields(fields)
    await _ensure_code_free(db, fields["code"])

    promo = PromoCode(
        code=fields["code"],
        discount_type=fields["discount_type"],
        discount_value=fields["discount_value"],
        min_purchase=fields["min_purchase"],
        max_discount=fields["max_discount"],
        usage_limit=fields["usage_limit"],
        usage_count=0,
        start_date=fields["start_date"],
        end_date=fields["end_date"],
        enabled=enabled is not False
    )
    db.add(promo)
    promo = await _commit_promo(db, promo)
    logger.info(f"Promo code created: {promo.code} ({promo.discount_type} {promo.discount_value})")
    return promo

@router.put("/{promo_id}", response_model=PromoOut, dependencies=[Depends(require_auth)])
async def update_promo(promo_id: int, data: PromoUpdate, db: AsyncSession = Depends(get_db)):
    """Update promo code (admin only); omitted or blank code/type keep their current value"""
    promo = await _get_promo_or_404(db, promo_id)

    update_data = data.model_dump(exclude_unset=True)
    for field in ("code", "discount_type"):
        if not update_data.get(field):
            update_data.pop(field, None)
    if update_data.get("discount_value") is None:
        update_data.pop("discount_value", None)
    if update_data.get("enabled") is None:
        update_data.pop("enabled", None)

    update_data = _normalize_fields(update_data)
    if "code" in update_data:
        await _ensure_code_free(db, update_data["code"], current_id=promo.id)

    for field, value in update_data.items():
        setattr(promo, field, value)

    return await _commit_promo(db, promo)

@router.patch("/{promo_id}", response_model=PromoOut, dependencies=[Depends(require_auth)])
async def patch_promo(promo_id: int, data: PromoUpdate, db: AsyncSession = Depends(get_db)):
    """Update only the provided promo fields (admin only)"""
    promo = await _get_promo_or_404(db, promo_id)

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields provided for update")

    update_data = _normalize_fields(update_data)
    if "code" in update_data:
        await _ensure_code_free(db, update_data["code"], current_id=promo.id)

    for field, value in update_data.items():
        setattr(promo, field, value)

    return await _commit_promo(db, promo)

@router.delete("/{promo_id}", dependencies=[Depends(require_auth)])
async def delete_promo(promo_id: int, db: AsyncSession = Depends(get_db)):
    """Delete promo code (admin only); past orders keep their snapshot of the code"""
    promo = await _get_promo_or_404(db, promo_id)
    await db.delete(promo)
    await db.commit()
    logger.info(f"Promo code deleted: {promo.code}")
    return {"message": "Promo code deleted successfully"}
