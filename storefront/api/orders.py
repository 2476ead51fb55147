"""
Order API endpoints
Public checkout plus the admin order queue
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
import logging

from storefront.utils.database import get_db
from storefront.utils.email_brevo import BrevoEmailService, get_email_service
from storefront.models.order import Order, OrderStatus
from storefront.middleware.auth import require_auth
from storefront.services.settings_store import get_settings
from storefront.services.order_service import (
    MAIL_SETTING_KEYS,
    VALID_STATUSES,
    CheckoutError,
    create_order,
    deliver_digital_order,
    get_download_url,
    notify_admin_of_order,
    update_order_status,
)
from storefront.api.schemas import OrderCreate, OrderOut, OrderStatusUpdate

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=OrderOut, status_code=201)
async def place_order(
    data: OrderCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    mailer: BrevoEmailService = Depends(get_email_service)
):
    """Create order from the checkout page (public)"""
    try:
        order = await create_order(
            db,
            product_id=data.product_id,
            package_id=data.package_id,
            user_data=data.user_data,
            payment_proof=data.payment_proof,
            promo_code=data.promo_code,
        )
    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    settings = await get_settings(db, MAIL_SETTING_KEYS)
    background_tasks.add_task(notify_admin_of_order, mailer, order, settings)
    return order

@router.get("", response_model=List[OrderOut], dependencies=[Depends(require_auth)])
async def list_orders(status: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    """Get orders, newest first, optionally filtered by status (admin only)"""
    query = select(Order)
    if status:
        if status not in VALID_STATUSES:
            raise HTTPException(status_code=400, detail="Invalid status")
        query = query.where(Order.status == status)

    result = await db.execute(query.order_by(Order.created_at.desc(), Order.id.desc()))
    return result.scalars().all()

@router.get("/{order_id}", response_model=OrderOut, dependencies=[Depends(require_auth)])
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    """Get single order (admin only)"""
    result = await db.execute(select(Order).where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order

@router.api_route("/{order_id}/status", methods=["PUT", "PATCH"], response_model=OrderOut,
                  dependencies=[Depends(require_auth)])
async def set_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    mailer: BrevoEmailService = Depends(get_email_service)
):
    """Update order status (admin only); completing a digital order emails the download link"""
    try:
        order, previous_status = await update_order_status(db, order_id, data.status)
    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if order.status == OrderStatus.COMPLETED.value and previous_status != OrderStatus.COMPLETED.value:
        download_url = await get_download_url(db, order)
        if download_url and (order.user_data or {}).get("email"):
            settings = await get_settings(db, MAIL_SETTING_KEYS)
            background_tasks.add_task(deliver_digital_order, mailer, order, download_url, settings)
            logger.info(f"Order {order.id} completed - queued delivery email")

    return order
