"""
Package API endpoints
Price tiers per product; the download link of digital goods is admin-only
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from decimal import Decimal
from typing import List, Optional
import logging

from storefront.utils.database import get_db
from storefront.models.product import Product
from storefront.models.package import Package
from storefront.middleware.auth import require_auth
from storefront.api.schemas import PackageCreate, PackageOut, PackageUpdate, PublicPackageOut

logger = logging.getLogger(__name__)
router = APIRouter()

INVALID_PRICE = "Price must be a valid positive number"

def _check_price(price: Optional[Decimal]):
    if price is not None and (not price.is_finite() or price < 0):
        raise HTTPException(status_code=400, detail=INVALID_PRICE)

async def _get_package_or_404(db: AsyncSession, package_id: int) -> Package:
    result = await db.execute(select(Package).where(Package.id == package_id))
    package = result.scalar_one_or_none()
    if not package:
        raise HTTPException(status_code=404, detail="Package not found")
    return package

async def _list_packages(db: AsyncSession, product_id: int, enabled_only: bool) -> List[Package]:
    query = select(Package).where(Package.product_id == product_id)
    if enabled_only:
        query = query.where(Package.enabled.is_(True))
    result = await db.execute(query.order_by(Package.price.asc(), Package.id.asc()))
    return result.scalars().all()

async def _save(db: AsyncSession, package: Package) -> Package:
    await db.commit()
    await db.refresh(package)
    return package

@router.get("/product/{product_id}", response_model=List[PublicPackageOut])
async def list_packages(product_id: int, db: AsyncSession = Depends(get_db)):
    """Get enabled packages of a product, cheapest first (public)"""
    return await _list_packages(db, product_id, enabled_only=True)

@router.get("/product/{product_id}/admin", response_model=List[PackageOut], dependencies=[Depends(require_auth)])
async def list_all_packages(product_id: int, db: AsyncSession = Depends(get_db)):
    """Get all packages of a product including disabled (admin only)"""
    return await _list_packages(db, product_id, enabled_only=False)

@router.get("/{package_id}", response_model=PublicPackageOut)
async def get_package(package_id: int, db: AsyncSession = Depends(get_db)):
    """Get single package (public)"""
    return await _get_package_or_404(db, package_id)

@router.post("", response_model=PackageOut, status_code=201, dependencies=[Depends(require_auth)])
async def create_package(data: PackageCreate, db: AsyncSession = Depends(get_db)):
    """Create package (admin only)"""
    if not data.product_id or not data.name or data.price is None:
        raise HTTPException(status_code=400, detail="Product ID, name, and price are required")
    _check_price(data.price)

    result = await db.execute(select(Product.id).where(Product.id == data.product_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Product not found")

    package = Package(
        product_id=data.product_id,
        name=data.name,
        description=data.description or None,
        image_url=data.image_url or None,
        price=data.price,
        download_url=data.download_url or None,
        file_type=data.file_type or None,
        enabled=data.enabled if data.enabled is not None else True
    )
    db.add(package)
    package = await _save(db, package)
    logger.info(f"Package created: {package.id} for product {package.product_id} at {package.price}")
    return package

@router.put("/{package_id}", response_model=PackageOut, dependencies=[Depends(require_auth)])
async def update_package(package_id: int, data: PackageUpdate, db: AsyncSession = Depends(get_db)):
    """Update package (admin only); omitted fields keep their current value"""
    package = await _get_package_or_404(db, package_id)
    _check_price(data.price)
    provided = data.model_fields_set

    package.name = data.name or package.name
    if data.price is not None:
        package.price = data.price
    for field in ("description", "image_url", "download_url", "file_type"):
        if field in provided:
            setattr(package, field, getattr(data, field))
    if data.enabled is not None:
        package.enabled = data.enabled

    return await _save(db, package)

@router.patch("/{package_id}", response_model=PackageOut, dependencies=[Depends(require_auth)])
async def patch_package(package_id: int, data: PackageUpdate, db: AsyncSession = Depends(get_db)):
    """Update only the provided package fields (admin only)"""
    package = await _get_package_or_404(db, package_id)

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields provided for update")
    if "product_id" in update_data:
        raise HTTPException(status_code=400, detail="Package cannot be moved to another product")
    if "price" in update_data:
        if update_data["price"] is None:
            raise HTTPException(status_code=400, detail=INVALID_PRICE)
        _check_price(update_data["price"])

    for field, value in update_data.items():
        if field in ("name", "enabled") and value in (None, ""):
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        setattr(package, field, value)

    return await _save(db, package)

@router.delete("/{package_id}", dependencies=[Depends(require_auth)])
async def delete_package(package_id: int, db: AsyncSession = Depends(get_db)):
    """Delete package (admin only)"""
    package = await _get_package_or_404(db, package_id)
    await db.delete(package)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail="Cannot delete package with existing orders")
    logger.info(f"Package deleted: {package_id}")
    return {"success": True}
