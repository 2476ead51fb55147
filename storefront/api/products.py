"""
Product API endpoints
Catalog listing for shoppers, full management for admins
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from typing import Any, List
import json
import logging

from storefront.utils.database import get_db
from storefront.utils.slug_generator import generate_unique_slug
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.package import Package
from storefront.middleware.auth import require_auth
from storefront.services.order_service import load_product
from storefront.api.schemas import ProductCreate, ProductOut, ProductUpdate

logger = logging.getLogger(__name__)
router = APIRouter()

def parse_input_fields(raw: Any) -> List[dict]:
    """Accept a list of field descriptors or the same list JSON-encoded"""
    try:
        fields = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError:
        fields = None
    if not isinstance(fields, list):
        raise HTTPException(status_code=400, detail="Invalid input_fields format")
    return fields

async def _get_product_or_404(db: AsyncSession, product_id: int) -> Product:
    product = await load_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product

async def _ensure_category(db: AsyncSession, category_id: int):
    result = await db.execute(select(Category.id).where(Category.id == category_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Category not found")

async def _commit_product(db: AsyncSession, product: Product) -> ProductOut:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail="Product with this slug already exists")
    return ProductOut.from_product(await _get_product_or_404(db, product.id))

async def _list_products(db: AsyncSession, *criteria) -> List[ProductOut]:
    result = await db.execute(
        select(Product).where(*criteria).order_by(Product.name.asc())
    )
    return [ProductOut.from_product(p) for p in result.unique().scalars().all()]

@router.get("", response_model=List[ProductOut])
async def list_products(db: AsyncSession = Depends(get_db)):
    """Get all enabled products (public)"""
    return await _list_products(db, Product.enabled.is_(True))

@router.get("/admin", response_model=List[ProductOut], dependencies=[Depends(require_auth)])
async def list_all_products(db: AsyncSession = Depends(get_db)):
    """Get all products including disabled (admin only)"""
    return await _list_products(db)

@router.get("/category/{category_id}", response_model=List[ProductOut])
async def list_products_by_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """Get enabled products of one category (public)"""
    return await _list_products(db, Product.category_id == category_id, Product.enabled.is_(True))

@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """Get single product (public)"""
    return ProductOut.from_product(await _get_product_or_404(db, product_id))

@router.post("", response_model=ProductOut, status_code=201, dependencies=[Depends(require_auth)])
async def create_product(data: ProductCreate, db: AsyncSession = Depends(get_db)):
    """Create product (admin only)"""
    if not data.category_id or not data.name or not data.service_type or not data.input_fields:
        raise HTTPException(status_code=400, detail="Missing required fields")

    input_fields = parse_input_fields(data.input_fields)
    await _ensure_category(db, data.category_id)

    product = Product(
        category_id=data.category_id,
        name=data.name,
        slug=data.slug or await generate_unique_slug(data.name, Product, db),
        description=data.description or None,
        image_url=data.image_url or None,
        service_type=data.service_type,
        input_fields=input_fields,
        enabled=data.enabled if data.enabled is not None else True
    )
    db.add(product)
    created = await _commit_product(db, product)
    logger.info(f"Product created: {created.slug} (category {created.category_id})")
    return created

@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_auth)])
async def update_product(product_id: int, data: ProductUpdate, db: AsyncSession = Depends(get_db)):
    """Update product (admin only); omitted or blank fields keep their current value"""
    product = await _get_product_or_404(db, product_id)
    provided = data.model_fields_set

    if data.input_fields:
        product.input_fields = parse_input_fields(data.input_fields)
    if data.category_id:
        await _ensure_category(db, data.category_id)
        product.category_id = data.category_id

    product.name = data.name or product.name
    product.slug = data.slug or product.slug
    product.service_type = data.service_type or product.service_type
    if "description" in provided:
        product.description = data.description
    if "image_url" in provided:
        product.image_url = data.image_url
    if data.enabled is not None:
        product.enabled = data.enabled

    return await _commit_product(db, product)

@router.patch("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_auth)])
async def patch_product(product_id: int, data: ProductUpdate, db: AsyncSession = Depends(get_db)):
    """Update only the provided product fields (admin only)"""
    product = await _get_product_or_404(db, product_id)

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields provided for update")

    for field, value in update_data.items():
        if field in ("category_id", "name", "slug", "service_type", "enabled") and value in (None, ""):
            raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        if field == "input_fields":
            value = parse_input_fields(value)
        if field == "category_id":
            await _ensure_category(db, value)
        setattr(product, field, value)

    return await _commit_product(db, product)

@router.delete("/{product_id}", dependencies=[Depends(require_auth)])
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """Delete product (admin only); refused while packages reference it"""
    package_count = await db.scalar(
        select(func.count(Package.id)).where(Package.product_id == product_id)
    )
    if package_count:
        raise HTTPException(status_code=400, detail="Cannot delete product with existing packages")

    product = await _get_product_or_404(db, product_id)
    await db.delete(product)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail="Cannot delete product with existing orders")
    logger.info(f"Product deleted: {product_id}")
    return {"success": True}
