"""
Category API endpoints
Public listing plus admin management
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from typing import List
import logging

from storefront.utils.database import get_db
from storefront.utils.slug_generator import generate_unique_slug
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.middleware.auth import require_auth
from storefront.api.schemas import CategoryCreate, CategoryOut, CategoryUpdate

logger = logging.getLogger(__name__)
router = APIRouter()

DUPLICATE_MESSAGE = "Category with this name or slug already exists"

async def _get_category_or_404(db: AsyncSession, category_id: int) -> Category:
    result = await db.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category

async def _commit_category(db: AsyncSession, category: Category) -> Category:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail=DUPLICATE_MESSAGE)
    await db.refresh(category)
    return category

@router.get("", response_model=List[CategoryOut])
async def list_categories(db: AsyncSession = Depends(get_db)):
    """Get all categories (public)"""
    result = await db.execute(select(Category).order_by(Category.name.asc()))
    return result.scalars().all()

@router.get("/{category_id}", response_model=CategoryOut)
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """Get single category (public)"""
    return await _get_category_or_404(db, category_id)

@router.post("", response_model=CategoryOut, status_code=201, dependencies=[Depends(require_auth)])
async def create_category(data: CategoryCreate, db: AsyncSession = Depends(get_db)):
    """Create category (admin only)"""
    if not data.name or not data.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")

    slug = data.slug or await generate_unique_slug(data.name, Category, db)
    category = Category(
        name=data.name.strip(),
        slug=slug,
        description=data.description,
        icon=data.icon
    )
    db.add(category)
    category = await _commit_category(db, category)
    logger.info(f"Category created: {category.slug}")
    return category

@router.put("/{category_id}", response_model=CategoryOut, dependencies=[Depends(require_auth)])
async def update_category(category_id: int, data: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    """Replace category (admin only); blank name/slug keep the current value"""
    category = await _get_category_or_404(db, category_id)

    category.name = data.name or category.name
    category.slug = data.slug or category.slug
    category.description = data.description
    category.icon = data.icon

    return await _commit_category(db, category)

@router.patch("/{category_id}", response_model=CategoryOut, dependencies=[Depends(require_auth)])
async def patch_category(category_id: int, data: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    """Update only the provided category fields (admin only)"""
    category = await _get_category_or_404(db, category_id)

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields provided for update")

    for field, value in update_data.items():
        if field in ("name", "slug") and not value:
            raise HTTPException(status_code=400, detail=f"{field.capitalize()} cannot be empty")
        setattr(category, field, value)

    return await _commit_category(db, category)

@router.delete("/{category_id}", dependencies=[Depends(require_auth)])
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """Delete category (admin only); refused while products reference it"""
    product_count = await db.scalar(
        select(func.count(Product.id)).where(Product.category_id == category_id)
    )
    if product_count:
        raise HTTPException(status_code=400, detail="Cannot delete category with existing products")

    category = await _get_category_or_404(db, category_id)
    await db.delete(category)
    await db.commit()
    logger.info(f"Category deleted: {category_id}")
    return {"success": True}
