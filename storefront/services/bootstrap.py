"""
Startup seeding
Admin account, default categories and default settings; safe to run on every boot
"""

import logging
import os
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from storefront.models.admin_user import AdminUser
from storefront.models.category import Category
from storefront.config.defaults import DEFAULT_CATEGORIES
from storefront.services.settings_store import seed_default_settings
from storefront.utils.security import hash_password

logger = logging.getLogger(__name__)


async def seed_admin_user(db: AsyncSession) -> None:
    username = os.getenv("ADMIN_USERNAME", "admin")
    result = await db.execute(select(AdminUser.id).where(AdminUser.username == username))
    if result.scalar_one_or_none() is not None:
        return

    password = os.getenv("ADMIN_PASSWORD", "admin123")
    if not os.getenv("ADMIN_PASSWORD"):
        logger.warning("ADMIN_PASSWORD not set - seeding admin account with the default password")

    db.add(AdminUser(username=username, password_hash=hash_password(password)))
    await db.commit()
    logger.info(f"Seeded admin user: {username}")


async def seed_default_categories(db: AsyncSession) -> None:
    """Only on an empty catalog, so categories the admin deleted stay deleted"""
    result = await db.execute(select(Category.id).limit(1))
    if result.scalar_one_or_none() is not None:
        return

    for category in DEFAULT_CATEGORIES:
        db.add(Category(**category))
    await db.commit()
    logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} default categories")


async def seed_initial_data(db: AsyncSession) -> None:
    await seed_admin_user(db)
    await seed_default_categories(db)
    await seed_default_settings(db)
