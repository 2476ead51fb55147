"""
Settings Store
Key/value access to the settings table
"""

import logging
from typing import Dict, Iterable, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from storefront.models.setting import Setting
from storefront.config.defaults import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


async def get_setting(db: AsyncSession, key: str, default: Optional[str] = None) -> Optional[str]:
    result = await db.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()
    if setting is None:
        return default
    return setting.value


async def get_settings(db: AsyncSession, keys: Optional[Iterable[str]] = None) -> Dict[str, str]:
    """All settings as a flat dict, optionally restricted to ``keys``"""
    query = select(Setting)
    if keys is not None:
        query = query.where(Setting.key.in_(list(keys)))
    result = await db.execute(query)
    return {setting.key: setting.value for setting in result.scalars().all()}


async def set_setting(db: AsyncSession, key: str, value: str) -> Setting:
    """Insert or update a setting; the caller commits"""
    result = await db.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()
    if setting is None:
        setting = Setting(key=key, value=value)
        db.add(setting)
    else:
        setting.value = value
    return setting


async def seed_default_settings(db: AsyncSession) -> None:
    """Create missing default settings without touching edited ones"""
    existing = await get_settings(db, DEFAULT_SETTINGS.keys())
    for key, value in DEFAULT_SETTINGS.items():
        if key not in existing:
            db.add(Setting(key=key, value=value))
            logger.info(f"Seeded default setting: {key}")
    await db.commit()
