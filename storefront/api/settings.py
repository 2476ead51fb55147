"""
Settings API endpoints (admin only)
WhatsApp number, checkout template and payment details live here
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict
import json
import logging

from storefront.utils.database import get_db
from storefront.middleware.auth import require_auth
from storefront.services.settings_store import get_setting, get_settings, set_setting
from storefront.api.schemas import SettingOut, SettingUpdate

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_auth)])

def _as_text(value) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, dict, list)):
        return json.dumps(value)
    return str(value)

@router.get("", response_model=Dict[str, str])
async def list_settings(db: AsyncSession = Depends(get_db)):
    """Get all settings as a flat key/value object"""
    return await get_settings(db)

@router.get("/{key}", response_model=SettingOut)
async def read_setting(key: str, db: AsyncSession = Depends(get_db)):
    """Get a single setting"""
    value = await get_setting(db, key)
    if value is None:
        raise HTTPException(status_code=404, detail="Setting not found")
    return SettingOut(key=key, value=value)

@router.put("/{key}", response_model=SettingOut)
async def write_setting(key: str, data: SettingUpdate, db: AsyncSession = Depends(get_db)):
    """Create or update a setting"""
    if data.value is None:
        raise HTTPException(status_code=400, detail="Value is required")

    setting = await set_setting(db, key, _as_text(data.value))
    await db.commit()
    await db.refresh(setting)
    logger.info(f"Setting updated: {key}")
    return SettingOut(key=setting.key, value=setting.value)
