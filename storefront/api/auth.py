"""
Authentication API endpoints for the admin back office
Handles login, logout and session status
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
import logging
import os

from storefront.utils.database import get_db
from storefront.models.admin_user import AdminUser
from storefront.middleware.auth import SESSION_COOKIE, get_current_admin
from storefront.utils.security import SESSION_MAX_AGE_HOURS, create_access_token, verify_password
from storefront.api.schemas import AdminOut, LoginRequest

logger = logging.getLogger(__name__)
router = APIRouter(tags=["authentication"])

IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"

@router.post("/login")
async def login(
    login_data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """Authenticate admin with username and password"""

    if not login_data.username or not login_data.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    result = await db.execute(select(AdminUser).where(AdminUser.username == login_data.username))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.password_hash):
        logger.warning(f"Failed admin login for username={login_data.username}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    session_token = create_access_token({
        "sub": str(user.id),
        "username": user.username,
        "type": "admin_session"
    })

    # Cross-site cookie when the admin UI is served from another origin in production
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_token,
        max_age=SESSION_MAX_AGE_HOURS * 60 * 60,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="none" if IS_PRODUCTION else "lax"
    )

    logger.info(f"Admin {user.username} logged in")
    return {"success": True, "user": AdminOut.model_validate(user)}

@router.post("/logout")
async def logout(response: Response):
    """Logout admin by clearing the session cookie"""
    response.delete_cookie(
        key=SESSION_COOKIE,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="none" if IS_PRODUCTION else "lax"
    )
    return {"success": True}

@router.get("/me")
async def me(admin: Optional[AdminUser] = Depends(get_current_admin)):
    """Check auth status"""
    if not admin:
        return {"authenticated": False}
    return {"authenticated": True, "user": AdminOut.model_validate(admin)}
