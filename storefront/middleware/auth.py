"""
Authentication middleware for session management
"""
from fastapi import Request, HTTPException, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from storefront.models.admin_user import AdminUser
from storefront.utils.database import get_db
from storefront.utils.security import verify_token

SESSION_COOKIE = "session_token"

async def get_current_admin(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Optional[AdminUser]:
    """Get current admin from the session cookie, None when not logged in"""

    session_token = request.cookies.get(SESSION_COOKIE)
    if not session_token:
        return None

    try:
        payload = verify_token(session_token)
    except HTTPException:
        return None  # Invalid or expired session

    if payload.get("type") != "admin_session":
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    result = await db.execute(select(AdminUser).where(AdminUser.id == int(user_id)))
    return result.scalar_one_or_none()

async def require_auth(admin: Optional[AdminUser] = Depends(get_current_admin)) -> AdminUser:
    """Require authentication, raise 401 if not authenticated"""
    if not admin:
        raise HTTPException(status_code=401, detail="Authentication required")
    return admin
