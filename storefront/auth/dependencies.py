"""FastAPI dependencies for the signed-in user."""
from typing import Optional

from fastapi import Depends, Header, HTTPException

from storefront.db import get_supabase_auth
from storefront.errors import ERROR_ADMIN_REQUIRED, ERROR_NOT_SIGNED_IN
from storefront.services.database import Database, get_database_async
from storefront.services.models import SessionUser
from .service import AuthService


async def get_auth_service(db: Database = Depends(get_database_async)) -> AuthService:
    client = await get_supabase_auth()
    return AuthService(client, db)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from 'Authorization: Bearer <token>', else None."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
        return parts[1]
    return None


async def get_current_user(
    authorization: str = Header(None, alias="Authorization"),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[SessionUser]:
    """Signed-in user, or None for anonymous shoppers."""
    token = extract_bearer_token(authorization)
    if not token:
        return None
    return await auth.get_session_user(token)


async def require_user(user: Optional[SessionUser] = Depends(get_current_user)) -> SessionUser:
    if user is None:
        raise HTTPException(status_code=401, detail=ERROR_NOT_SIGNED_IN)
    return user


async def verify_admin(user: SessionUser = Depends(require_user)) -> SessionUser:
    """Require a user holding the admin role."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail=ERROR_ADMIN_REQUIRED)
    return user
