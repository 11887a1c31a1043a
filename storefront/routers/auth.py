"""
Auth Router

Email/password accounts through Supabase Auth. Tokens are returned to the
client, which sends them back as 'Authorization: Bearer <access_token>'.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from storefront.auth import (
    AuthService,
    SignInCredentials,
    SignUpCredentials,
    extract_bearer_token,
    get_auth_service,
    get_current_user,
)
from storefront.errors import ERROR_INTERNAL, ERROR_NOT_SIGNED_IN, StorefrontError
from storefront.logging import get_logger
from storefront.services.models import SessionUser

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=201)
async def sign_up(credentials: SignUpCredentials, auth: AuthService = Depends(get_auth_service)):
    """Create an account."""
    try:
        session = await auth.sign_up(credentials)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Sign-up failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_INTERNAL)
    return session.model_dump()


@router.post("/login")
async def sign_in(credentials: SignInCredentials, auth: AuthService = Depends(get_auth_service)):
    """Password sign-in."""
    try:
        session = await auth.sign_in(credentials)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Sign-in failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_INTERNAL)
    return session.model_dump()


@router.post("/logout")
async def sign_out(
    authorization: str = Header(None, alias="Authorization"),
    auth: AuthService = Depends(get_auth_service),
):
    token = extract_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail=ERROR_NOT_SIGNED_IN)
    await auth.sign_out(token)
    return {"ok": True}


@router.get("/session")
async def get_session(user: Optional[SessionUser] = Depends(get_current_user)):
    """Current user (null for anonymous shoppers)."""
    return {"user": user.model_dump() if user else None}
