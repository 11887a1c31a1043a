"""
Shared Dependencies for Routers

Cart session resolution: every browser gets an opaque session id, sent
back either as the X-Cart-Session header (API clients) or the cart_session
cookie (browsers). The id scopes the persisted cart.
"""
import re
import secrets
from typing import Optional

from fastapi import Depends, Header, Request, Response

from storefront.cart import CartManager, CartStore, get_cart_manager
from storefront.db import TTL

CART_SESSION_HEADER = "X-Cart-Session"
CART_SESSION_COOKIE = "cart_session"

_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{16,128}$")


def is_valid_session_id(session_id: Optional[str]) -> bool:
    return bool(session_id) and bool(_SESSION_ID_PATTERN.match(session_id))


def new_session_id() -> str:
    return secrets.token_urlsafe(24)


async def get_cart_session_id(
    request: Request,
    response: Response,
    x_cart_session: str = Header(None, alias=CART_SESSION_HEADER),
) -> str:
    """Resolve (or issue) the browsing session id and refresh its cookie."""
    session_id = x_cart_session or request.cookies.get(CART_SESSION_COOKIE)
    if not is_valid_session_id(session_id):
        session_id = new_session_id()

    response.set_cookie(
        CART_SESSION_COOKIE,
        session_id,
        max_age=TTL.CART,
        httponly=True,
        samesite="lax",
    )
    response.headers[CART_SESSION_HEADER] = session_id
    return session_id


async def get_cart_store(
    session_id: str = Depends(get_cart_session_id),
    manager: CartManager = Depends(get_cart_manager),
) -> CartStore:
    return await manager.get_store(session_id)
