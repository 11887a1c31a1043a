"""Storefront API Router.

Combines all sub-routers into a single router with prefix /api.
"""

from fastapi import APIRouter

from .admin import router as admin_router
from .auth import router as auth_router
from .cart import router as cart_router
from .misc import router as misc_router
from .products import router as products_router

router = APIRouter(prefix="/api")

router.include_router(products_router)
router.include_router(cart_router)
router.include_router(auth_router)
router.include_router(admin_router)
router.include_router(misc_router)

__all__ = ["router"]
