"""
Admin Router

Dashboard counters for users holding the admin role.
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.auth import verify_admin
from storefront.errors import ERROR_INTERNAL
from storefront.logging import get_logger
from storefront.services.database import Database, get_database_async

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats")
async def admin_get_stats(admin=Depends(verify_admin), db: Database = Depends(get_database_async)):
    """Total products, orders and users."""
    try:
        stats = await db.get_admin_stats()
    except Exception as e:
        logger.error(f"Failed to load admin stats: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_INTERNAL)
    return stats.model_dump()
