"""
Supabase Database Service

Provides the Database facade over the repositories.

Usage:
    from storefront.services.database import get_database_async

    db = await get_database_async()
    products = await db.list_products(sort="price_asc")

    # At FastAPI startup (lifespan):
    await init_database()
"""

import asyncio
from typing import Optional

from supabase._async.client import AsyncClient

from storefront.db import get_supabase
from storefront.logging import get_logger
from storefront.services.models import AdminStats, Category, Product
from storefront.services.repositories import (
    CategoryRepository,
    OrderRepository,
    ProductRepository,
    UserRoleRepository,
)

logger = get_logger(__name__)


class Database:
    """
    Supabase data access for the storefront.

    Must be created via `create()` or `init_database()`; the constructor
    accepts an already built client (tests pass a mock).
    """

    def __init__(self, client: AsyncClient):
        self.client = client

        self._products_repo = ProductRepository(self.client)
        self._categories_repo = CategoryRepository(self.client)
        self._roles_repo = UserRoleRepository(self.client)
        self._orders_repo = OrderRepository(self.client)

    @classmethod
    async def create(cls) -> "Database":
        """Async factory: build the Supabase client and repositories."""
        client = await get_supabase()
        return cls(client)

    # ==================== CATALOG ====================

    async def list_products(
        self,
        category_id: str | None = None,
        search: str | None = None,
        sort: str = "name",
    ) -> list[Product]:
        return await self._products_repo.list_active(category_id, search, sort)

    async def get_featured_products(self, limit: int = 4) -> list[Product]:
        return await self._products_repo.get_featured(limit)

    async def get_product(self, product_id: str) -> Product | None:
        return await self._products_repo.get_active_by_id(product_id)

    async def list_categories(self) -> list[Category]:
        return await self._categories_repo.list_all()

    # ==================== ROLES ====================

    async def is_admin(self, user_id: str) -> bool:
        return await self._roles_repo.is_admin(user_id)

    # ==================== ADMIN STATS ====================

    async def get_admin_stats(self) -> AdminStats:
        """Product, order and user counts, queried concurrently."""
        products, orders, users = await asyncio.gather(
            self._products_repo.count(),
            self._orders_repo.count(),
            self._roles_repo.count_users(),
        )
        return AdminStats(products=products, orders=orders, users=users)


# ==================== SINGLETON ====================

_db: Database | None = None
_db_lock: Optional[asyncio.Lock] = None


def _get_lock() -> asyncio.Lock:
    """Get or create async lock for initialization."""
    global _db_lock
    if _db_lock is None:
        _db_lock = asyncio.Lock()
    return _db_lock


async def init_database() -> Database:
    """Initialize async database singleton (idempotent)."""
    global _db
    if _db is not None:
        return _db

    async with _get_lock():
        # Double-check after acquiring lock
        if _db is None:
            logger.info("Initializing async Supabase client...")
            _db = await Database.create()
            logger.info("Async Supabase client initialized successfully")
    return _db


async def get_database_async() -> Database:
    """Get database instance with lazy async initialization."""
    if _db is None:
        return await init_database()
    return _db


async def close_database() -> None:
    """Drop the singleton (FastAPI shutdown)."""
    global _db
    _db = None
