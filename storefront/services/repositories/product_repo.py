"""Product Repository - Product catalog operations.

All methods use async/await with supabase-py v2.
"""
import re

from storefront.services.models import Product

from .base import BaseRepository

SORT_NAME = "name"
SORT_PRICE_ASC = "price_asc"
SORT_PRICE_DESC = "price_desc"
SORT_OPTIONS = (SORT_NAME, SORT_PRICE_ASC, SORT_PRICE_DESC)

# PostgREST or-filter separators and grouping
_FILTER_UNSAFE = re.compile(r"[,()*%\\]")


def clean_search_term(term: str | None) -> str:
    """Strip characters that would break a PostgREST or() filter."""
    if not term:
        return ""
    return _FILTER_UNSAFE.sub(" ", term).strip()


class ProductRepository(BaseRepository):
    """Product database operations."""

    async def list_active(
        self,
        category_id: str | None = None,
        search: str | None = None,
        sort: str = SORT_NAME,
    ) -> list[Product]:
        """List active products with optional category, search and sort."""
        query = self.client.table("products").select("*").eq("active", True)

        if category_id:
            query = query.eq("category_id", category_id)

        term = clean_search_term(search)
        if term:
            query = query.or_(f"name.ilike.%{term}%,brand.ilike.%{term}%")

        if sort == SORT_PRICE_ASC:
            query = query.order("price", desc=False)
        elif sort == SORT_PRICE_DESC:
            query = query.order("price", desc=True)
        else:
            query = query.order("name")

        result = await query.execute()
        return [Product(**p) for p in result.data or []]

    async def get_featured(self, limit: int = 4) -> list[Product]:
        """Active products flagged as featured."""
        result = await (
            self.client.table("products")
            .select("*")
            .eq("featured", True)
            .eq("active", True)
            .limit(limit)
            .execute()
        )
        return [Product(**p) for p in result.data or []]

    async def get_active_by_id(self, product_id: str) -> Product | None:
        """Active product with its category name, or None."""
        result = await (
            self.client.table("products")
            .select("*, categories(name)")
            .eq("id", product_id)
            .eq("active", True)
            .limit(1)
            .execute()
        )
        return Product(**result.data[0]) if result.data else None

    async def count(self) -> int:
        """Total number of products (any status)."""
        result = await self.client.table("products").select("id", count="exact", head=True).execute()
        return result.count or 0
