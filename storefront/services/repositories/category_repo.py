"""Category Repository."""
from storefront.services.models import Category

from .base import BaseRepository


class CategoryRepository(BaseRepository):
    """Category database operations."""

    async def list_all(self) -> list[Category]:
        result = await self.client.table("categories").select("*").order("name").execute()
        return [Category(**c) for c in result.data or []]
