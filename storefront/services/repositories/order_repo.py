"""Order Repository - read-only counters (checkout is handled elsewhere)."""
from .base import BaseRepository


class OrderRepository(BaseRepository):
    """Order database operations."""

    async def count(self) -> int:
        result = await self.client.table("orders").select("id", count="exact", head=True).execute()
        return result.count or 0
