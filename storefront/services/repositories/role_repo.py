"""User Role Repository - role checks against the user_roles table."""
from .base import BaseRepository

ROLE_ADMIN = "admin"

# PostgREST caps responses (1000 rows by default), so user counting pages
USERS_PAGE_SIZE = 1000


class UserRoleRepository(BaseRepository):
    """user_roles database operations."""

    async def has_role(self, user_id: str, role: str) -> bool:
        result = await (
            self.client.table("user_roles")
            .select("role")
            .eq("user_id", user_id)
            .eq("role", role)
            .limit(1)
            .execute()
        )
        return bool(result.data)

    async def is_admin(self, user_id: str) -> bool:
        return await self.has_role(user_id, ROLE_ADMIN)

    async def count_users(self, page_size: int = USERS_PAGE_SIZE) -> int:
        """Distinct users holding any role."""
        user_ids: set[str] = set()
        offset = 0
        while True:
            result = await (
                self.client.table("user_roles")
                .select("user_id")
                .order("user_id")
                .range(offset, offset + page_size - 1)
                .execute()
            )
            rows = result.data or []
            user_ids.update(row["user_id"] for row in rows if row.get("user_id"))
            if len(rows) < page_size:
                return len(user_ids)
            offset += page_size
