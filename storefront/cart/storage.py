"""
Cart persistence backends.

Each browsing session's cart is stored as one JSON document under its own
key. Backends only move strings; encoding lives in CartStore.
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional

from storefront.db import get_redis, RedisKeys, TTL


class CartStorage(ABC):
    """Durable storage for serialized carts, keyed by session id."""

    @abstractmethod
    async def load(self, session_id: str) -> Optional[str]:
        """Return the stored payload or None."""

    @abstractmethod
    async def save(self, session_id: str, payload: str) -> None:
        """Overwrite the stored payload."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Forget the stored payload."""


class RedisCartStorage(CartStorage):
    """
    Upstash Redis storage.

    Keys expire after TTL.CART seconds of inactivity; every save refreshes
    the expiry.
    """

    def __init__(self, ttl: int = TTL.CART):
        self._redis = None  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def load(self, session_id: str) -> Optional[str]:
        data = await self.redis.get(RedisKeys.cart_key(session_id))
        return data or None

    async def save(self, session_id: str, payload: str) -> None:
        await self.redis.set(RedisKeys.cart_key(session_id), payload, ex=self.ttl)

    async def delete(self, session_id: str) -> None:
        await self.redis.delete(RedisKeys.cart_key(session_id))


class MemoryCartStorage(CartStorage):
    """Process-local storage for local development and tests."""

    def __init__(self):
        self.documents: Dict[str, str] = {}

    async def load(self, session_id: str) -> Optional[str]:
        return self.documents.get(session_id)

    async def save(self, session_id: str, payload: str) -> None:
        self.documents[session_id] = payload

    async def delete(self, session_id: str) -> None:
        self.documents.pop(session_id, None)
