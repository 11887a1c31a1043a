"""Cart manager: one live CartStore per browsing session."""
import asyncio
import os
from collections import OrderedDict
from typing import Optional

from storefront.db import is_redis_configured
from storefront.logging import get_logger
from .storage import CartStorage, MemoryCartStorage, RedisCartStorage
from .store import CartStore

logger = get_logger(__name__)

DEFAULT_MAX_LIVE_STORES = 1024


class CartManager:
    """
    Hands out CartStore instances keyed by session id.

    The live store only carries the per-session lock and subscribers.
    Storage stays the source of truth: a cached store re-reads it on every
    get_store, and every mutation re-reads it under the lock, so a mutation
    builds on the latest cart written by any worker. Stores sit in a
    bounded LRU; an evicted one is simply loaded again next time.
    """

    def __init__(self, storage: CartStorage, max_live_stores: int = DEFAULT_MAX_LIVE_STORES):
        self.storage = storage
        self.max_live_stores = max_live_stores
        self._stores: "OrderedDict[str, CartStore]" = OrderedDict()
        self._lock = asyncio.Lock()

    async def get_store(self, session_id: str) -> CartStore:
        """Get the session's store, loading it from storage if needed."""
        store = self._stores.get(session_id)
        if store is not None:
            self._stores.move_to_end(session_id)
            await store.refresh()
            return store

        async with self._lock:
            # Double-check after acquiring lock
            store = self._stores.get(session_id)
            if store is None:
                store = await CartStore.load(session_id, self.storage)
                self._stores[session_id] = store
                while len(self._stores) > self.max_live_stores:
                    self._stores.popitem(last=False)
            return store

    def drop(self, session_id: str) -> None:
        """Forget the live store; storage is left untouched."""
        self._stores.pop(session_id, None)

    @property
    def live_sessions(self) -> int:
        return len(self._stores)


def create_cart_storage() -> CartStorage:
    """
    Pick the storage backend.

    CART_STORAGE=redis|memory forces a backend; otherwise Redis is used
    whenever Upstash credentials are configured.
    """
    backend = os.environ.get("CART_STORAGE", "").lower()
    if backend == "memory":
        return MemoryCartStorage()
    if backend == "redis" or is_redis_configured():
        return RedisCartStorage()
    logger.warning("Upstash Redis not configured, carts are kept in process memory")
    return MemoryCartStorage()


# Singleton instance
_cart_manager: Optional[CartManager] = None


def get_cart_manager() -> CartManager:
    """Get CartManager singleton."""
    global _cart_manager
    if _cart_manager is None:
        _cart_manager = CartManager(create_cart_storage())
    return _cart_manager
