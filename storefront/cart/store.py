"""
Session cart store.

Holds the line items of one browsing session. All mutation goes through
the operations below; each one runs under the store lock, starts from the
persisted cart, keeps the invariants (one entry per product id,
1 <= quantity <= stock) and writes the whole cart back to storage before
returning. Subscribers are notified after the lock is released.
"""
import asyncio
import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from storefront.events import EventHub, Listener, Subscription
from storefront.logging import get_logger, sanitize_id_for_logging
from .models import CartLineItem, CartState
from .storage import CartStorage

logger = get_logger(__name__)

CART_CHANGED = "cart.changed"


async def _read_state(session_id: str, storage: CartStorage) -> Optional[CartState]:
    """
    Read the persisted cart.

    Returns None when storage is unreachable. A missing key (never written
    or expired) gives an empty cart; an unreadable payload is deleted and
    also gives an empty cart.
    """
    sid = sanitize_id_for_logging(session_id)
    try:
        raw = await storage.load(session_id)
    except Exception as e:
        logger.warning(f"Failed to load cart for session {sid}: {e}")
        return None

    if not raw:
        return CartState()
    try:
        return CartState.from_dict(json.loads(raw))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Corrupted cart data for session {sid}: {e}")
    try:
        await storage.delete(session_id)
    except Exception as e:
        logger.warning(f"Failed to delete corrupted cart for session {sid}: {e}")
    return CartState()


class CartStore:
    """
    Owned cart state for one session.

    Operations never raise for out-of-range input: quantities are clamped
    to the stock ceiling and non-positive updates remove the entry.
    Persistence is best-effort; while storage is unreachable the in-memory
    cart is used, and the next successful write stores the full cart.
    """

    def __init__(self, session_id: str, storage: CartStorage, state: Optional[CartState] = None):
        self.session_id = session_id
        self._storage = storage
        self._state = state or CartState()
        self._lock = asyncio.Lock()
        self._events = EventHub()
        self.last_save_failed = False

    @classmethod
    async def load(cls, session_id: str, storage: CartStorage) -> "CartStore":
        """Rehydrate a store from storage; unreadable or unreachable data yields an empty cart."""
        state = await _read_state(session_id, storage)
        return cls(session_id, storage, state)

    async def refresh(self) -> None:
        """Re-read the persisted cart (another worker may have changed it, or it expired)."""
        async with self._lock:
            await self._sync()

    # ==================== READS ====================

    @property
    def items(self) -> List[CartLineItem]:
        """Copies of the line items, in insertion order."""
        return [item.copy() for item in self._state.items]

    @property
    def total_items(self) -> int:
        return self._state.total_items

    @property
    def total_price(self) -> Decimal:
        return self._state.total_price

    def get_item(self, item_id: str) -> Optional[CartLineItem]:
        item = self._state.find(item_id)
        return item.copy() if item else None

    def snapshot(self) -> CartState:
        return self._state.copy()

    def to_dict(self) -> dict:
        return self._state.to_dict()

    def subscribe(self, listener: Listener) -> Subscription:
        """Receive ("cart.changed", CartState snapshot) after every mutation."""
        return self._events.subscribe(listener)

    # ==================== MUTATIONS ====================

    async def add_item(self, candidate: CartLineItem) -> Optional[CartLineItem]:
        """
        Add one unit of a product.

        An existing entry is incremented by one up to its own stock; a new
        entry is inserted with quantity 1. Returns the resulting entry, or
        None when the candidate has no stock at all.
        """
        _, result = await self.add_item_tracked(candidate)
        return result

    async def add_item_tracked(
        self, candidate: CartLineItem
    ) -> Tuple[int, Optional[CartLineItem]]:
        """add_item, also returning the entry's quantity just before the add (0 if absent)."""
        async with self._lock:
            await self._sync()
            existing = self._state.find(candidate.id)
            previous = existing.quantity if existing else 0
            if existing:
                existing.quantity = min(existing.quantity + 1, existing.stock)
                result = existing
            elif candidate.stock < 1:
                result = None
            else:
                result = candidate.copy()
                result.quantity = 1
                self._state.items.append(result)
            result = result.copy() if result else None
            snapshot = await self._persist()
        await self._publish(snapshot)
        return previous, result

    async def remove_item(self, item_id: str) -> None:
        """Delete the entry if present."""
        async with self._lock:
            await self._sync()
            self._state.items = [item for item in self._state.items if item.id != item_id]
            snapshot = await self._persist()
        await self._publish(snapshot)

    async def update_quantity(self, item_id: str, quantity: int) -> Optional[CartLineItem]:
        """
        Set an entry's quantity, clamped to its stock.

        quantity <= 0 removes the entry. Returns the resulting entry, or
        None when the product is not (or no longer) in the cart.
        """
        async with self._lock:
            await self._sync()
            if quantity <= 0:
                self._state.items = [item for item in self._state.items if item.id != item_id]
                result = None
            else:
                result = self._state.find(item_id)
                if result:
                    result.quantity = max(1, min(int(quantity), result.stock))
            result = result.copy() if result else None
            snapshot = await self._persist()
        await self._publish(snapshot)
        return result

    async def clear_cart(self) -> None:
        """Empty the cart and persist the empty state."""
        async with self._lock:
            self._state.items = []
            snapshot = await self._persist()
        await self._publish(snapshot)

    # ==================== INTERNALS ====================

    async def _sync(self) -> None:
        """
        Replace in-memory state with the persisted cart. Caller holds the lock.

        Skipped while the last write failed: storage is behind and the
        in-memory cart is the newer one.
        """
        if self.last_save_failed:
            return
        state = await _read_state(self.session_id, self._storage)
        if state is not None:
            self._state = state

    async def _persist(self) -> CartState:
        """Write the current state and return a snapshot for subscribers. Caller holds the lock."""
        self._state.updated_at = datetime.now(timezone.utc).isoformat()
        try:
            await self._storage.save(self.session_id, json.dumps(self._state.to_dict()))
            self.last_save_failed = False
        except Exception as e:
            self.last_save_failed = True
            logger.warning(
                f"Failed to persist cart for session {sanitize_id_for_logging(self.session_id)}: {e}"
            )
        return self._state.copy()

    async def _publish(self, snapshot: CartState) -> None:
        # Lock is released here, so listeners may call back into the store
        await self._events.publish(CART_CHANGED, snapshot)
