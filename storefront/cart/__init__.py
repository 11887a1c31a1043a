"""Cart package: models, storage, session store and manager."""
from .models import CartLineItem, CartState
from .storage import CartStorage, MemoryCartStorage, RedisCartStorage
from .store import CART_CHANGED, CartStore
from .service import CartManager, create_cart_storage, get_cart_manager

__all__ = [
    "CART_CHANGED",
    "CartLineItem",
    "CartState",
    "CartStorage",
    "MemoryCartStorage",
    "RedisCartStorage",
    "CartStore",
    "CartManager",
    "create_cart_storage",
    "get_cart_manager",
]
