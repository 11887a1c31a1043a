"""
VapeCode Storefront Core

This package contains the storefront building blocks:
- db: Supabase and Upstash Redis clients
- cart: session cart store, persistence and manager
- auth: Supabase Auth wrapper and FastAPI dependencies
- services: catalog/stats database facade, models, money helpers
- routers: FastAPI routers

Note: Imports are lazy so that importing a submodule (e.g. the cart store
in tests) never requires Supabase credentials.
"""

__all__ = [
    "get_supabase",
    "get_redis",
    "get_cart_manager",
]


def __getattr__(name):
    """Lazy attribute access for clean serverless loading."""
    if name == "get_supabase":
        from storefront.db import get_supabase
        return get_supabase
    elif name == "get_redis":
        from storefront.db import get_redis
        return get_redis
    elif name == "get_cart_manager":
        from storefront.cart import get_cart_manager
        return get_cart_manager
    raise AttributeError(f"module 'storefront' has no attribute '{name}'")
