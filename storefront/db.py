"""
Database Module - Supabase and Redis Clients

Provides singleton instances of:
- Async Supabase client (service role) for catalog and stats queries
- Async Supabase client (anon key) for end-user authentication
- Upstash Redis client for session carts
"""

import os
from typing import Optional

from supabase._async.client import AsyncClient, create_client as acreate_client
from upstash_redis.asyncio import Redis as AsyncRedis


SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")
# Auth calls run with the public key so row-level security applies to users
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


_async_supabase_client: Optional[AsyncClient] = None
_auth_supabase_client: Optional[AsyncClient] = None
_redis_client: Optional[AsyncRedis] = None


async def get_supabase() -> AsyncClient:
    """
    Get async Supabase client with the service role key (singleton).
    Used for catalog reads and admin counts.
    """
    global _async_supabase_client

    if _async_supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        _async_supabase_client = await acreate_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)

    return _async_supabase_client


async def get_supabase_auth() -> AsyncClient:
    """
    Get async Supabase client for end-user auth (singleton).

    Falls back to the service role key when no anon key is configured
    (local development).
    """
    global _auth_supabase_client

    if _auth_supabase_client is None:
        key = SUPABASE_ANON_KEY or SUPABASE_SERVICE_ROLE_KEY
        if not SUPABASE_URL or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        _auth_supabase_client = await acreate_client(SUPABASE_URL, key)

    return _auth_supabase_client


def is_redis_configured() -> bool:
    """Check whether Upstash credentials are present."""
    return bool(UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN)


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not is_redis_configured():
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisKeys:
    """Redis key prefixes for different data types."""

    CART = "cart:"  # cart:{session_id}

    @staticmethod
    def cart_key(session_id: str) -> str:
        return f"{RedisKeys.CART}{session_id}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    # Abandoned carts expire; every write refreshes the TTL
    CART = int(os.environ.get("CART_TTL_SECONDS", "86400"))
