"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock, AsyncMock

# Set test environment variables before storefront modules read them
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_service_key")
os.environ.setdefault("SUPABASE_ANON_KEY", "test_anon_key")
os.environ.setdefault("CART_STORAGE", "memory")

from storefront.cart import CartLineItem, CartManager, MemoryCartStorage


def _make_query(data=None, count=None):
    """Chainable PostgREST query mock whose execute() resolves to a result."""
    query = Mock()
    for method in ("select", "eq", "or_", "order", "limit", "range", "insert", "update", "delete"):
        getattr(query, method).return_value = query
    query.execute = AsyncMock(return_value=Mock(data=data if data is not None else [], count=count))
    return query


@pytest.fixture
def make_query():
    """Factory for chainable query mocks"""
    return _make_query


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client; client.tables maps table name -> query mock"""
    client = Mock()
    client.tables = {}

    def table(name):
        if name not in client.tables:
            client.tables[name] = _make_query()
        return client.tables[name]

    client.table.side_effect = table
    return client


@pytest.fixture
def mock_database(mock_supabase_client):
    """Database facade over the mocked client"""
    from storefront.services.database import Database

    return Database(mock_supabase_client)


@pytest.fixture
def storage():
    return MemoryCartStorage()


@pytest.fixture
def cart_manager(storage):
    return CartManager(storage)


@pytest.fixture
def sample_product():
    """Sample products row as returned by Supabase"""
    return {
        "id": "p1",
        "name": "Pod Mint Ice",
        "brand": "Vaporesso",
        "description": "Disposable pod",
        "price": 10.0,
        "images": ["https://cdn.test/p1.png", "https://cdn.test/p1-side.png"],
        "stock": 2,
        "active": True,
        "featured": True,
        "nicotine_level": "20mg",
        "category_id": "cat-1",
        "categories": {"name": "Pods"},
        "created_at": "2025-01-01T00:00:00Z",
    }


@pytest.fixture
def p1():
    """Cart candidate from the catalog: price 10, stock 2"""
    return CartLineItem(id="p1", name="Pod Mint Ice", price="10", stock=2, image=None, brand="Vaporesso")


@pytest.fixture
def p2():
    return CartLineItem(id="p2", name="Coil Pack", price="4.99", stock=10)
