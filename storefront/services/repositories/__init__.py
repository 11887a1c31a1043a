"""
Repository Pattern for Database Operations

- ProductRepository: product catalog, search, featured
- CategoryRepository: categories
- UserRoleRepository: role checks, user counts
- OrderRepository: order counters
"""
from .product_repo import ProductRepository
from .category_repo import CategoryRepository
from .role_repo import UserRoleRepository
from .order_repo import OrderRepository

__all__ = [
    "ProductRepository",
    "CategoryRepository",
    "UserRoleRepository",
    "OrderRepository",
]
