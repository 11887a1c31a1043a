"""Database Models - Pydantic models for storefront entities."""
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, field_validator, model_validator

from storefront.services.money import to_price


class Category(BaseModel):
    """Product category."""
    id: str
    name: str

    class Config:
        extra = "ignore"


class Product(BaseModel):
    """Catalog product row."""
    id: str
    name: str
    price: Decimal
    brand: Optional[str] = None
    description: Optional[str] = None
    images: list[str] = []
    stock: int = 0
    active: bool = True
    featured: bool = False
    nicotine_level: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None  # From the categories(name) join

    class Config:
        extra = "ignore"  # Ignore unknown fields from DB

    @model_validator(mode="before")
    @classmethod
    def flatten_category(cls, data: Any) -> Any:
        if isinstance(data, dict) and "categories" in data:
            data = dict(data)
            joined = data.pop("categories")
            if isinstance(joined, dict) and not data.get("category_name"):
                data["category_name"] = joined.get("name")
        return data

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return to_price(v)

    @field_validator("images", mode="before")
    @classmethod
    def default_images(cls, v):
        return [img for img in (v or []) if img]

    @field_validator("stock", mode="before")
    @classmethod
    def clamp_stock(cls, v):
        return max(0, int(v or 0))

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


class SessionUser(BaseModel):
    """Signed-in user as seen by the storefront."""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    is_admin: bool = False


class AuthSession(BaseModel):
    """Tokens returned after sign-in or sign-up."""
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    user: SessionUser


class AdminStats(BaseModel):
    """Counters shown on the admin dashboard."""
    products: int = 0
    orders: int = 0
    users: int = 0
