"""
API Pydantic Models

Request bodies shared by the storefront routers. Auth bodies reuse the
credential validators from storefront.auth.
"""
from pydantic import BaseModel


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: str


class UpdateCartItemRequest(BaseModel):
    quantity: int  # 0 or less removes the item


# ==================== AGE GATE ====================

class AgeVerificationRequest(BaseModel):
    is_over_18: bool
