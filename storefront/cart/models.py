"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import List, Optional

from storefront.services.money import to_price


@dataclass
class CartLineItem:
    """Single product entry in the cart."""
    id: str
    name: str
    price: Decimal
    stock: int  # Catalog ceiling at the time the item was added
    quantity: int = 1
    image: Optional[str] = None
    brand: Optional[str] = None

    def __post_init__(self):
        # Malformed catalog data is clamped, never raised
        self.price = to_price(self.price)
        self.stock = max(0, int(self.stock))
        self.quantity = int(self.quantity)

    @property
    def line_total(self) -> Decimal:
        """Price for all units of this line."""
        return self.price * self.quantity

    def copy(self) -> "CartLineItem":
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to dictionary (price kept as string to avoid float loss)."""
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "image": self.image,
            "brand": self.brand,
            "stock": self.stock,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLineItem":
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            price=data["price"],
            stock=int(data["stock"]),
            quantity=int(data.get("quantity", 1)),
            image=data.get("image"),
            brand=data.get("brand"),
        )


@dataclass
class CartState:
    """Ordered line items of one browsing session. Totals are derived."""
    items: List[CartLineItem] = field(default_factory=list)
    updated_at: str = ""

    def find(self, item_id: str) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.id == item_id), None)

    @property
    def total_items(self) -> int:
        """Sum of quantities."""
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> Decimal:
        """Sum of price * quantity, recomputed on every read."""
        return sum((item.line_total for item in self.items), Decimal("0"))

    def copy(self) -> "CartState":
        return CartState(items=[item.copy() for item in self.items], updated_at=self.updated_at)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "items": [item.to_dict() for item in self.items],
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartState":
        """
        Create from a stored dictionary.

        Entries that break the cart invariants (duplicate ids, empty stock)
        are dropped and quantities are clamped into [1, stock].
        """
        items: List[CartLineItem] = []
        seen = set()
        for raw in data.get("items", []):
            item = CartLineItem.from_dict(raw)
            if item.id in seen or item.stock < 1:
                continue
            item.quantity = min(max(item.quantity, 1), item.stock)
            seen.add(item.id)
            items.append(item)
        return cls(items=items, updated_at=data.get("updated_at", ""))
