"""
Cart Router

Session cart endpoints. The store never reports stock-ceiling hits itself;
mutation responses compare the requested quantity with the resulting one
so the frontend can show a "max stock reached" notice.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from storefront.cart import CartLineItem, CartStore
from storefront.errors import ERROR_PRODUCT_NOT_FOUND, ERROR_PRODUCT_OUT_OF_STOCK
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.database import Database, get_database_async
from storefront.services.money import format_money, round_money
from .deps import get_cart_store
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


def _format_cart_response(store: CartStore) -> dict:
    """Cart contents with derived totals. Money is sent as decimal strings."""
    total_price = store.total_price
    return {
        "session_id": store.session_id,
        "items": [
            {
                "id": item.id,
                "name": item.name,
                "brand": item.brand,
                "image": item.image,
                "price": str(round_money(item.price)),
                "stock": item.stock,
                "quantity": item.quantity,
                "line_total": str(round_money(item.line_total)),
            }
            for item in store.items
        ],
        "total_items": store.total_items,
        "total_price": str(round_money(total_price)),
        "total_price_display": format_money(total_price),
    }


def _format_mutation_response(
    store: CartStore, requested: int, result: Optional[CartLineItem]
) -> dict:
    resulting = result.quantity if result else 0
    response = _format_cart_response(store)
    response.update({
        "requested_quantity": requested,
        "resulting_quantity": resulting,
        "stock_limit_reached": result is not None and resulting < requested,
    })
    return response


@router.get("/cart")
async def get_cart(store: CartStore = Depends(get_cart_store)):
    """Current session cart."""
    return _format_cart_response(store)


@router.post("/cart/items")
async def add_to_cart(
    request: AddToCartRequest,
    store: CartStore = Depends(get_cart_store),
    db: Database = Depends(get_database_async),
):
    """Add one unit of a catalog product."""
    product = await db.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    if not product.in_stock:
        raise HTTPException(status_code=400, detail=ERROR_PRODUCT_OUT_OF_STOCK)

    previous, result = await store.add_item_tracked(CartLineItem(
        id=product.id,
        name=product.name,
        price=product.price,
        stock=product.stock,
        image=product.primary_image,
        brand=product.brand,
    ))
    requested = previous + 1
    if result and result.quantity < requested:
        logger.info(
            f"Stock ceiling reached for product {sanitize_id_for_logging(product.id)} "
            f"in session {sanitize_id_for_logging(store.session_id)}"
        )
    return _format_mutation_response(store, requested, result)


@router.patch("/cart/items/{product_id}")
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Set quantity (0 or less removes the item)."""
    result = await store.update_quantity(product_id, request.quantity)
    return _format_mutation_response(store, request.quantity, result)


@router.delete("/cart/items/{product_id}")
async def remove_cart_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    await store.remove_item(product_id)
    return _format_cart_response(store)


@router.delete("/cart")
async def clear_cart(store: CartStore = Depends(get_cart_store)):
    await store.clear_cart()
    return _format_cart_response(store)
