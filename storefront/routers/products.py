"""
Catalog Router

Product listing, featured products, product detail and categories.
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.errors import ERROR_PRODUCT_NOT_FOUND
from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.services.database import Database, get_database_async
from storefront.services.models import Product
from storefront.services.money import format_money, to_float
from storefront.services.repositories.product_repo import SORT_NAME, SORT_OPTIONS

logger = get_logger(__name__)

router = APIRouter(tags=["catalog"])


def serialize_product(product: Product, detail: bool = False) -> dict:
    """Product card fields; detail adds description and gallery."""
    data = {
        "id": product.id,
        "name": product.name,
        "brand": product.brand,
        "price": to_float(product.price),
        "price_display": format_money(product.price),
        "image": product.primary_image,
        "stock": product.stock,
        "in_stock": product.in_stock,
    }
    if detail:
        data.update({
            "description": product.description,
            "images": product.images,
            "nicotine_level": product.nicotine_level,
            "category_id": product.category_id,
            "category_name": product.category_name,
        })
    return data


@router.get("/products")
async def list_products(
    category: str | None = None,
    search: str | None = Query(None, max_length=100),
    sort: str = SORT_NAME,
    db: Database = Depends(get_database_async),
):
    """Active products, filtered by category and name/brand search."""
    if sort not in SORT_OPTIONS:
        sort = SORT_NAME
    # "all" is what the category picker sends for no filter
    category_id = None if not category or category == "all" else category

    products = await db.list_products(category_id=category_id, search=search, sort=sort)
    logger.debug(
        f"Listed {len(products)} products (search={sanitize_string_for_logging(search)}, sort={sort})"
    )
    return [serialize_product(p) for p in products]


@router.get("/products/featured")
async def list_featured_products(
    limit: int = Query(4, ge=1, le=24),
    db: Database = Depends(get_database_async),
):
    products = await db.get_featured_products(limit)
    return [serialize_product(p) for p in products]


@router.get("/products/{product_id}")
async def get_product(product_id: str, db: Database = Depends(get_database_async)):
    """Active product detail, 404 otherwise."""
    product = await db.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return serialize_product(product, detail=True)


@router.get("/categories")
async def list_categories(db: Database = Depends(get_database_async)):
    categories = await db.list_categories()
    return [{"id": c.id, "name": c.name} for c in categories]
