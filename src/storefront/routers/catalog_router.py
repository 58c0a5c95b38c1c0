from typing import Optional

from fastapi import APIRouter

from src.data.postgres.product_ops import get_product_by_id
from src.storefront.services.catalog_service import all_categories, browse_products
from src.utils.response_format import ResponseFormat
from src.utils.status import Status

router = APIRouter(prefix="/products", tags=["Catalog"])


@router.get("")
async def list_products_endpoint(
    category: Optional[str] = None,
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
):
    """
    Browse the catalog.

    Price bounds are taken as strings so bad input is ignored rather than
    rejected; inverted bounds are swapped.
    """
    products, applied = await browse_products(category, min_price, max_price)
    return ResponseFormat(
        data={
            "products": [p.to_dict() for p in products],
            "filters": applied,
            "categories": await all_categories(),
        }
    ).to_response()


@router.get("/categories")
async def list_categories_endpoint():
    return ResponseFormat(data=await all_categories()).to_response()


@router.get("/{product_id}")
async def get_product_endpoint(product_id: int):
    """Get a product by id."""
    product = await get_product_by_id(product_id)
    if not product:
        return ResponseFormat(
            status=Status.PRODUCT_NOT_FOUND,
            message=f"Product '{product_id}' not found",
        ).to_response(404)
    return ResponseFormat(data=product.to_dict()).to_response()
