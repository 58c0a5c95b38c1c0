from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.data.models.db_entity.user import User
from src.data.postgres.user_ops import DuplicateEmailError
from src.storefront.dependencies import require_admin
from src.storefront.schemas import ProductCreate, ProductUpdate, UserUpdate
from src.storefront.services import admin_service
from src.storefront.services.catalog_service import browse_products
from src.utils.response_format import ResponseFormat
from src.utils.status import Status

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


# Products

@router.get("/products")
async def list_products(
    category: Optional[str] = None,
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
):
    products, applied = await browse_products(category, min_price, max_price)
    return ResponseFormat(
        data={"products": [p.to_dict() for p in products], "filters": applied}
    ).to_response()


@router.post("/products")
async def create_product(data: ProductCreate):
    product = await admin_service.create_product(data)
    return ResponseFormat(message="Product created successfully", data=product.to_dict()).to_response(201)


@router.put("/products/{product_id}")
async def update_product(product_id: int, data: ProductUpdate):
    try:
        product = await admin_service.update_product(product_id, data)
    except LookupError as e:
        return ResponseFormat(status=Status.PRODUCT_NOT_FOUND, message=str(e)).to_response(404)
    except ValueError as e:
        return ResponseFormat(status=Status.INVALID_PARAMS, message=str(e)).to_response(400)
    return ResponseFormat(message="Product updated successfully", data=product.to_dict()).to_response()


@router.delete("/products/{product_id}")
async def delete_product(product_id: int):
    if not await admin_service.delete_product(product_id):
        return ResponseFormat(
            status=Status.PRODUCT_NOT_FOUND, message=f"Product '{product_id}' not found"
        ).to_response(404)
    return ResponseFormat(message="Product deleted successfully").to_response()


# Users

@router.get("/users")
async def list_users():
    users = await admin_service.list_users()
    return ResponseFormat(data=[u.to_dict() for u in users]).to_response()


@router.put("/users/{user_id}")
async def update_user(user_id: int, data: UserUpdate):
    try:
        user = await admin_service.update_user(user_id, data)
    except DuplicateEmailError as e:
        return ResponseFormat(status=Status.CONFLICT, message=str(e)).to_response(409)
    except LookupError as e:
        return ResponseFormat(status=Status.NOT_FOUND, message=str(e)).to_response(404)
    except ValueError as e:
        return ResponseFormat(status=Status.INVALID_PARAMS, message=str(e)).to_response(400)
    return ResponseFormat(message="User updated successfully", data=user.to_dict()).to_response()


@router.delete("/users/{user_id}")
async def delete_user(user_id: int, admin: User = Depends(require_admin)):
    try:
        deleted = await admin_service.delete_user(user_id, acting_user_id=admin.id)
    except PermissionError as e:
        return ResponseFormat(status=Status.FORBIDDEN, message=str(e)).to_response(403)
    if not deleted:
        return ResponseFormat(status=Status.NOT_FOUND, message=f"User {user_id} not found").to_response(404)
    return ResponseFormat(message="User deleted successfully").to_response()


# Orders

@router.get("/orders")
async def list_orders(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
):
    return ResponseFormat(data=await admin_service.list_orders(limit=limit, offset=offset)).to_response()


@router.delete("/orders/{order_id}")
async def delete_order(order_id: str):
    """Delete an order and, through the cascade, its items."""
    if not await admin_service.delete_order(order_id):
        return ResponseFormat(status=Status.NOT_FOUND, message=f"Order '{order_id}' not found").to_response(404)
    return ResponseFormat(message="Order deleted successfully").to_response()
