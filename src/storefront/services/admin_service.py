from typing import Any, Optional

from src.data.models.db_entity.product import Product
from src.data.models.db_entity.user import User
from src.data.models.enum.user_role import UserRole
from src.data.postgres import order_ops, product_ops, user_ops
from src.storefront.schemas.admin_schemas import ProductCreate, ProductUpdate, UserUpdate
from src.utils.logger import get_current_logger


def _normalize_category(fields: dict[str, Any]) -> dict[str, Any]:
    if "category" in fields:
        category = (fields["category"] or "").strip()
        fields["category"] = category or None
    return fields


async def create_product(data: ProductCreate) -> Product:
    fields = _normalize_category(data.model_dump())
    return await product_ops.create_product(fields)


async def update_product(product_id: int, data: ProductUpdate) -> Product:
    """
    Raises:
        LookupError: If the product does not exist
        ValueError: If no field was given
    """
    fields = _normalize_category(data.model_dump(exclude_unset=True))
    if not fields:
        raise ValueError("Nothing to update")
    product = await product_ops.update_product(product_id, fields)
    if not product:
        raise LookupError(f"Product {product_id} not found")
    return product


async def delete_product(product_id: int) -> bool:
    return await product_ops.delete_product(product_id)


async def list_users() -> list[User]:
    return await user_ops.list_users()


async def update_user(user_id: int, data: UserUpdate) -> User:
    """
    Edit another account, including its role.

    Raises:
        LookupError: If the user does not exist
        ValueError: If no field was given
        DuplicateEmailError: If the email is taken by another account
    """
    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    if "role" in fields:
        fields["role"] = UserRole(fields["role"])
    if not fields:
        raise ValueError("Nothing to update")
    user = await user_ops.update_user(user_id, fields)
    if not user:
        raise LookupError(f"User {user_id} not found")
    return user


async def delete_user(user_id: int, acting_user_id: int) -> bool:
    """
    Raises:
        PermissionError: If an admin tries to delete their own account
    """
    logger = get_current_logger()
    if user_id == acting_user_id:
        logger.warning(f"Admin {acting_user_id} attempted to delete own account")
        raise PermissionError("You cannot delete your own account.")
    return await user_ops.delete_user(user_id)


async def list_orders(limit: Optional[int] = None, offset: int = 0) -> list[dict]:
    orders = await order_ops.list_orders(limit=limit, offset=offset)
    return [order.to_dict() for order in orders]


async def delete_order(order_id: str) -> bool:
    return await order_ops.delete_order(order_id)
