from typing import Optional

from src.data.postgres.order_ops import get_latest_order_by_email, get_order_by_order_id, get_orders_by_email
from src.storefront.services.session_store import ShopSession


async def order_history(email: str) -> list[dict]:
    orders = await get_orders_by_email(email)
    return [order.to_dict() for order in orders]


async def last_purchase(shop_session: ShopSession, email: str) -> Optional[dict]:
    """The order placed in this session, else the newest stored order for the email."""
    if shop_session.last_purchase is not None:
        return shop_session.last_purchase.model_dump(mode="json")
    order = await get_latest_order_by_email(email)
    return order.to_dict() if order else None


async def get_own_order(order_id: str, email: str) -> Optional[dict]:
    """An order by id, only if it was placed under this email."""
    order = await get_order_by_order_id(order_id)
    if not order or (order.user_email or "").lower() != email.lower():
        return None
    return order.to_dict()
