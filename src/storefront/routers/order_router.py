from fastapi import APIRouter, Depends

from src.data.models.db_entity.user import User
from src.storefront.dependencies import get_current_account, get_shop_session
from src.storefront.services import order_service
from src.storefront.services.session_store import ShopSession
from src.utils.response_format import ResponseFormat
from src.utils.status import Status

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("")
async def list_my_orders(user: User = Depends(get_current_account)):
    """Order history of the caller, newest first."""
    return ResponseFormat(data=await order_service.order_history(user.email)).to_response()


@router.get("/last")
async def last_order(
    shop_session: ShopSession = Depends(get_shop_session),
    user: User = Depends(get_current_account),
):
    order = await order_service.last_purchase(shop_session, user.email)
    if order is None:
        return ResponseFormat(status=Status.NOT_FOUND, message="No orders yet").to_response(404)
    return ResponseFormat(data=order).to_response()


@router.get("/{order_id}")
async def get_order(order_id: str, user: User = Depends(get_current_account)):
    """One of the caller's orders. Orders of other customers look like missing ones."""
    order = await order_service.get_own_order(order_id, user.email)
    if order is None:
        return ResponseFormat(status=Status.NOT_FOUND, message=f"Order '{order_id}' not found").to_response(404)
    return ResponseFormat(data=order).to_response()
