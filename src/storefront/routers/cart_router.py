from fastapi import APIRouter, Depends

from src.checkout.errors import (
    CheckoutError,
    EmptyCart,
    InsufficientStock,
    PersistenceFailure,
    ProductMissing,
)
from src.data.models.db_entity.user import User
from src.storefront.dependencies import get_current_account, get_shop_session
from src.storefront.schemas import AddToCartRequest
from src.storefront.services import cart_service
from src.storefront.services.session_store import SessionStore, ShopSession, get_session_store
from src.utils.response_format import ResponseFormat
from src.utils.status import Status

router = APIRouter(prefix="/cart", tags=["Cart"])

# Ordered most specific first
CHECKOUT_ERROR_MAP: list[tuple[type[CheckoutError], int, Status]] = [
    (EmptyCart, 400, Status.EMPTY_CART),
    (ProductMissing, 404, Status.PRODUCT_NOT_FOUND),
    (InsufficientStock, 409, Status.QUANTITY_EXCEEDED),
    (PersistenceFailure, 503, Status.FAILURE),
]


def checkout_error_response(error: CheckoutError):
    for error_type, status_code, status in CHECKOUT_ERROR_MAP:
        if isinstance(error, error_type):
            return ResponseFormat(status=status, message=error.message, data=error.to_dict()).to_response(status_code)
    return ResponseFormat(
        status=Status.UNKNOWN_ERROR, message=error.message, data=error.to_dict()
    ).to_response(500)


@router.get("")
async def view_cart(shop_session: ShopSession = Depends(get_shop_session)):
    return ResponseFormat(data=cart_service.view_cart(shop_session)).to_response()


@router.post("/items")
async def add_item(
    request: AddToCartRequest,
    shop_session: ShopSession = Depends(get_shop_session),
    store: SessionStore = Depends(get_session_store),
):
    """Add a product to the cart. Quantities beyond stock are clamped and reported."""
    try:
        outcome = await cart_service.add_to_cart(shop_session, store, request.product_id, request.quantity)
    except LookupError as e:
        return ResponseFormat(status=Status.PRODUCT_NOT_FOUND, message=str(e)).to_response(404)
    except InsufficientStock as e:
        return ResponseFormat(
            status=Status.QUANTITY_EXCEEDED, message="Out of stock", data=e.to_dict()
        ).to_response(409)
    except ValueError as e:
        return ResponseFormat(status=Status.INVALID_PARAMS, message=str(e)).to_response(400)

    return ResponseFormat(
        status=Status.QUANTITY_EXCEEDED if outcome.clamped else Status.SUCCESS,
        message=outcome.message,
        data={
            "line": outcome.line.model_dump(mode="json"),
            "clamped": outcome.clamped,
            "available": outcome.available,
            "cart": cart_service.view_cart(shop_session),
        },
    ).to_response()


@router.delete("/items/{product_id}")
async def remove_item(
    product_id: int,
    shop_session: ShopSession = Depends(get_shop_session),
    store: SessionStore = Depends(get_session_store),
):
    removed = await cart_service.remove_from_cart(shop_session, store, product_id)
    if not removed:
        return ResponseFormat(
            status=Status.PRODUCT_NOT_FOUND,
            message=f"Product {product_id} is not in the cart",
            data=cart_service.view_cart(shop_session),
        ).to_response(404)
    return ResponseFormat(message="Item removed", data=cart_service.view_cart(shop_session)).to_response()


@router.get("/confirm")
async def confirm(
    shop_session: ShopSession = Depends(get_shop_session),
    user: User = Depends(get_current_account),
):
    """Cart summary with the details the order will be recorded under."""
    if not shop_session.cart:
        return ResponseFormat(status=Status.EMPTY_CART, message=EmptyCart().message).to_response(400)
    return ResponseFormat(
        data={
            **cart_service.view_cart(shop_session),
            "customer": cart_service.customer_from_user(user).model_dump(),
        }
    ).to_response()


@router.post("/checkout")
async def checkout(
    shop_session: ShopSession = Depends(get_shop_session),
    user: User = Depends(get_current_account),
    store: SessionStore = Depends(get_session_store),
):
    """Place the order. On failure the cart is kept as is."""
    result = await cart_service.checkout_session(shop_session, store, cart_service.customer_from_user(user))
    if not result.ok:
        return checkout_error_response(result.error)
    return ResponseFormat(
        message="Purchase complete",
        data=result.order.model_dump(mode="json"),
    ).to_response(201)
