"""
Checkout core: turns a cart into a persisted order in one database transaction.
"""
from src.checkout.errors import (
    CheckoutError,
    EmptyCart,
    ProductMissing,
    InsufficientStock,
    PersistenceFailure,
    OrderIdentifierCollision,
)
from src.checkout.schemas import CartLine, CustomerIdentity, PlacedOrder, PlacedOrderItem, CheckoutResult
from src.checkout.stock import check_stock
from src.checkout.order_id import new_order_id
from src.checkout.service import place_order, compute_total

__all__ = [
    "CheckoutError",
    "EmptyCart",
    "ProductMissing",
    "InsufficientStock",
    "PersistenceFailure",
    "OrderIdentifierCollision",
    "CartLine",
    "CustomerIdentity",
    "PlacedOrder",
    "PlacedOrderItem",
    "CheckoutResult",
    "check_stock",
    "new_order_id",
    "place_order",
    "compute_total",
]
