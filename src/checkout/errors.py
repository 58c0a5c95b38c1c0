"""
Checkout failure taxonomy.

These are raised inside the checkout transaction so the surrounding
``session.begin()`` rolls everything back, then handed to the caller as the
``error`` of a ``CheckoutResult``. Callers never see them raised.
"""
from typing import Any, Optional


class CheckoutError(Exception):
    """Base class for every way a checkout can fail."""

    code = "CHECKOUT_FAILED"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "retryable": self.retryable}


class EmptyCart(CheckoutError):
    """The cart had no lines; no transaction was opened."""

    code = "EMPTY_CART"

    def __init__(self):
        super().__init__("Your cart is empty.")


class ProductMissing(CheckoutError):
    """A cart line points at a product that is no longer in the catalog."""

    code = "PRODUCT_MISSING"

    def __init__(self, product_id: int, product_name: Optional[str] = None):
        label = product_name or product_id
        super().__init__(f"Product not found ({label}). Purchase aborted.")
        self.product_id = product_id
        self.product_name = product_name

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "product_id": self.product_id}


class InsufficientStock(CheckoutError):
    """Requested quantity exceeds stock on hand."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: Optional[int], available: int, requested: int):
        super().__init__(
            f"Insufficient stock for product {product_id}. Only {available} left, {requested} requested."
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "product_id": self.product_id,
            "available": self.available,
            "requested": self.requested,
        }


class PersistenceFailure(CheckoutError):
    """Database error during the transaction; everything was rolled back."""

    code = "PERSISTENCE_FAILURE"
    retryable = True

    def __init__(self, cause: str):
        super().__init__("Purchase failed due to server error. Please try again.")
        # Internal detail for logs only; never part of message or to_dict()
        self.cause = cause


class OrderIdentifierCollision(PersistenceFailure):
    """The generated order id already exists. Retrying generates a fresh one."""

    code = "ORDER_ID_COLLISION"

    def __init__(self, order_id: str):
        super().__init__(f"order id {order_id} already exists")
        self.order_id = order_id
