from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from src.checkout.errors import CheckoutError


class CartLine(BaseModel):
    """One product in a cart. Name and price are snapshots taken when it was added."""
    product_id: int
    product_name: str
    unit_price: Decimal = Field(..., ge=0, description="Discounted unit price at add-to-cart time")
    quantity: int = Field(..., gt=0)
    original_price: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    image: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class CustomerIdentity(BaseModel):
    """Who the order is for. Only email is required."""
    email: str
    name: Optional[str] = None
    address: Optional[str] = None
    contact: Optional[str] = None


class PlacedOrderItem(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    image: Optional[str] = None


class PlacedOrder(BaseModel):
    """Committed order as returned to the caller."""
    order_id: str
    total: Decimal
    items: list[PlacedOrderItem]
    created_at: datetime
    customer: CustomerIdentity


@dataclass
class CheckoutResult:
    """Either a placed order or the reason the checkout failed."""
    order: Optional[PlacedOrder] = None
    error: Optional[CheckoutError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.order is not None
