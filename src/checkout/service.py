"""
Checkout transaction.

``place_order`` validates stock, writes the order header and its items, and
decrements inventory inside a single database transaction. Product rows are
locked (``SELECT ... FOR UPDATE``) in ascending id order before anything is
checked, so two checkouts touching the same product serialise on the row
and no two checkouts can deadlock on reversed lock order. Nothing outside the
database is touched while the transaction is open.
"""
from collections import OrderedDict
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.checkout.errors import (
    CheckoutError,
    EmptyCart,
    InsufficientStock,
    OrderIdentifierCollision,
    PersistenceFailure,
    ProductMissing,
)
from src.checkout.order_id import new_order_id
from src.checkout.schemas import CartLine, CheckoutResult, CustomerIdentity, PlacedOrder, PlacedOrderItem
from src.checkout.stock import check_stock
from src.data.models.db_entity.order import Order
from src.data.models.db_entity.order_item import OrderItem
from src.data.models.db_entity.product import Product
from src.data.postgres.connection import db_connection
from src.utils.logger import get_current_logger

CENT = Decimal("0.01")


def compute_total(cart_lines: Sequence[CartLine]) -> Decimal:
    """Sum of unit_price * quantity, rounded half-up to cents."""
    total = sum((Decimal(line.unit_price) * line.quantity for line in cart_lines), Decimal("0"))
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def _requested_quantities(cart_lines: Sequence[CartLine]) -> "OrderedDict[int, int]":
    """Units requested per product id, duplicate lines summed, ascending by id."""
    requested: dict[int, int] = {}
    for line in cart_lines:
        requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity
    return OrderedDict(sorted(requested.items()))


async def _lock_products(session: AsyncSession, product_ids: Sequence[int]) -> dict[int, Product]:
    result = await session.execute(
        select(Product)
        .where(Product.id.in_(list(product_ids)))
        .order_by(Product.id)
        .with_for_update()
    )
    return {product.id: product for product in result.scalars().all()}


def _verify_stock(
    locked: dict[int, Product],
    requested: "OrderedDict[int, int]",
    names: dict[int, str],
) -> None:
    for product_id, quantity in requested.items():
        product = locked.get(product_id)
        if product is None:
            raise ProductMissing(product_id, names.get(product_id))
        shortage = check_stock(quantity, product.quantity, product_id)
        if shortage is not None:
            raise shortage


async def _insert_order(
    session: AsyncSession,
    order_id: str,
    customer: CustomerIdentity,
    total: Decimal,
    created_at: datetime,
) -> int:
    order = Order(
        order_id=order_id,
        user_email=customer.email,
        user_name=customer.name,
        address=customer.address,
        contact=customer.contact,
        total=total,
        created_at=created_at,
    )
    session.add(order)
    try:
        await session.flush()
    except IntegrityError as e:
        if _violates_order_id_index(e):
            raise OrderIdentifierCollision(order_id) from e
        raise PersistenceFailure(str(e.orig)) from e
    return order.id


def _violates_order_id_index(error: IntegrityError) -> bool:
    """True when the unique index on order.order_id rejected the insert."""
    detail = str(error.orig).lower()
    # sqlite: "UNIQUE constraint failed: order.order_id"
    # postgres: duplicate key ... "ix_order_order_id" / Key (order_id)=...
    if "unique" not in detail and "duplicate" not in detail:
        return False
    return "order.order_id" in detail or "ix_order_order_id" in detail or "(order_id)" in detail


async def _insert_items(session: AsyncSession, order_pk: int, cart_lines: Sequence[CartLine]) -> None:
    session.add_all([
        OrderItem(
            order_id_fk=order_pk,
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            price=line.unit_price,
            image=line.image,
        )
        for line in cart_lines
    ])
    await session.flush()


async def _decrement_stock(session: AsyncSession, requested: "OrderedDict[int, int]") -> None:
    for product_id, quantity in requested.items():
        await session.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(quantity=Product.quantity - quantity)
        )


async def place_order(cart_lines: Sequence[CartLine], customer: CustomerIdentity) -> CheckoutResult:
    """
    Turn a cart into a committed order.

    Args:
        cart_lines: Lines to purchase, with price snapshots
        customer: Identity recorded on the order header

    Returns:
        CheckoutResult carrying the PlacedOrder on success, or the
        CheckoutError explaining why nothing was written
    """
    logger = get_current_logger()

    if not cart_lines:
        return CheckoutResult(error=EmptyCart())

    requested = _requested_quantities(cart_lines)
    names = {line.product_id: line.product_name for line in cart_lines}
    total = compute_total(cart_lines)
    order_id = new_order_id()
    created_at = datetime.now(timezone.utc)

    session = db_connection.get_session()
    try:
        async with session:
            async with session.begin():
                logger.debug(f"Checkout {order_id}: locking products {list(requested)}")
                locked = await _lock_products(session, list(requested))
                _verify_stock(locked, requested, names)

                order_pk = await _insert_order(session, order_id, customer, total, created_at)
                await _insert_items(session, order_pk, cart_lines)
                await _decrement_stock(session, requested)
    except PersistenceFailure as e:
        logger.error(f"Checkout {order_id} rolled back for {customer.email}: {e.code} {e.cause}")
        return CheckoutResult(error=e)
    except (ProductMissing, InsufficientStock) as e:
        logger.warning(f"Checkout {order_id} rejected for {customer.email}: {e.message}")
        return CheckoutResult(error=e)
    except CheckoutError as e:
        logger.warning(f"Checkout {order_id} failed for {customer.email}: {e.message}")
        return CheckoutResult(error=e)
    except (SQLAlchemyError, OSError) as e:
        logger.exception(f"Checkout {order_id} rolled back for {customer.email}: {e}")
        return CheckoutResult(error=PersistenceFailure(str(e)))

    logger.info(
        f"Checkout COMMIT OK: order_id={order_id} email={customer.email} "
        f"items={list(requested)} total={total}"
    )
    return CheckoutResult(
        order=PlacedOrder(
            order_id=order_id,
            total=total,
            items=[
                PlacedOrderItem(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    image=line.image,
                )
                for line in cart_lines
            ],
            created_at=created_at,
            customer=customer,
        )
    )
