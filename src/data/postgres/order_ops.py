"""Database operations for Order model."""

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from src.data.postgres.connection import db_connection
from src.data.models.db_entity.order import Order
from src.utils.logger import get_current_logger


def _with_items():
    return select(Order).options(selectinload(Order.items))


async def get_order_by_order_id(order_id: str) -> Order | None:
    """
    Get an order by its public order identifier with items eagerly loaded.

    Args:
        order_id: Public order id (e.g. "ord_...")

    Returns:
        Order object with items loaded if found, None otherwise
    """
    logger = get_current_logger()
    session = db_connection.get_session()
    try:
        async with session:
            result = await session.execute(
                _with_items().filter(Order.order_id == order_id)
            )
            return result.scalar_one_or_none()
    except Exception as e:
        logger.error(f"Error getting order {order_id}: {e}")
        raise


async def get_orders_by_email(user_email: str) -> list[Order]:
    """
    Get every order placed under an email address, newest first.

    Args:
        user_email: Customer email stored on the order header

    Returns:
        List of Order objects with items loaded
    """
    logger = get_current_logger()
    session = db_connection.get_session()
    try:
        async with session:
            result = await session.execute(
                _with_items()
                .filter(Order.user_email == user_email)
                .order_by(Order.created_at.desc(), Order.id.desc())
            )
            return list(result.scalars().all())
    except Exception as e:
        logger.error(f"Error getting orders for {user_email}: {e}")
        raise


async def get_latest_order_by_email(user_email: str) -> Order | None:
    """Most recent order for an email address, or None."""
    logger = get_current_logger()
    session = db_connection.get_session()
    try:
        async with session:
            result = await session.execute(
                _with_items()
                .filter(Order.user_email == user_email)
                .order_by(Order.created_at.desc(), Order.id.desc())
                .limit(1)
            )
            return result.scalar_one_or_none()
    except Exception as e:
        logger.error(f"Error getting latest order for {user_email}: {e}")
        raise


async def list_orders(limit: int | None = None, offset: int = 0) -> list[Order]:
    """
    Get all orders, newest first, with optional pagination.

    Args:
        limit: Maximum number of orders to return (None = all)
        offset: Number of orders to skip
    """
    logger = get_current_logger()
    query = _with_items().order_by(Order.created_at.desc(), Order.id.desc())
    if limit is not None:
        query = query.limit(limit).offset(offset)

    session = db_connection.get_session()
    try:
        async with session:
            result = await session.execute(query)
            return list(result.scalars().all())
    except Exception as e:
        logger.error(f"Error listing orders: {e}")
        raise


async def delete_order(order_id: str) -> bool:
    """
    Delete an order header; its items go with it through the cascade.

    Returns:
        True if deleted, False if no such order
    """
    logger = get_current_logger()
    session = db_connection.get_session()
    async with session:
        try:
            result = await session.execute(
                _with_items().filter(Order.order_id == order_id)
            )
            order = result.scalar_one_or_none()
            if not order:
                logger.warning(f"Order {order_id} not found for deletion")
                return False

            await session.delete(order)
            await session.commit()
            logger.info(f"Deleted order {order_id}")
            return True
        except Exception as e:
            await session.rollback()
            logger.error(f"Failed to delete order {order_id}: {e}")
            raise
