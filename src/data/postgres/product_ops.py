"""Database operations for the Product catalog."""

from decimal import Decimal
from typing import Any

from sqlalchemy import select, func

from src.data.postgres.connection import db_connection
from src.data.models.db_entity.product import Product
from src.utils.logger import get_current_logger


def category_variants(category: str) -> set[str]:
    """
    Lower-cased singular/plural forms of a category label.

    "Snacks" -> {"snacks", "snack"}; "Fruit" -> {"fruit", "fruits"}.
    """
    target = category.strip().lower()
    if not target:
        return set()
    variants = {target}
    if target.endswith("s"):
        variants.add(target[:-1])
    else:
        variants.add(target + "s")
    return variants


async def get_product_by_id(product_id: int) -> Product | None:
    """
    Get a product by its ID.

    Args:
        product_id: Product ID to search for

    Returns:
        Product object if found, None otherwise
    """
    logger = get_current_logger()
    session = db_connection.get_session()
    try:
        async with session:
            result = await session.execute(
                select(Product).filter(Product.id == product_id)
            )
            return result.scalar_one_or_none()
    except Exception as e:
        logger.error(f"Error getting product by ID {product_id}: {e}")
        raise


async def list_products(
    category: str | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
) -> list[Product]:
    """
    List products, optionally filtered by category and a price range.

    Category matching is case-insensitive, ignores surrounding whitespace and
    accepts the singular/plural form of the label. "All" disables the filter.

    Args:
        category: Category label or None
        min_price: Inclusive lower bound on list price
        max_price: Inclusive upper bound on list price

    Returns:
        List of Product objects ordered by id
    """
    logger = get_current_logger()
    query = select(Product)

    if category and category.strip().lower() != "all":
        variants = category_variants(category)
        query = query.filter(func.lower(func.trim(Product.category)).in_(sorted(variants)))
    if min_price is not None:
        query = query.filter(Product.price >= min_price)
    if max_price is not None:
        query = query.filter(Product.price <= max_price)

    session = db_connection.get_session()
    try:
        async with session:
            result = await session.execute(query.order_by(Product.id))
            products = list(result.scalars().all())
            logger.debug(
                f"Listed {len(products)} products (category={category}, min={min_price}, max={max_price})"
            )
            return products
    except Exception as e:
        logger.error(f"Error listing products: {e}")
        raise


async def list_categories() -> list[str]:
    """Distinct, trimmed, non-empty category values stored on products."""
    logger = get_current_logger()
    session = db_connection.get_session()
    try:
        async with session:
            result = await session.execute(
                select(Product.category).distinct().filter(Product.category.is_not(None))
            )
            categories = {(c or "").strip() for c in result.scalars().all()}
            return sorted(c for c in categories if c)
    except Exception as e:
        logger.error(f"Error listing product categories: {e}")
        raise


async def create_product(fields: dict[str, Any]) -> Product:
    """
    Insert a new product.

    Args:
        fields: Column values (name, quantity, price, discount, category, description, image)

    Returns:
        The persisted Product
    """
    logger = get_current_logger()
    session = db_connection.get_session()
    async with session:
        try:
            product = Product(**fields)
            session.add(product)
            await session.commit()
            await session.refresh(product)
            logger.info(f"Created product id={product.id} name={product.name!r}")
            return product
        except Exception as e:
            await session.rollback()
            logger.error(f"Failed to create product {fields.get('name')!r}: {e}")
            raise


async def update_product(product_id: int, fields: dict[str, Any]) -> Product | None:
    """
    Update the given columns of a product.

    Returns:
        The updated Product, or None if it does not exist
    """
    logger = get_current_logger()
    session = db_connection.get_session()
    async with session:
        try:
            result = await session.execute(
                select(Product).filter(Product.id == product_id)
            )
            product = result.scalar_one_or_none()

            if not product:
                logger.warning(f"Product {product_id} not found for update")
                return None

            for key, value in fields.items():
                setattr(product, key, value)

            await session.commit()
            await session.refresh(product)
            logger.info(f"Updated product {product_id}: {sorted(fields)}")
            return product
        except Exception as e:
            await session.rollback()
            logger.error(f"Failed to update product {product_id}: {e}")
            raise


async def delete_product(product_id: int) -> bool:
    """
    Delete a product. Past order items keep their snapshot of it.

    Returns:
        True if a product was deleted, False if not found
    """
    logger = get_current_logger()
    session = db_connection.get_session()
    async with session:
        try:
            result = await session.execute(
                select(Product).filter(Product.id == product_id)
            )
            product = result.scalar_one_or_none()
            if not product:
                return False

            await session.delete(product)
            await session.commit()
            logger.info(f"Deleted product {product_id}")
            return True
        except Exception as e:
            await session.rollback()
            logger.error(f"Failed to delete product {product_id}: {e}")
            raise
