from decimal import Decimal, InvalidOperation
from typing import Optional

from src.config import STATIC_CATEGORIES
from src.data.models.db_entity.product import Product
from src.data.postgres.product_ops import list_categories, list_products


def parse_price_bound(raw: Optional[str]) -> Optional[Decimal]:
    """Parse a price filter value. Blank, unparsable or negative values mean no bound."""
    if raw is None or not str(raw).strip():
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    return value


async def browse_products(
    category: Optional[str] = None,
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
) -> tuple[list[Product], dict]:
    """
    Filter the catalog.

    Returns:
        The matching products and the filters actually applied (bounds swapped
        when given in the wrong order)
    """
    low = parse_price_bound(min_price)
    high = parse_price_bound(max_price)
    if low is not None and high is not None and low > high:
        low, high = high, low

    category = category.strip() if category and category.strip() else None
    products = await list_products(category=category, min_price=low, max_price=high)
    applied = {
        "category": category or "All",
        "min_price": str(low) if low is not None else None,
        "max_price": str(high) if high is not None else None,
    }
    return products, applied


async def all_categories() -> list[str]:
    """Static categories first, then any other category found on products."""
    stored = await list_categories()
    known = {c.lower() for c in STATIC_CATEGORIES}
    extra = [c for c in stored if c.lower() not in known]
    return list(STATIC_CATEGORIES) + sorted(extra, key=str.lower)
