from src.checkout.errors import InsufficientStock


def check_stock(requested: int, available: int, product_id: int | None = None) -> InsufficientStock | None:
    """
    Compare a requested quantity against stock on hand.

    Pure function, shared by the checkout transaction (under row lock) and the
    cart (to clamp add-to-cart quantities before any lock is taken).

    Args:
        requested: Units wanted, must be positive
        available: Units on hand
        product_id: Product the numbers refer to, carried into the error

    Returns:
        None when the request can be served, otherwise an InsufficientStock
        error reporting what is available

    Raises:
        ValueError: If requested is not positive
    """
    if requested <= 0:
        raise ValueError(f"Requested quantity must be positive, got {requested}")
    if available < requested:
        return InsufficientStock(product_id=product_id, available=max(available, 0), requested=requested)
    return None
