from dataclasses import dataclass
from decimal import Decimal

from src.checkout import CartLine, CheckoutResult, CustomerIdentity, check_stock, compute_total, place_order
from src.checkout.errors import InsufficientStock
from src.data.models.db_entity.user import User
from src.data.postgres.product_ops import get_product_by_id
from src.storefront.services.session_store import SessionStore, ShopSession
from src.utils.logger import get_current_logger


@dataclass
class AddToCartOutcome:
    line: CartLine
    requested: int
    clamped: bool
    available: int

    @property
    def message(self) -> str:
        if self.clamped:
            return f"Only {self.available} available in stock. Quantity limited."
        return f"{self.line.product_name} added to cart."


def cart_total(shop_session: ShopSession) -> Decimal:
    return compute_total(shop_session.cart)


def view_cart(shop_session: ShopSession) -> dict:
    return {
        "items": [line.model_dump(mode="json") for line in shop_session.cart],
        "total": str(cart_total(shop_session)),
    }


async def _reload(shop_session: ShopSession, store: SessionStore) -> None:
    """Bring a session loaded before the lock up to date with the stored copy."""
    stored = await store.get(shop_session.session_id)
    if stored is not None:
        shop_session.cart = stored.cart
        shop_session.last_purchase = stored.last_purchase


async def add_to_cart(
    shop_session: ShopSession,
    store: SessionStore,
    product_id: int,
    quantity: int = 1,
) -> AddToCartOutcome:
    """
    Add units of a product to the cart, clamped to what is in stock.

    The line's name and discounted price are snapshotted from the product the
    first time it is added.

    Raises:
        ValueError: If quantity is not positive
        LookupError: If the product does not exist
        InsufficientStock: If the product is out of stock
    """
    logger = get_current_logger()
    if quantity <= 0:
        raise ValueError("Quantity must be at least 1")

    product = await get_product_by_id(product_id)
    if not product:
        raise LookupError(f"Product {product_id} not found")
    if product.quantity <= 0:
        raise InsufficientStock(product_id=product.id, available=0, requested=quantity)

    async with store.lock(shop_session.session_id):
        await _reload(shop_session, store)

        existing = next((line for line in shop_session.cart if line.product_id == product.id), None)
        wanted = quantity + (existing.quantity if existing else 0)
        shortage = check_stock(wanted, product.quantity, product.id)
        new_quantity = product.quantity if shortage else wanted

        if existing:
            existing.quantity = new_quantity
            line = existing
        else:
            line = CartLine(
                product_id=product.id,
                product_name=product.name,
                unit_price=product.effective_price,
                quantity=new_quantity,
                original_price=product.price,
                discount=product.discount,
                image=product.image,
            )
            shop_session.cart.append(line)

        await store.save(shop_session)

    logger.info(
        f"Cart {shop_session.session_id}: product {product.id} -> qty {new_quantity}"
        f"{' (clamped)' if shortage else ''}"
    )
    return AddToCartOutcome(line=line, requested=wanted, clamped=shortage is not None, available=product.quantity)


async def remove_from_cart(shop_session: ShopSession, store: SessionStore, product_id: int) -> bool:
    """Drop every line for a product. Returns False if it was not in the cart."""
    async with store.lock(shop_session.session_id):
        await _reload(shop_session, store)
        before = len(shop_session.cart)
        shop_session.cart = [line for line in shop_session.cart if line.product_id != product_id]
        removed = len(shop_session.cart) != before
        if removed:
            await store.save(shop_session)
    return removed


def customer_from_user(user: User) -> CustomerIdentity:
    return CustomerIdentity(
        email=user.email,
        name=user.username,
        address=user.address,
        contact=user.contact,
    )


async def checkout_session(
    shop_session: ShopSession,
    store: SessionStore,
    customer: CustomerIdentity,
) -> CheckoutResult:
    """
    Check out the session cart.

    Runs under the session lock against the stored cart, so a second
    checkout of the same session waits and then finds the cart empty. On
    success the cart is cleared and the order recorded as the session's last
    purchase. On failure the session is left untouched.
    """
    logger = get_current_logger()
    async with store.lock(shop_session.session_id):
        await _reload(shop_session, store)
        result = await place_order(list(shop_session.cart), customer)
        if not result.ok:
            return result

        shop_session.cart = []
        shop_session.last_purchase = result.order
        try:
            await store.save(shop_session)
        except Exception as e:
            # Order is already committed; only the stored cart is stale
            logger.error(f"Order {result.order.order_id} placed but session {shop_session.session_id} not saved: {e}")
    return result
