import uuid

ORDER_ID_PREFIX = "ord_"


def new_order_id() -> str:
    """Public order identifier: "ord_" followed by 32 hex chars of a random UUID."""
    return f"{ORDER_ID_PREFIX}{uuid.uuid4().hex}"
