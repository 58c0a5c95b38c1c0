from src.data.models.db_entity.user import User
from src.data.models.db_entity.product import Product
from src.data.models.db_entity.order import Order
from src.data.models.db_entity.order_item import OrderItem

__all__ = ["User", "Product", "Order", "OrderItem"]
