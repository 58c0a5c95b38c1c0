from src.storefront.routers.auth_router import router as auth_router
from src.storefront.routers.catalog_router import router as catalog_router
from src.storefront.routers.cart_router import router as cart_router
from src.storefront.routers.order_router import router as order_router
from src.storefront.routers.admin_router import router as admin_router

__all__ = ["auth_router", "catalog_router", "cart_router", "order_router", "admin_router"]
