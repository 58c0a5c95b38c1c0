from src.storefront.schemas.auth_schemas import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    ProfileUpdate,
    UserInfo,
)
from src.storefront.schemas.cart_schemas import AddToCartRequest
from src.storefront.schemas.admin_schemas import ProductCreate, ProductUpdate, UserUpdate

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "ProfileUpdate",
    "UserInfo",
    "AddToCartRequest",
    "ProductCreate",
    "ProductUpdate",
    "UserUpdate",
]
