"""
FastAPI dependencies for authentication and shop sessions.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from src.data.models.db_entity.user import User
from src.data.models.enum.user_role import UserRole
from src.data.postgres.user_ops import get_user_by_id
from src.storefront.schemas.auth_schemas import UserInfo
from src.storefront.services.session_store import SessionStore, ShopSession, get_session_store
from src.utils.jwt_utils import get_token_payload
from src.utils.logger import get_current_logger

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> UserInfo:
    """
    Get the current authenticated user from JWT token.

    Raises:
        HTTPException: If token is missing, expired, or invalid
    """
    if not credentials:
        raise _unauthorized("Missing authentication token")

    payload = get_token_payload(credentials.credentials)
    if payload is None:
        get_current_logger().warning("Rejected invalid or expired token")
        raise _unauthorized("Invalid or expired token")

    return UserInfo(
        user_id=payload.user_id,
        username=payload.username,
        role=payload.role,
        session_id=payload.sid,
    )


async def get_shop_session(
    current_user: UserInfo = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
) -> ShopSession:
    """
    Load the shop session the token is bound to.

    A token whose session was deleted (logout) or expired is rejected.
    """
    shop_session = await store.get(current_user.session_id)
    if shop_session is None or shop_session.user_id != current_user.user_id:
        raise _unauthorized("Session expired, please log in again")
    return shop_session


async def get_current_account(
    current_user: UserInfo = Depends(get_current_user),
    _: ShopSession = Depends(get_shop_session),
) -> User:
    """The caller's user row, for endpoints that need profile data."""
    user = await get_user_by_id(current_user.user_id)
    if user is None:
        raise _unauthorized("Account no longer exists")
    return user


async def require_admin(user: User = Depends(get_current_account)) -> User:
    """
    Allow only ADMIN accounts. The role is read from the database, not the
    token, so a demotion takes effect immediately.
    """
    if user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return user
