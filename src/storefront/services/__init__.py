from src.storefront.services.session_store import (
    ShopSession,
    SessionStore,
    InMemorySessionStore,
    RedisSessionStore,
    get_session_store,
)

__all__ = [
    "ShopSession",
    "SessionStore",
    "InMemorySessionStore",
    "RedisSessionStore",
    "get_session_store",
]
