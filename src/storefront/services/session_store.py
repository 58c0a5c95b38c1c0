"""
Shop session storage.

A shop session holds the per-login state the storefront keeps outside the
database: the cart and the last placed order. Sessions are serialized to JSON
and stored under ``CacheKeys.shop_session(session_id)`` in Redis, or in a
process-local dict when ``SESSION_BACKEND=memory``.
"""
import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from pydantic import BaseModel, Field

from src.checkout.schemas import CartLine, PlacedOrder
from src.config import SESSION_BACKEND
from src.data.redis.cache_keys import CacheKeys, CachePatterns, TTL
from src.utils.logger import get_current_logger


class ShopSession(BaseModel):
    """Cart and last purchase of one logged-in user."""
    session_id: str
    user_id: int
    cart: list[CartLine] = Field(default_factory=list)
    last_purchase: Optional[PlacedOrder] = None


def new_session_id() -> str:
    return uuid.uuid4().hex


class SessionStore:
    """Key-value interface the storefront uses for shop sessions."""

    async def get(self, session_id: str) -> Optional[ShopSession]:
        raise NotImplementedError

    async def save(self, shop_session: ShopSession) -> None:
        raise NotImplementedError

    async def delete(self, session_id: str) -> bool:
        raise NotImplementedError

    def lock(self, session_id: str):
        """
        Async context manager held around a read-modify-write of one session.

        Callers re-read the session after acquiring it; a copy loaded before
        the lock may be stale.
        """
        raise NotImplementedError

    async def create(self, user_id: int) -> ShopSession:
        """Start an empty session for a user and persist it."""
        shop_session = ShopSession(session_id=new_session_id(), user_id=user_id)
        await self.save(shop_session)
        return shop_session


class InMemorySessionStore(SessionStore):
    """Process-local store. Values are kept serialized so callers never share objects."""

    def __init__(self):
        self._data: dict[str, str] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, session_id: str) -> asyncio.Lock:
        if session_id not in self._locks:
            self._locks[session_id] = asyncio.Lock()
        return self._locks[session_id]

    async def get(self, session_id: str) -> Optional[ShopSession]:
        raw = self._data.get(session_id)
        if raw is None:
            return None
        return ShopSession.model_validate_json(raw)

    async def save(self, shop_session: ShopSession) -> None:
        self._data[shop_session.session_id] = shop_session.model_dump_json()

    async def delete(self, session_id: str) -> bool:
        return self._data.pop(session_id, None) is not None

    def clear(self) -> None:
        self._data.clear()
        self._locks.clear()


class RedisSessionStore(SessionStore):
    """Redis-backed store; each save refreshes the key TTL."""

    def __init__(self, connection=None):
        if connection is None:
            from src.data.redis.connection import redis_connection
            connection = redis_connection
        self.connection = connection

    @asynccontextmanager
    async def lock(self, session_id: str):
        client = await self.connection.get_client()
        async with client.lock(
            CacheKeys.shop_session_lock(session_id),
            timeout=TTL.SHOP_SESSION_LOCK,
            blocking_timeout=TTL.SHOP_SESSION_LOCK,
        ):
            yield

    async def get(self, session_id: str) -> Optional[ShopSession]:
        logger = get_current_logger()
        client = await self.connection.get_client()
        try:
            raw = await client.get(CacheKeys.shop_session(session_id))
        except Exception as e:
            logger.error(f"Failed to read shop session {session_id}: {e}")
            raise
        if raw is None:
            return None
        return ShopSession.model_validate_json(raw)

    async def save(self, shop_session: ShopSession) -> None:
        logger = get_current_logger()
        client = await self.connection.get_client()
        try:
            await client.set(
                CacheKeys.shop_session(shop_session.session_id),
                shop_session.model_dump_json(),
                ex=TTL.SHOP_SESSION,
            )
        except Exception as e:
            logger.error(f"Failed to save shop session {shop_session.session_id}: {e}")
            raise

    async def delete(self, session_id: str) -> bool:
        client = await self.connection.get_client()
        return bool(await client.delete(CacheKeys.shop_session(session_id)))

    async def clear(self) -> int:
        """Delete every shop session. Returns the number of keys removed."""
        client = await self.connection.get_client()
        deleted = 0
        async for key in client.scan_iter(match=CachePatterns.all_shop_sessions_pattern()):
            deleted += await client.delete(key)
        return deleted


_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Process-wide store selected by SESSION_BACKEND."""
    global _session_store
    if _session_store is None:
        logger = get_current_logger()
        if SESSION_BACKEND == "memory":
            _session_store = InMemorySessionStore()
        else:
            _session_store = RedisSessionStore()
        logger.info(f"Shop session backend: {type(_session_store).__name__}")
    return _session_store
