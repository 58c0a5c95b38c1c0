import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import RedisError
from src.config import REDIS_HOST, REDIS_PORT, REDIS_PASSWORD, REDIS_DB
from src.utils.logger import get_current_logger


class RedisConnection:
    """
    Async Redis client used by the shop session store.

    The pool is built on construction, but no socket is opened until the
    first get_client() call, so importing this module (or running with
    SESSION_BACKEND=memory) never requires a live Redis.
    """

    def __init__(self, host: str = REDIS_HOST, port: int = REDIS_PORT, db: int = REDIS_DB,
                 password: str | None = REDIS_PASSWORD):
        self.address = f"{host}:{port}/{db}"
        self.pool = ConnectionPool(
            host=host,
            port=port,
            password=password or None,
            db=db,
            decode_responses=True,  # sessions are stored as JSON text
            max_connections=20,
            socket_keepalive=True,
            socket_connect_timeout=5,
        )
        self.client: redis.Redis | None = None

    async def get_client(self) -> redis.Redis:
        """
        Client bound to the pool, connected and pinged on first use.

        Raises:
            RedisError: If Redis is unreachable
        """
        logger = get_current_logger()
        if self.client is None:
            client = redis.Redis(connection_pool=self.pool)
            try:
                await client.ping()
            except RedisError as e:
                logger.error(f"❌ Redis unreachable at {self.address}: {e}")
                raise
            self.client = client
            logger.info(f"✅ Redis session backend connected: {self.address}")
        return self.client

    async def close(self):
        """Release the client and every pooled socket."""
        logger = get_current_logger()
        if self.client:
            await self.client.aclose()
            self.client = None
        await self.pool.aclose()
        logger.info("✅ Redis connection closed")


redis_connection = RedisConnection()
