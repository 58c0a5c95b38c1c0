"""Redis module for shop session storage."""

from src.data.redis.connection import RedisConnection, redis_connection
from src.data.redis.cache_keys import CacheKeys, CachePatterns, TTL

__all__ = [
    "RedisConnection",
    "redis_connection",
    "CacheKeys",
    "CachePatterns",
    "TTL",
]
