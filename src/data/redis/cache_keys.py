from src.config import SESSION_TTL_SECONDS


class TTL:
    """Time-to-Live constants for Redis keys."""
    SHOP_SESSION = SESSION_TTL_SECONDS  # 7 days by default, refreshed on every save
    SHOP_SESSION_LOCK = 30  # released explicitly; expiry only covers a crashed holder


class CacheKeys:
    """Key generators for all Redis keys."""

    @staticmethod
    def shop_session(session_id: str) -> str:
        """Key holding one serialized shop session (cart, last purchase)."""
        return f"shop:session:{session_id}"

    @staticmethod
    def shop_session_lock(session_id: str) -> str:
        """Lock serialising read-modify-write of one shop session."""
        return f"shop:lock:{session_id}"


class CachePatterns:
    """Key patterns for bulk operations."""

    @staticmethod
    def all_shop_sessions_pattern() -> str:
        """Pattern to match every shop session key."""
        return "shop:session:*"
