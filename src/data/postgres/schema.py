"""Schema bootstrap run once at application startup."""

from src.data.models import Base
from src.data.models import db_entity  # noqa: F401  registers the mapped tables
from src.data.postgres.connection import db_connection
from src.utils.logger import get_current_logger


async def ensure_schema() -> None:
    """Create any missing tables. Existing tables are left untouched."""
    logger = get_current_logger()
    async with db_connection.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Schema ensured: {', '.join(sorted(Base.metadata.tables))}")


async def drop_schema() -> None:
    """Drop every mapped table. Used by tests and local resets."""
    logger = get_current_logger()
    async with db_connection.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("Schema dropped")
