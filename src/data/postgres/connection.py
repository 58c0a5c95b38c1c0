from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool

import src.config as config
from src.utils.logger import get_current_logger


class DatabaseConnection:
    """
    Async database connection manager using SQLAlchemy.

    PostgreSQL (asyncpg) is the production target. SQLite (aiosqlite) is
    accepted for local runs and tests; since SQLite has no row locks, every
    transaction there starts with BEGIN IMMEDIATE so writers serialise on the
    database lock the way PostgreSQL serialises them on SELECT ... FOR UPDATE.
    """

    def __init__(self, url: str):
        """
        Initialize the async engine.

        Args:
            url: SQLAlchemy database URL
        """
        logger = get_current_logger()
        self.url = make_url(url)
        self.is_sqlite = self.url.get_backend_name() == "sqlite"

        if self.is_sqlite:
            self.engine = create_async_engine(
                self.url,
                poolclass=NullPool,
                connect_args={"timeout": 30},
                echo=config.DB_ECHO,
            )
            self._install_sqlite_locking()
        else:
            self.engine = create_async_engine(
                self.url,
                pool_size=20,
                max_overflow=10,
                echo=config.DB_ECHO,  # Set DB_ECHO=true for SQL query logging
            )

        self.AsyncSessionLocal = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )
        logger.info(f"✅ Database async engine initialized: {self.url.render_as_string(hide_password=True)}")

    def _install_sqlite_locking(self):
        @event.listens_for(self.engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            # Stop the driver from issuing its own deferred BEGIN
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(self.engine.sync_engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    def get_session(self) -> AsyncSession:
        """
        Get a new async database session.

        Returns:
            SQLAlchemy AsyncSession object
        """
        return self.AsyncSessionLocal()

    async def close(self):
        """Close database engine and cleanup resources."""
        logger = get_current_logger()
        await self.engine.dispose()
        logger.info("✅ Database async engine disposed")


db_connection = DatabaseConnection(config.DATABASE_URL)
