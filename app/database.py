"""
Database connection management for the property catalog.
Builds async SQLAlchemy engines and hands out scoped connections to the stores.
"""

import asyncio
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.utils.exceptions import StoreConnectionError
import logging

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all table models."""

    def __repr__(self) -> str:
        """String representation of the model."""
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with FK enforcement off; cascades depend on it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    PostgreSQL engines get a sized connection pool; SQLite engines get
    foreign key enforcement, and in-memory databases share one connection
    so every caller sees the same data.

    Args:
        database_url: SQLAlchemy URL, defaults to the active environment's URL
        echo: Log emitted SQL, defaults to the debug setting

    Returns:
        Configured AsyncEngine
    """
    url = database_url or settings.active_database_url
    echo = settings.debug if echo is None else echo

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(url, echo=echo, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_async_engine(
            url,
            echo=echo,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_pre_ping=True,
            pool_recycle=settings.pool_recycle,
            pool_timeout=settings.pool_timeout,
            connect_args={
                "server_settings": {
                    "application_name": "property_catalog",
                }
            }
        )

    logger.debug(f"Created database engine for {engine.url.render_as_string(hide_password=True)}")
    return engine


class DatabaseConnectionFactory:
    """
    Connection provider for the stores.
    Each call to create_connection() yields a freshly opened connection that
    is closed again on every exit path.

    Engines backed by a single shared DBAPI connection (in-memory SQLite)
    hand it out to one caller at a time, so concurrent operations never
    share a transaction.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.single_connection = isinstance(engine.sync_engine.pool, StaticPool)
        # Created on first use so it binds to the running event loop
        self._checkout_lock: Optional[asyncio.Lock] = None

    def _get_checkout_lock(self) -> asyncio.Lock:
        if self._checkout_lock is None:
            self._checkout_lock = asyncio.Lock()
        return self._checkout_lock

    @asynccontextmanager
    async def create_connection(self) -> AsyncIterator[AsyncConnection]:
        """
        Open a connection scoped to the caller's async with block.

        Raises:
            StoreConnectionError: If the engine cannot supply a connection,
                including when the pool times out
        """
        async with AsyncExitStack() as stack:
            if self.single_connection:
                await stack.enter_async_context(self._get_checkout_lock())

            try:
                connection = await self.engine.connect()
            except (DBAPIError, PoolTimeoutError, OSError) as e:
                logger.error(f"Failed to open database connection: {e}")
                raise StoreConnectionError(f"cannot open connection: {e}") from e

            stack.push_async_callback(connection.close)
            yield connection

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("Database connections closed")


async def check_database_connection(engine: AsyncEngine) -> bool:
    """
    Test database connectivity.
    Returns True if connection is successful, False otherwise.
    """
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            result.scalar()
            logger.info("Database connection successful")
            return True
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {e}")
        return False


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all tables and indexes that do not exist yet.
    """
    # Table classes register themselves on Base.metadata when imported
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")


async def drop_tables(engine: AsyncEngine) -> None:
    """
    Drop all tables.
    This should only be used in testing or development.
    """
    if settings.is_production:
        raise RuntimeError("Cannot drop tables in production environment")

    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped successfully")
