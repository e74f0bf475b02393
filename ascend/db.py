"""
Ascend Database Layer
One async engine with a bounded connection pool. Every unit of work checks
out its own session and gives it back on every exit path.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool
from sqlmodel import SQLModel

from ascend.config import Settings

# registers the tables on SQLModel.metadata
from ascend import models  # noqa: F401

logger = logging.getLogger("ascend.db")


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_sqlite_memory(url: str) -> bool:
    # a private in-memory database lives on one connection, so it cannot be pooled
    return _is_sqlite(url) and (":memory:" in url or "mode=memory" in url or url.rstrip("/").endswith(":"))


def _engine_options(settings: Settings) -> dict:
    """Pool and driver arguments for the configured database."""
    options = {
        "echo": False,
        "future": True,
        "pool_pre_ping": True,  # Verify connections before use
    }
    if _is_sqlite(settings.db_url):
        # sqlite3 busy timeout stands in for a query timeout
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": settings.query_timeout_ms / 1000,
        }
    if _is_sqlite_memory(settings.db_url):
        return options

    if _is_sqlite(settings.db_url):
        options["poolclass"] = AsyncAdaptedQueuePool
    options["pool_size"] = settings.max_connections
    options["max_overflow"] = 0
    options["pool_timeout"] = settings.connection_timeout_ms / 1000
    return options


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # dbapi_connection is SQLAlchemy's adapted aiosqlite connection; its cursor runs synchronously
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the engine and the session factory.
    Built once per process by the application context and disposed on shutdown.
    """

    def __init__(self, settings: Settings):
        self.url = settings.db_url
        self.engine: AsyncEngine = create_async_engine(settings.db_url, **_engine_options(settings))
        if _is_sqlite(settings.db_url):
            # cascades and parent checks depend on this
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_tables(self) -> None:
        """Create the schema. Idempotent - safe to run multiple times."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("database_tables_ready", extra={"db_url": self.engine.url.render_as_string(hide_password=True)})

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Scoped session checkout.
        Rolls back anything left uncommitted and returns the connection to the pool.
        """
        session = self.session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def ping(self) -> bool:
        """Health check for the database connection."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("database_ping_failed", extra={"error": str(e)})
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("database_pool_closed")
