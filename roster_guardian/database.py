"""
Database configuration and session management.
Uses SQLAlchemy 2.0 with async support (aiosqlite locally, asyncpg in production).

The engine is owned by a Database handle that is created at process startup
and disposed at shutdown; services receive sessions from it explicitly.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from alembic.runtime.migration import MigrationContext
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from roster_guardian.errors import SchemaVersionError

logger = logging.getLogger(__name__)

# Alembic head revision this code expects the database to be at
SCHEMA_REVISION = "002"


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_async_database_url(url: str) -> str:
    """Convert standard postgresql:// URL to async postgresql+asyncpg:// URL."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores foreign keys (and ON DELETE CASCADE) unless asked per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """Owns the async engine and session factory for one process."""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        """
        Create the engine. No connection is opened until first use.

        Args:
            url: Database URL (sync-style URLs are converted to async drivers)
            echo: Log emitted SQL
            engine_kwargs: Extra arguments for create_async_engine (e.g. poolclass)
        """
        self.url = get_async_database_url(url)
        self.is_sqlite = self.url.startswith("sqlite")

        options: dict = {"echo": echo, "pool_pre_ping": True}
        if not self.is_sqlite:
            options.update(pool_size=5, max_overflow=10)
        options.update(engine_kwargs)

        self.engine: AsyncEngine = create_async_engine(self.url, **options)
        if self.is_sqlite:
            enable_sqlite_foreign_keys(self.engine)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session that commits on success and rolls back on error.

        Example:
            async with database.session() as db:
                statuses = await StatusCatalog(db).list_active()
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """
        Create all tables defined in models.

        Note: For real databases, use Alembic migrations instead.
        """
        # Models register themselves on Base.metadata at import time
        import roster_guardian.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def current_revision(self) -> Optional[str]:
        """Alembic revision recorded in the database, or None if unversioned."""
        async with self.engine.connect() as conn:
            return await conn.run_sync(
                lambda sync_conn: MigrationContext.configure(sync_conn).get_current_revision()
            )

    async def verify_schema(self, expected: str = SCHEMA_REVISION) -> None:
        """
        Fail loudly when the database is not at the expected revision.

        Raises:
            SchemaVersionError: If the recorded revision differs from expected
        """
        revision = await self.current_revision()
        if revision != expected:
            raise SchemaVersionError(
                f"Database schema is at revision {revision!r}, expected {expected!r}. "
                f"Run 'python -m roster_guardian migrate' before starting."
            )
        logger.info(f"Database schema at revision {revision}")

    async def close(self) -> None:
        """
        Close database connections.
        Should be called during application shutdown.
        """
        await self.engine.dispose()
