"""Async database connection management.

Provides the SQLAlchemy declarative base and a ``Database`` object that owns
the async engine and session factory for the lifetime of the application.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine and session factory for one database URL.

    Created at application start-up and disposed at shutdown; request
    handlers receive sessions from it through dependency injection.
    """

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        """Initialize database engine and session factory.

        Args:
            database_url: Async connection URL (postgresql+asyncpg://... or sqlite+aiosqlite://...)
            **engine_kwargs: Additional arguments passed to create_async_engine
        """
        engine_kwargs.setdefault("echo", False)
        engine_kwargs.setdefault("pool_pre_ping", True)

        self.url = database_url
        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_all(self) -> None:
        """Create any missing tables from the model metadata."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session, committing on success and rolling back on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Close database connections.

        Should be called during application shutdown.
        """
        await self.engine.dispose()
