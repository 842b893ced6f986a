"""Database client and connection management with SQLAlchemy."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from studies_api.config.settings import settings
from studies_api.database.base import Base

logger = logging.getLogger(__name__)

# Global SQLAlchemy engine
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get the SQLAlchemy async engine instance."""
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the SQLAlchemy async session factory."""
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _async_session_factory


def engine_options(database_url: str) -> dict[str, Any]:
    """Pool options for the configured backend.

    SQLite (aiosqlite) is used for local runs and tests and does not accept the
    queue pool tuning knobs used for PostgreSQL.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"echo": settings.database_echo}

    return {
        "echo": settings.database_echo,
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_timeout": settings.database_pool_timeout,
        "pool_recycle": settings.database_pool_recycle,
        "pool_pre_ping": True,  # Verify connections before using
    }


def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine for ``database_url``.

    On SQLite, foreign keys are switched on (so deletes cascade as they do on
    PostgreSQL) and every transaction starts with ``BEGIN IMMEDIATE``: writers
    queue on the busy timeout instead of failing with "database is locked".
    """
    engine = create_async_engine(database_url, **engine_options(database_url))

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            # SQLAlchemy emits BEGIN itself, see _on_begin
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession]:
    """Get an async database session.

    The session commits when the block exits normally and rolls back otherwise.

    Usage:
        async with get_session() as session:
            result = await session.execute(select(User))
            users = result.scalars().all()
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Initialize the database connection.

    This function:
    1. Creates the async engine
    2. Creates the session factory
    3. Verifies connection
    4. Creates missing tables when schema creation is enabled
    """
    global _engine, _async_session_factory

    try:
        logger.info(f"Connecting to database at {settings.database_url.split('@')[-1]}")

        _engine = build_engine(settings.database_url)

        _async_session_factory = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async with _engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if settings.database_create_schema:
                await conn.run_sync(Base.metadata.create_all)

        logger.info("Database initialization complete")

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db() -> None:
    """Close the database connection gracefully."""
    global _engine, _async_session_factory

    if _engine is not None:
        logger.info("Closing database connection")
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Database connection closed")
