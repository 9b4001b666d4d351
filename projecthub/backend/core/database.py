"""
Database Configuration.

SQLAlchemy async engine and session management for the remote store.
Uses lazy initialization to prevent import-time failures when .env is not configured.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from projecthub.backend.core.logging import get_logger

logger = get_logger(__name__)

# Module-level state for lazy initialization
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _create_engine() -> AsyncEngine:
    """Create async SQLAlchemy engine."""
    from projecthub.backend.core.config import get_app_config, get_database_url

    url = get_database_url()
    db_config = get_app_config().database

    options: dict[str, Any] = {"echo": db_config.echo}
    if url.get_backend_name() != "sqlite":
        options.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=db_config.pool_recycle,
        )

    engine = create_async_engine(url, **options)
    logger.debug("Database engine created", extra={"host": url.host, "driver": url.drivername})
    return engine


def get_engine() -> AsyncEngine:
    """
    Get the database engine, creating it on first use.

    Raises:
        pydantic.ValidationError: If required secrets are missing
    """
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory, creating it on first use."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a transactional session.

    Commits when the block exits cleanly, rolls back on error.

    Usage:
        async with session_scope() as session:
            result = await ProjectService(session).list_projects(identity)
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_schema(engine: AsyncEngine | None = None) -> None:
    """Create all store tables that do not exist yet."""
    from projecthub.backend.models import Base

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Store schema created", extra={"tables": sorted(Base.metadata.tables)})


async def dispose_engine() -> None:
    """Close pooled connections and reset lazy state."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None
