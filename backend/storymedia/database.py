"""SQLAlchemy 2.0 async database engine and session management.

The engine is owned by a ``Database`` object that is constructed explicitly
(by ``init_media_service`` at startup, or directly by tests) instead of at
import time.
"""

from __future__ import annotations

import logging
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from storymedia.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class Database:
    """Async engine + session factory pair."""

    def __init__(self, url: str, echo: bool = False) -> None:
        engine_kwargs: dict = {"echo": echo}
        if not url.startswith("sqlite"):
            engine_kwargs.update(pool_recycle=3600, pool_pre_ping=True)
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create all tables defined by Base metadata."""
        # Importing the models registers them with Base.metadata
        import storymedia.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


_database: Database | None = None


def get_database(settings: Settings | None = None) -> Database:
    """Return the process-wide Database, creating it from settings on first use."""
    global _database
    if _database is None:
        settings = settings or get_settings()
        _database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    return _database


async def init_db() -> None:
    """Create all tables (best-effort). Called once at application startup."""
    try:
        await get_database().create_all()
    except Exception as e:
        logger.warning("Could not run create_all (tables may already exist): %s", e)


async def close_db() -> None:
    """Dispose of the engine connection pool. Called at application shutdown."""
    global _database
    if _database is not None:
        await _database.dispose()
        _database = None
