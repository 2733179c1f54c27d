"""Database engine and session management using SQLModel + async SQLAlchemy.

The engine is a process-scoped resource: it is built once at startup, handed
to the plan store through its session factory, and disposed on shutdown.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from bizplan.config import Settings, get_settings

# Register tables on SQLModel.metadata
from bizplan.database import models  # noqa: F401


logger = logging.getLogger(__name__)


def build_engine(settings: Settings | None = None, database_url: str | None = None) -> AsyncEngine:
    """Create the async engine for the configured database URL."""
    settings = settings or get_settings()
    url = database_url or settings.database_url

    kwargs: dict[str, Any] = {"echo": settings.debug}
    if url.startswith("sqlite"):
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            # A single shared connection, otherwise every session sees its own empty database
            kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = settings.database_pool_size
        kwargs["max_overflow"] = settings.database_max_overflow

    return create_async_engine(url, **kwargs)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database tables.

    Note: In production, use Alembic migrations instead.
    This is here for development convenience.
    """
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()
