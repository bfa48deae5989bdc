"""
Async SQLAlchemy engine and session factory.

The engine is built once at startup, stored on ``app.state`` and disposed
at shutdown.  Route handlers receive sessions through ``get_db_session``.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from auth.errors import ConfigurationError
from config.settings import Settings
from database.models import Base

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the pooled engine; in-memory SQLite keeps its single static connection."""
    kwargs = {
        "echo": False,
        "hide_parameters": True,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": True,
    }
    if ":memory:" not in settings.database_url:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
    return create_async_engine(settings.database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_schema(engine: AsyncEngine) -> None:
    """Create the ``users`` table if absent; doubles as a reachability check."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError) as exc:
        raise ConfigurationError("database_url", f"store unreachable: {exc}") from exc
    logger.info("Database schema ready")


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
