"""Engine, session factory and Redis client, created on first use."""

import logging
from typing import Any

import redis.asyncio as aioredis
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .settings import settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None
_redis: aioredis.Redis | None = None


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.DEBUG}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(pool_pre_ping=True, pool_recycle=3600, pool_size=10, max_overflow=20)
    return options


def get_async_engine() -> AsyncEngine:
    """Engine for ``DATABASE_URL``."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory shared by request sessions and the database audit sink.

    Rows stay loaded after commit: decisions and responses read them after
    the guarded transaction has ended.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_async_engine(), class_=AsyncSession, expire_on_commit=False)
    return _session_factory


async def create_tables() -> None:
    """Create missing tables. Development and SQLite deployments only."""
    from cardshow_authz.models import Base

    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"tables": len(Base.metadata.tables)})


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def get_redis() -> aioredis.Redis:
    """Redis client for the audit stream."""
    global _redis
    if _redis is None:
        _redis = aioredis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            health_check_interval=30,
        )
    return _redis


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None


def reset_engines() -> None:
    """Forget the engine and session factory so settings changes take effect (tests)."""
    global _engine, _session_factory
    _engine = None
    _session_factory = None
