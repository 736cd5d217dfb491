"""Database dependencies for FastAPI."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from cardshow_authz.config.database import get_session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; the principal lookup, decisions and guarded access share it."""
    async with get_session_factory()() as session:
        yield session
