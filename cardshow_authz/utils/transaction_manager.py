"""Unit of work for a decision and the access it guards."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def transaction_scope(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Commit on success, roll back on any error.

    The policy decision and the read or write it guards run on the same
    session inside one scope, so both observe the same snapshot and a
    denied write never reaches the database.

    Usage:
        async with transaction_scope(db):
            decision = await evaluator.authorize(...)
            row = await port.update(entity_id, values)
    """
    try:
        yield db
    except Exception as e:
        await db.rollback()
        logger.debug(f"Transaction rolled back: {type(e).__name__}")
        raise
    await db.commit()
