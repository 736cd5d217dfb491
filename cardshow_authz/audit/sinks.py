"""Audit sinks: where emitted events end up."""

import logging
from typing import Callable, List, Protocol, runtime_checkable

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from cardshow_authz.config.database import get_session_factory, get_redis
from cardshow_authz.config.settings import Settings
from cardshow_authz.models.audit_log import AuditLogEntry

from .events import AuditEvent

audit_logger = logging.getLogger("cardshow_authz.audit")


@runtime_checkable
class AuditSink(Protocol):
    """Append-only, best-effort destination for audit events."""

    async def emit(self, event: AuditEvent) -> None: ...


class LoggingAuditSink:
    """Write each event as one structured log record."""

    def __init__(self, logger: logging.Logger = audit_logger):
        self.logger = logger

    async def emit(self, event: AuditEvent) -> None:
        self.logger.info(
            f"authz {event.decision.value}: {event.operation} {event.entity_type}",
            extra={"event": "authz_audit", "audit_event": event.to_dict()},
        )


class RedisStreamAuditSink:
    """Append events to a capped Redis stream."""

    def __init__(
        self,
        redis_factory: Callable,
        stream: str,
        maxlen: int,
    ):
        self.redis_factory = redis_factory
        self.stream = stream
        self.maxlen = maxlen

    async def emit(self, event: AuditEvent) -> None:
        redis: aioredis.Redis = await self.redis_factory()
        # Stream fields cannot hold None
        fields = {key: "" if value is None else str(value) for key, value in event.to_dict().items()}
        await redis.xadd(self.stream, fields, maxlen=self.maxlen, approximate=True)


class DatabaseAuditSink:
    """Insert events into the audit log table on a short session of their own."""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def emit(self, event: AuditEvent) -> None:
        async with self.session_factory() as session:
            session.add(
                AuditLogEntry(
                    timestamp=event.timestamp,
                    principal_id=event.principal_id,
                    entity_type=event.entity_type,
                    entity_id=event.entity_id,
                    operation=event.operation,
                    decision=event.decision.value,
                    reason=event.reason,
                )
            )
            await session.commit()


class InMemoryAuditSink:
    """Keep events in a list. Used by tests and the conformance harness."""

    def __init__(self):
        self.events: List[AuditEvent] = []

    async def emit(self, event: AuditEvent) -> None:
        self.events.append(event)

    def by_decision(self, decision) -> List[AuditEvent]:
        return [event for event in self.events if event.decision == decision]

    def clear(self) -> None:
        self.events.clear()


def build_sink(settings: Settings) -> AuditSink:
    """Build the sink selected by ``AUDIT_SINK``."""
    if settings.AUDIT_SINK == "redis":
        return RedisStreamAuditSink(get_redis, settings.AUDIT_REDIS_STREAM, settings.AUDIT_STREAM_MAXLEN)
    if settings.AUDIT_SINK == "database":
        return DatabaseAuditSink(get_session_factory())
    if settings.AUDIT_SINK == "memory":
        return InMemoryAuditSink()
    return LoggingAuditSink()
