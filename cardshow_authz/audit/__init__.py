"""Authorization audit trail."""

from .emitter import AuditEmitter, get_audit_emitter, reset_audit_emitter
from .events import AuditDecision, AuditEvent
from .sinks import (
    AuditSink,
    DatabaseAuditSink,
    InMemoryAuditSink,
    LoggingAuditSink,
    RedisStreamAuditSink,
    build_sink,
)

__all__ = [
    "AuditDecision",
    "AuditEmitter",
    "AuditEvent",
    "AuditSink",
    "DatabaseAuditSink",
    "InMemoryAuditSink",
    "LoggingAuditSink",
    "RedisStreamAuditSink",
    "build_sink",
    "get_audit_emitter",
    "reset_audit_emitter",
]
