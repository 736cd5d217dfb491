"""Structured authorization audit events."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class AuditDecision(str, Enum):
    """Kinds of decisions that are forwarded to the audit sink."""

    DENY = "deny"
    ADMIN_OVERRIDE = "admin_override"
    EVALUATION_ERROR = "evaluation_error"


@dataclass(frozen=True)
class AuditEvent:
    """One append-only audit record."""

    principal_id: Optional[str]
    entity_type: str
    operation: str
    decision: AuditDecision
    entity_id: Optional[str] = None
    reason: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "principal_id": self.principal_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "operation": self.operation,
            "decision": self.decision.value,
            "reason": self.reason,
        }
