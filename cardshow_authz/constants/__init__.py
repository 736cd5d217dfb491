"""Constants package."""

from .entities import (
    ACTIVE_PARTICIPATION_STATUSES,
    PUBLIC_READABLE,
    EntityType,
    Operation,
    ParticipationRole,
    ParticipationStatus,
    is_public_read,
)
from .status_codes import (
    EVALUATION_DEGRADED_MESSAGE,
    MUST_SIGN_IN_MESSAGE,
    NOT_PERMITTED_MESSAGE,
    AuthzStatus,
)

__all__ = [
    "EntityType",
    "Operation",
    "ParticipationRole",
    "ParticipationStatus",
    "PUBLIC_READABLE",
    "ACTIVE_PARTICIPATION_STATUSES",
    "is_public_read",
    "AuthzStatus",
    "MUST_SIGN_IN_MESSAGE",
    "NOT_PERMITTED_MESSAGE",
    "EVALUATION_DEGRADED_MESSAGE",
]
