"""HTTP status codes and generic messages for authorization outcomes."""

from enum import IntEnum


class AuthzStatus(IntEnum):
    """Status codes for authorization outcomes."""

    # Authentication
    MUST_SIGN_IN = 401

    # Authorization; missing entities share the deny code for non-admins
    NOT_PERMITTED = 403
    ENTITY_NOT_FOUND = 404

    # Relationship data source unreachable
    EVALUATION_DEGRADED = 503


# Generic messages surfaced to callers
MUST_SIGN_IN_MESSAGE = "must sign in"
NOT_PERMITTED_MESSAGE = "not permitted"
EVALUATION_DEGRADED_MESSAGE = "authorization temporarily unavailable"
