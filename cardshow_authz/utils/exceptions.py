"""Custom exceptions for the application."""

from typing import Any, Dict, Optional

from cardshow_authz.constants.status_codes import MUST_SIGN_IN_MESSAGE, NOT_PERMITTED_MESSAGE


class BaseAuthzException(Exception):
    """Base exception for authentication/authorization errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class UnauthenticatedError(BaseAuthzException):
    """Raised when no principal can be resolved for the request."""

    def __init__(self, message: str = MUST_SIGN_IN_MESSAGE, **kwargs):
        kwargs.setdefault("error_code", "UNAUTHENTICATED")
        super().__init__(message, **kwargs)


class TokenExpiredError(UnauthenticatedError):
    """Raised when a session token has expired."""

    def __init__(self, message: str = "Token has expired", **kwargs):
        super().__init__(message, error_code="TOKEN_EXPIRED", **kwargs)


class InvalidTokenError(UnauthenticatedError):
    """Raised when a session token is invalid."""

    def __init__(self, message: str = "Invalid token", **kwargs):
        super().__init__(message, error_code="INVALID_TOKEN", **kwargs)


class UnauthorizedError(BaseAuthzException):
    """Raised when policy evaluation completed and the result is deny.

    The message never names the predicate that failed.
    """

    def __init__(self, message: str = NOT_PERMITTED_MESSAGE, **kwargs):
        kwargs.setdefault("error_code", "NOT_PERMITTED")
        super().__init__(message, **kwargs)


class EntityNotFoundError(UnauthorizedError):
    """Raised when the requested entity does not exist.

    Subclasses UnauthorizedError so callers without visibility receive the
    same signal whether or not the row exists.
    """

    def __init__(self, message: str = NOT_PERMITTED_MESSAGE, **kwargs):
        super().__init__(message, error_code="NOT_FOUND", **kwargs)


class EvaluationFault(BaseAuthzException):
    """Raised or recorded when a relationship data source cannot be reached.

    Evaluation treats it as deny; it is logged apart from legitimate denies.
    """

    def __init__(self, message: str = "Authorization data source unavailable", **kwargs):
        kwargs.setdefault("error_code", "EVALUATION_FAULT")
        super().__init__(message, **kwargs)


class PortUnavailableError(ConnectionError):
    """Raised by a data-access port that cannot reach its store."""


class NonRecursionViolation(RuntimeError):
    """Raised when a policy for an entity type asks for its own data-access port."""

    def __init__(self, entity_type: Any):
        self.entity_type = entity_type
        super().__init__(
            f"Relationship checks protecting '{getattr(entity_type, 'value', entity_type)}' "
            "may not query its own data-access port"
        )
