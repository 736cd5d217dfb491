"""Global exception handler middleware.

Every authorization failure reaches the client as one of a few generic
messages. Which predicate failed, and whether a hidden row exists, is only
ever logged.
"""

import logging
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cardshow_authz.constants.status_codes import (
    EVALUATION_DEGRADED_MESSAGE,
    MUST_SIGN_IN_MESSAGE,
    NOT_PERMITTED_MESSAGE,
    AuthzStatus,
)
from cardshow_authz.utils.exceptions import (
    BaseAuthzException,
    EntityNotFoundError,
    EvaluationFault,
    NonRecursionViolation,
    UnauthenticatedError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

# Most specific first: EntityNotFoundError is an UnauthorizedError
PUBLIC_ERRORS: list[tuple[type[BaseAuthzException], int, str, str]] = [
    (UnauthenticatedError, AuthzStatus.MUST_SIGN_IN, MUST_SIGN_IN_MESSAGE, "UNAUTHENTICATED"),
    (EntityNotFoundError, AuthzStatus.ENTITY_NOT_FOUND, "not found", "NOT_FOUND"),
    (UnauthorizedError, AuthzStatus.NOT_PERMITTED, NOT_PERMITTED_MESSAGE, "NOT_PERMITTED"),
    (EvaluationFault, AuthzStatus.EVALUATION_DEGRADED, EVALUATION_DEGRADED_MESSAGE, "EVALUATION_DEGRADED"),
]

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHENTICATED",
    403: "NOT_PERMITTED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "VALIDATION_ERROR",
}


def error_response(status_code: int, message: str, error_code: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error_code": error_code},
        headers=headers,
    )


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": getattr(request.state, "request_id", None),
    }


class ExceptionHandlers:
    """Centralized exception handlers for the application."""

    @staticmethod
    async def authz_exception_handler(request: Request, exc: BaseAuthzException) -> JSONResponse:
        """Map authorization exceptions to generic responses; details go to the log only."""
        for exc_type, status_code, message, error_code in PUBLIC_ERRORS:
            if isinstance(exc, exc_type):
                break
        else:
            status_code, message, error_code = 500, "Internal server error", "INTERNAL_ERROR"

        logger.log(
            logging.ERROR if status_code >= 500 else logging.INFO,
            f"{type(exc).__name__}: {exc.message}",
            extra={"error_code": exc.error_code, "details": exc.details, **_request_context(request)},
        )

        headers = {"WWW-Authenticate": "Bearer"} if status_code == AuthzStatus.MUST_SIGN_IN else None
        return error_response(status_code, message, error_code, headers=headers)

    @staticmethod
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed path, query or body."""
        logger.warning(
            f"Request validation failed: {exc.errors()}",
            extra=_request_context(request),
        )
        return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", "VALIDATION_ERROR")

    @staticmethod
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        logger.warning(
            f"HTTP {exc.status_code}: {exc.detail}",
            extra={"status_code": exc.status_code, **_request_context(request)},
        )
        return error_response(exc.status_code, exc.detail, HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"))

    @staticmethod
    async def non_recursion_handler(request: Request, exc: NonRecursionViolation) -> JSONResponse:
        """A policy reached for its own entity's port. Always a programming error."""
        logger.critical(
            str(exc),
            extra={
                "event": "non_recursion_violation",
                "entity_type": getattr(exc.entity_type, "value", exc.entity_type),
                **_request_context(request),
            },
            exc_info=exc,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR")

    @staticmethod
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unexpected {type(exc).__name__}: {exc}",
            extra=_request_context(request),
            exc_info=exc,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR")


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with the FastAPI app."""
    handlers = ExceptionHandlers()
    app.add_exception_handler(BaseAuthzException, handlers.authz_exception_handler)
    app.add_exception_handler(RequestValidationError, handlers.request_validation_handler)
    app.add_exception_handler(HTTPException, handlers.http_exception_handler)
    app.add_exception_handler(NonRecursionViolation, handlers.non_recursion_handler)
    app.add_exception_handler(Exception, handlers.general_exception_handler)
