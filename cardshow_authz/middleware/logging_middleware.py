"""Request logging middleware."""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REDACTED_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log record per request, tagged with request id and principal.

    Bodies are never logged: they carry entity rows the reader of the log
    may not be allowed to see.
    """

    def __init__(self, app: Any, log_headers: bool = False, skip_paths: frozenset[str] = frozenset({"/health"})):
        super().__init__(app)
        self.log_headers = log_headers
        self.skip_paths = skip_paths

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.skip_paths:
            return await call_next(request)

        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        if self.log_headers:
            context["headers"] = {
                key: "[REDACTED]" if key.lower() in REDACTED_HEADERS else value
                for key, value in request.headers.items()
            }

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {request.url.path} failed",
                extra={"event": "request_failed", "error_type": type(e).__name__, **context},
                exc_info=True,
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        principal = getattr(request.state, "principal", None)

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code in (401, 403):
            # Denies are already logged by the evaluator with their reason
            level = logging.INFO
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "event": "request_completed",
                "status_code": response.status_code,
                "principal_id": principal.id if principal else None,
                "elapsed_ms": round(elapsed_ms, 2),
                **context,
            },
        )

        response.headers["X-Request-ID"] = request_id
        return response
