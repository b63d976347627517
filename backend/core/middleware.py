"""Request Middleware for Logging and Tracing

Binds a correlation ID (and the learner, when the request names one) to the
structlog context for the lifetime of each request, logs start/finish with
timing, and flags slow requests.
"""
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from core.logging import (
    generate_correlation_id,
    bind_context,
    clear_context,
    api_logger,
)

log = api_logger()

# Path params are not resolved until routing, after middleware.
_LEARNER_PATH = re.compile(r"/learners/(\d+)(?:/|$)")


def learner_id_from(request: Request) -> str | None:
    """The learner a request is about, from `?user_id=` or a `/learners/{id}` path."""
    user_id = request.query_params.get("user_id")
    if user_id:
        return user_id
    match = _LEARNER_PATH.search(request.url.path)
    return match.group(1) if match else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs requests/responses and manages correlation context."""

    def __init__(self, app, slow_threshold_ms: float = 1000):
        super().__init__(app)
        self.slow_threshold_ms = slow_threshold_ms

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or generate_correlation_id()

        clear_context()
        bind_context(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )
        user_id = learner_id_from(request)
        if user_id:
            bind_context(user_id=user_id)

        start = time.perf_counter()
        log.info("request_started")

        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000

            response.headers["X-Correlation-ID"] = correlation_id

            status = response.status_code
            log_method = log.info if status < 400 else (log.warning if status < 500 else log.error)
            log_method(
                "request_completed",
                status=status,
                duration_ms=round(duration_ms, 2),
            )
            if duration_ms > self.slow_threshold_ms:
                log.warning(
                    "slow_request",
                    duration_ms=round(duration_ms, 2),
                    threshold_ms=self.slow_threshold_ms,
                )

            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            log.exception(
                "request_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                duration_ms=round(duration_ms, 2),
            )
            raise
        finally:
            clear_context()
