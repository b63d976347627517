"""FastAPI Exception Handlers

Bridges Result-returning study operations and FastAPI: an `Err` is raised as
`AppErrorException` at the route and rendered here as a structured JSON error
with the status implied by its code.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger

from .types import AppError, ErrorCode, ErrorContext, Result, T

log = get_logger("errors.handlers")


class AppErrorException(Exception):
    """Exception wrapper for AppError, for code paths that cannot return a Result."""

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))


def result_to_response(error: AppError) -> JSONResponse:
    """Convert AppError to FastAPI JSONResponse."""
    status_code = error.code.http_status

    log_method = log.warning if status_code < 500 else log.error
    log_method(
        "error_response",
        error_code=error.code.name,
        error_code_num=error.code.value,
        message=error.message,
        category=error.code.category,
        correlation_id=error.context.correlation_id,
        origin=error.context.origin,
        metadata=error.metadata,
    )

    return JSONResponse(
        status_code=status_code,
        content=error.to_dict(),
    )


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    error = exc.error.with_context(
        request_id=request.headers.get("X-Request-ID"),
        correlation_id=request.headers.get("X-Correlation-ID"),
    )
    return result_to_response(error)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    status_code = exc.status_code
    code_map = {
        400: ErrorCode.E2000_VALIDATION_GENERIC,
        404: ErrorCode.E4010_NOT_FOUND,
        409: ErrorCode.E5000_BUSINESS_GENERIC,
        422: ErrorCode.E2000_VALIDATION_GENERIC,
    }

    code = code_map.get(status_code)
    if code is None:
        code = ErrorCode.E9001_UNEXPECTED_ERROR if status_code >= 500 else ErrorCode.E9000_INTERNAL_GENERIC

    error = AppError(
        code=code,
        message=str(exc.detail) if exc.detail else f"HTTP {status_code}",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID", ""),
            origin="http",
        ),
    )

    return result_to_response(error)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures with per-field detail."""
    fields = [
        {
            "field": ".".join(str(loc) for loc in err.get("loc", [])),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "value_error"),
        }
        for err in exc.errors()
    ]
    error = AppError(
        code=ErrorCode.E2000_VALIDATION_GENERIC,
        message="Request validation failed",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID", ""),
            origin="request_validation",
        ),
        metadata={"fields": fields},
    )
    return result_to_response(error)


async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    error = AppError(
        code=ErrorCode.E9001_UNEXPECTED_ERROR,
        message="An unexpected error occurred",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID", ""),
            origin="unhandled",
        ),
        cause=exc,
    )

    log.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        correlation_id=error.context.correlation_id,
    )

    return result_to_response(error)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def raise_result(result: Result[T, AppError]) -> None:
    """Raise if Result is Err, otherwise return.

    Usage:
        result = await service.grade_attempt(item_id, record_id, answer)
        raise_result(result)
        return {"message": result.unwrap()}
    """
    if result.is_err():
        raise AppErrorException(result.unwrap_err())
