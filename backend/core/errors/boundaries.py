"""Error Boundary Mappers

Store implementations sit on a module boundary: SQLAlchemy exceptions are
mapped to `AppError` values there and never escape into the engines.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import wraps
from typing import Awaitable, Callable, Generic, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from core.logging import db_logger

from .types import AppError, ErrorCode, ErrorContext, Err, Ok, Result
from .builders import (
    db_connection_failed,
    duplicate_key,
    foreign_key_violation,
    internal_error,
    transaction_failed,
)

T = TypeVar("T")

log = db_logger()


class ErrorMapper(ABC, Generic[T]):
    """Abstract base for error mappers at module boundaries."""

    @abstractmethod
    def map_error(self, error: AppError) -> AppError:
        """Map internal error to boundary error."""
        pass

    @abstractmethod
    def map_exception(self, exc: Exception) -> AppError:
        """Map an exception raised inside the boundary."""
        pass

    def map_result(self, result: Result[T, AppError]) -> Result[T, AppError]:
        match result:
            case Ok(_):
                return result
            case Err(e):
                return Err(self.map_error(e))


class DatabaseErrorMapper(ErrorMapper[T]):
    """Maps SQLAlchemy exceptions to persistence error codes."""

    def __init__(self, origin: str = "database"):
        self.origin = origin

    def map_error(self, error: AppError) -> AppError:
        if error.context.origin:
            return error
        return error.with_context(origin=self.origin)

    def map_exception(self, exc: Exception) -> AppError:
        if isinstance(exc, IntegrityError):
            return self._map_integrity_error(exc)
        if isinstance(exc, OperationalError):
            return self._map_operational_error(exc)
        if isinstance(exc, SQLAlchemyError):
            return transaction_failed(str(exc), origin=self.origin, cause=exc).error

        return internal_error(
            f"Database error: {exc}",
            origin=self.origin,
            cause=exc,
        ).error

    def _map_integrity_error(self, exc: IntegrityError) -> AppError:
        message = str(exc.orig) if exc.orig else str(exc)

        if "duplicate key" in message.lower() or "unique constraint" in message.lower():
            return duplicate_key(
                entity="record",
                field="unknown",
                value="unknown",
                origin=self.origin,
            ).error

        if "foreign key" in message.lower():
            return foreign_key_violation(
                entity="record",
                reference="unknown",
                origin=self.origin,
            ).error

        return AppError(
            code=ErrorCode.E4013_CHECK_CONSTRAINT,
            message=f"Constraint violation: {message}",
            context=ErrorContext(origin=self.origin),
            cause=exc,
        )

    def _map_operational_error(self, exc: OperationalError) -> AppError:
        message = str(exc.orig) if exc.orig else str(exc)

        if "connection" in message.lower() or "connect" in message.lower():
            return db_connection_failed(message, origin=self.origin).error

        return transaction_failed(message, origin=self.origin, cause=exc).error


def map_errors(mapper: ErrorMapper[T]):
    """Decorator to map errors at async function boundaries.

    Usage:
        @map_errors(DatabaseErrorMapper("vocab_study_store.save"))
        async def save(self, record: StudyRecord) -> Result[StudyRecord, AppError]:
            ...
    """
    def decorator(fn: Callable[..., Awaitable[Result[T, AppError]]]):
        @wraps(fn)
        async def wrapper(*args, **kwargs) -> Result[T, AppError]:
            try:
                result = await fn(*args, **kwargs)
                return mapper.map_result(result)
            except SQLAlchemyError as e:
                error = mapper.map_exception(e)
                log.warning(
                    "store_operation_failed",
                    origin=error.context.origin,
                    error_code=error.code.name,
                    error=str(e),
                )
                return Err(error)
        return wrapper
    return decorator


def map_db_errors(origin: str = "database"):
    """Convenience decorator for database error mapping.

    Usage:
        @map_db_errors("learner_store.get_by_id")
        async def get_by_id(self, user_id: int) -> Result[UserProgress, AppError]:
            ...
    """
    return map_errors(DatabaseErrorMapper(origin))
