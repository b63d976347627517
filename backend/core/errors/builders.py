"""Error Builders

Constructors for the typed errors raised by stores and engines. Each builder
returns an `Err` carrying an `AppError` with its code, origin and ids.
"""
from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Persistence Errors (E4xxx)
# =============================================================================

def db_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E4000_DATABASE_GENERIC,
    table: str | None = None,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    meta = {"table": table, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
        cause=cause,
    ))


def not_found(
    entity: str,
    id: int | str | None = None,
    origin: str = "",
) -> Err[AppError]:
    msg = f"{entity} not found"
    if id is not None:
        msg += f": {id}"
    return db_error(
        msg,
        code=ErrorCode.E4010_NOT_FOUND,
        entity=entity,
        entity_id=str(id) if id is not None else None,
        origin=origin,
    )


def duplicate_key(
    entity: str, field: str, value: str, origin: str = ""
) -> Err[AppError]:
    return db_error(
        f"{entity} with {field}='{value}' already exists",
        code=ErrorCode.E4011_DUPLICATE_KEY,
        entity=entity,
        field=field,
        value=value,
        origin=origin,
    )


def foreign_key_violation(
    entity: str, reference: str, origin: str = ""
) -> Err[AppError]:
    return db_error(
        f"Referenced {reference} does not exist for {entity}",
        code=ErrorCode.E4012_FOREIGN_KEY_VIOLATION,
        entity=entity,
        reference=reference,
        origin=origin,
    )


def db_connection_failed(reason: str = "", origin: str = "") -> Err[AppError]:
    msg = "Database connection failed"
    if reason:
        msg += f": {reason}"
    return db_error(msg, code=ErrorCode.E4001_CONNECTION_FAILED, origin=origin)


def transaction_failed(
    reason: str = "",
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Persistence failure: a write (or the read backing it) did not go through."""
    msg = "Database transaction failed"
    if reason:
        msg += f": {reason}"
    return db_error(
        msg,
        code=ErrorCode.E4003_TRANSACTION_FAILED,
        origin=origin,
        cause=cause,
        **metadata,
    )


# =============================================================================
# Business Logic Errors (E5xxx)
# =============================================================================

def invariant_violated(invariant: str, origin: str = "", **metadata) -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E5004_INVARIANT_VIOLATED,
        message=f"Invariant violated: {invariant}",
        context=ErrorContext(origin=origin),
        metadata={"invariant": invariant, **metadata},
    ))


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================

def internal_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata=metadata,
        cause=cause,
    ))
