"""Result-based Error Handling

Every store and study operation returns `Result[T, AppError]`:

    from core.errors import Ok, Err, Result, AppError, not_found

    async def get_by_id(self, item_id: int) -> Result[Item, AppError]:
        row = await self._db.get(Vocab, item_id)
        if row is None:
            return not_found("Item", item_id, origin="item_store.get_by_id")
        return Ok(to_item(row))

    match await items.get_by_id(7):
        case Ok(item):
            ...
        case Err(error):
            log.warning("lookup_failed", error_code=error.code.name)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    db_error,
    not_found,
    duplicate_key,
    foreign_key_violation,
    db_connection_failed,
    transaction_failed,
    invariant_violated,
    internal_error,
)

from .boundaries import (
    ErrorMapper,
    DatabaseErrorMapper,
    map_errors,
    map_db_errors,
)

from .handlers import (
    AppErrorException,
    register_error_handlers,
    result_to_response,
    raise_result,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "db_error",
    "not_found",
    "duplicate_key",
    "foreign_key_violation",
    "db_connection_failed",
    "transaction_failed",
    "invariant_violated",
    "internal_error",
    "ErrorMapper",
    "DatabaseErrorMapper",
    "map_errors",
    "map_db_errors",
    "AppErrorException",
    "register_error_handlers",
    "result_to_response",
    "raise_result",
]
