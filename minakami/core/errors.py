"""
Exception hierarchy for the Minakami tracking store.

Rule: every error carries a machine-readable `code` string so callers
(and HTTP clients) can branch on it without parsing English messages.

Storage errors propagate unchanged to the caller. The two warning classes
are never raised: the schema manager attaches them to its results and logs
them, and startup carries on.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class MinakamiException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class DatabaseConnectionError(MinakamiException):
    """The store was used before `initialize()` or could not be opened."""
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "DB_UNAVAILABLE"

    def __init__(self, message: str = "Database not initialized. Call initialize() first.",
                 original: Optional[BaseException] = None):
        self.original = original
        details = {"error": str(original)} if original is not None else {}
        super().__init__(message=message, details=details)


class QueryError(MinakamiException):
    """A SQL statement failed. `original` is the untouched driver error."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "QUERY_FAILED"

    def __init__(self, statement: str, original: Optional[BaseException] = None,
                 message: Optional[str] = None):
        self.statement = statement
        self.original = original
        super().__init__(
            message=message or f"Query failed: {original}",
            details={"statement": statement},
        )


class NotFoundError(MinakamiException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, entity: str, key: Any):
        self.code = f"{entity.upper()}_NOT_FOUND"
        super().__init__(
            message=f"{entity.replace('_', ' ').capitalize()} {key} not found.",
            details={"key": str(key)},
        )


class InvalidPayloadError(MinakamiException):
    """A collector payload is missing a field needed to store it."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_PAYLOAD"

    def __init__(self, message: str, field: str):
        self.field = field
        super().__init__(message=message, details={"field": field})


class MigrationWarning(UserWarning):
    """An additive column migration could not be applied."""

    def __init__(self, table: str, column: str, original: BaseException):
        self.table = table
        self.column = column
        self.original = original
        super().__init__(f"Could not add {table}.{column}: {original}")


class IndexWarning(UserWarning):
    """A performance index could not be created."""

    def __init__(self, index_name: str, original: BaseException):
        self.index_name = index_name
        self.original = original
        super().__init__(f"Could not create index {index_name}: {original}")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def minakami_exception_handler(request: Request, exc: MinakamiException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
