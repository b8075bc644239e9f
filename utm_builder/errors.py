"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. Validators and services return
them inside ``Err`` results; the HTTP layer raises them through
``Result.unwrap()`` and the global handler converts them to JSON.

Non-AppError exceptions bubble up as 500s.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class ErrorKind(str, Enum):
    INVALID_URL = "INVALID_URL"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INVALID_KEY = "INVALID_KEY"
    INVALID_UTM_VALUE = "INVALID_UTM_VALUE"
    INVALID_QR_DATA = "INVALID_QR_DATA"
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    API_ERROR = "API_ERROR"
    PERSISTENCE_CORRUPT = "PERSISTENCE_CORRUPT"


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"
    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.kind is not None:
            payload["kind"] = self.kind.value
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.field == other.field
            and self.details == other.details
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.field))


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class InvalidUrlError(ValidationError):
    error_code = "invalid_url"
    kind = ErrorKind.INVALID_URL


class DuplicateKeyError(ValidationError):
    error_code = "duplicate_key"
    kind = ErrorKind.DUPLICATE_KEY


class InvalidKeyError(ValidationError):
    error_code = "invalid_key"
    kind = ErrorKind.INVALID_KEY


class InvalidUtmValueError(ValidationError):
    error_code = "invalid_utm_value"
    kind = ErrorKind.INVALID_UTM_VALUE


class InvalidQrDataError(ValidationError):
    error_code = "invalid_qr_data"
    kind = ErrorKind.INVALID_QR_DATA


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class PersistenceCorruptError(AppError):
    """Raised by storage backends when a stored payload cannot be read.

    Internal only: the history repository recovers from it and it is never
    surfaced to a caller.
    """

    error_code = "persistence_corrupt"
    kind = ErrorKind.PERSISTENCE_CORRUPT


_SHORTEN_STATUS = {
    ErrorKind.INVALID_URL: 400,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.NETWORK_ERROR: 503,
    ErrorKind.API_ERROR: 502,
}


class ShortenError(AppError):
    """Failure returned by a URL shortener provider or the shortener service."""

    error_code = "shorten_failed"

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        *,
        details: Optional[Any] = None,
    ) -> None:
        if kind not in _SHORTEN_STATUS:
            raise ValueError(f"{kind!r} is not a shortener error kind")
        super().__init__(message, details=details)
        self.kind = kind
        self.status_code = _SHORTEN_STATUS[kind]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShortenError):
            return NotImplemented
        return self.kind == other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred.", "code": "internal_error"},
        )
