"""Application errors and the JSON error envelope.

Every error leaves the API as::

    {"error": "NO_DATA", "message": "Analysis unavailable", "status": 503, "details": {...}}

``details`` is omitted when empty.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .logging import get_logger


logger = get_logger("error")


class AppException(Exception):
    """Base application error carrying its HTTP status and error code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.status_code = status_code or self.status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
            "status": self.status_code,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidSymbolError(AppException):
    """Symbol missing or malformed after normalisation."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_SYMBOL"
    message = "A ticker symbol is required"


class PriceFeedError(AppException):
    """The upstream price feed failed or timed out."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "PRICE_FEED_UNAVAILABLE"
    message = "Price feed temporarily unavailable"


class NoDataError(AppException):
    """No current price could be obtained for a symbol."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "NO_DATA"
    message = "Analysis unavailable"


class StoreError(AppException):
    """A write to the analysis store failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "STORE_ERROR"
    message = "Analysis store operation failed"


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def register_exception_handlers(app: FastAPI) -> None:
    """Render AppException subclasses and unhandled errors as the JSON envelope."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning(
                f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
                extra={"error_code": exc.error_code, "details": exc.details},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers={"X-Request-ID": _request_id(request)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            extra={"path": request.url.path, "method": request.method},
        )

        from .config import settings

        # Internals stay hidden outside debug mode
        message = str(exc) if settings.debug else "An unexpected error occurred"

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "INTERNAL_ERROR", "message": message, "status": 500},
            headers={"X-Request-ID": _request_id(request)},
        )
