from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into plain-text HTTP responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    InvalidQueryError,
    LedgerError,
    QueryFailedError,
    ThrottledError,
)

__all__ = [
    "invalid_query_error_handler",
    "query_failed_error_handler",
    "throttled_error_handler",
    "ledger_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def invalid_query_error_handler(request: Request, exc: InvalidQueryError) -> PlainTextResponse:
    """Handles `InvalidQueryError`, returning a `400 Bad Request`.

    The validation message is specific and safe to expose.

    Args:
        request: The incoming `Request` object.
        exc: The `InvalidQueryError` instance.

    Returns:
        A `PlainTextResponse` with a 400 status code and the validation message.
    """
    return PlainTextResponse(exc.message, status_code=status.HTTP_400_BAD_REQUEST)


async def query_failed_error_handler(request: Request, exc: QueryFailedError) -> PlainTextResponse:
    """Handles `QueryFailedError`, returning a `400 Bad Request`.

    The underlying store error was logged where it was caught; only the
    opaque message leaves the process.

    Args:
        request: The incoming `Request` object.
        exc: The `QueryFailedError` instance.

    Returns:
        A `PlainTextResponse` with a 400 status code and a generic message.
    """
    return PlainTextResponse(exc.message, status_code=status.HTTP_400_BAD_REQUEST)


async def throttled_error_handler(request: Request, exc: ThrottledError) -> PlainTextResponse:
    """Handles `ThrottledError`, returning a `429 Too Many Requests`."""
    return PlainTextResponse(exc.message, status_code=status.HTTP_429_TOO_MANY_REQUESTS)


async def ledger_error_handler(request: Request, exc: LedgerError) -> PlainTextResponse:
    """Handles the base `LedgerError`, returning a `500 Internal Server Error`.

    Fallback for application errors without a more specific handler.
    """
    logger.error(
        "unhandled_application_error",
        error=exc.code,
        client_ip=_client_host(request),
        path=request.url.path,
    )
    return PlainTextResponse(
        "Internal server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    app.add_exception_handler(InvalidQueryError, invalid_query_error_handler)
    app.add_exception_handler(QueryFailedError, query_failed_error_handler)
    app.add_exception_handler(ThrottledError, throttled_error_handler)
    app.add_exception_handler(LedgerError, ledger_error_handler)
