from __future__ import annotations

"""Structured exception hierarchy for the ledger query API.

Each exception carries a machine-readable `code` for logging and a
human-readable `message` that is safe to return to the caller. Store-level
failures never reach the HTTP layer directly; they are translated into
`QueryFailedError` (search path) or `StatsRefreshError` (background refresh)
at the boundary with the store accessor.
"""

from typing import Final

__all__: Final = [
    "LedgerError",
    "InvalidQueryError",
    "QueryFailedError",
    "ThrottledError",
    "StatsRefreshError",
    "QUERY_TOO_LONG",
    "QUERY_TOO_SHORT",
    "QUERY_FAILED",
    "THROTTLED",
]

QUERY_TOO_LONG: Final = "Query too long"
QUERY_TOO_SHORT: Final = "Query must be at least 3 characters"
QUERY_FAILED: Final = "Query failed :("
THROTTLED: Final = "Throttled"


class LedgerError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    # A concise, structured representation used by loggers & FastAPI handlers.
    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Search path errors (map to 400 Bad Request)
# ---------------------------------------------------------------------------


class InvalidQueryError(LedgerError):
    """Raised when the caller-supplied filter fails its length constraints.

    The message is specific ("Query too long", ...) and is returned to the
    caller verbatim. Maps to a `400 Bad Request`.
    """

    def __init__(self, message: str, code: str = "invalid_query"):
        super().__init__(message, code)


class QueryFailedError(LedgerError):
    """Raised when the underlying store read failed or timed out.

    The message is opaque; the real cause is logged where the
    failure is caught. Maps to a `400 Bad Request`.
    """

    def __init__(self, message: str = QUERY_FAILED, code: str = "query_failed"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Admission control (maps to 429 Too Many Requests)
# ---------------------------------------------------------------------------


class ThrottledError(LedgerError):
    """Raised when admission control rejects a request."""

    def __init__(self, message: str = THROTTLED, code: str = "throttled"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Background errors (logged only)
# ---------------------------------------------------------------------------


class StatsRefreshError(LedgerError):
    """Raised when an aggregate refresh query fails.

    Never surfaced to a caller: the refresh loop logs it and keeps the
    previous snapshot.
    """

    def __init__(self, message: str = "Stats refresh failed", code: str = "stats_refresh_failed"):
        super().__init__(message, code)
