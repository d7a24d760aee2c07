"""Domain value objects for the ledger query API.

Value objects are immutable objects that describe domain concepts by their
attributes rather than their identity.
"""

from .search_query import (
    MAX_CURSOR_VALUE,
    MAX_PAGE_SIZE,
    NO_LAST_ID,
    CursorShape,
    QueryCursor,
    SearchFilter,
    clamp_page_size,
)
from .stats_snapshot import StatsSnapshot

__all__ = [
    "MAX_CURSOR_VALUE",
    "MAX_PAGE_SIZE",
    "NO_LAST_ID",
    "CursorShape",
    "QueryCursor",
    "SearchFilter",
    "StatsSnapshot",
    "clamp_page_size",
]
