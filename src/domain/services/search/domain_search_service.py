"""Keyset-paginated search over the domain ledger.

This service turns a raw filter, an optional cursor and a requested page size
into a single store query, and derives the cursor for the next page from the
rows that came back.

Pagination contract:
    Results are ordered by (first_seen, last_seen, id), all descending. The
    response carries `last`, the smallest id on the page. To continue, the
    caller sends `last` as `last_id` and the `first_seen` of the final row as
    `from_time`. Rows at that timestamp are then limited to ids below `last`;
    older rows are not filtered by id. Because `from_time` is compared with
    `<=`, a caller that omits `last_id` sees the boundary rows again; callers
    are expected to de-duplicate by id.

Error boundary:
    Validation failures raise `InvalidQueryError` before the store is touched.
    Every failure coming out of the store (driver errors, timeouts) is logged
    here with its detail and replaced by an opaque `QueryFailedError`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from structlog import get_logger

from src.core.exceptions import QueryFailedError
from src.domain.entities.domain_record import DomainRecord
from src.domain.interfaces.repositories import IDomainRepository
from src.domain.value_objects.search_query import (
    NO_LAST_ID,
    QueryCursor,
    SearchFilter,
    clamp_page_size,
)

logger = get_logger(__name__)

DEFAULT_QUERY_TIMEOUT_SECONDS = 5.0


@dataclass
class SearchPage:
    """One page of search results plus the `last` cursor component."""

    results: List[DomainRecord] = field(default_factory=list)
    last: int = NO_LAST_ID

    @classmethod
    def from_rows(cls, rows: List[DomainRecord]) -> "SearchPage":
        last = min((row.id for row in rows), default=NO_LAST_ID)
        return cls(results=list(rows), last=last)


class DomainSearchService:
    """Pagination engine for the query endpoint."""

    def __init__(
        self,
        repository: IDomainRepository,
        timeout_seconds: float = DEFAULT_QUERY_TIMEOUT_SECONDS,
    ):
        self.repository = repository
        self.timeout_seconds = timeout_seconds

    async def search(
        self,
        query: Optional[str],
        from_time: Optional[int] = None,
        last_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> SearchPage:
        """Run one search request.

        Args:
            query: Raw filter text as sent by the caller.
            from_time: Upper bound (inclusive) on `first_seen`, if any.
            last_id: Exclusive upper bound on `id` for rows at `from_time`;
                ignored without `from_time`.
            limit: Requested page size; clamped to 1..1000.

        Returns:
            SearchPage: ordered rows and the smallest id among them.

        Raises:
            InvalidQueryError: If the filter fails validation.
            QueryFailedError: If the store query fails or exceeds the timeout.
        """
        search_filter = SearchFilter.parse(query)
        cursor = QueryCursor(from_time=from_time, last_id=last_id)
        page_size = clamp_page_size(limit)

        try:
            rows = await asyncio.wait_for(
                self.repository.search(search_filter, cursor, page_size),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                "query_timeout",
                query=search_filter.value,
                cursor_shape=cursor.shape.value,
                timeout_seconds=self.timeout_seconds,
            )
            raise QueryFailedError() from None
        except Exception as exc:
            logger.error(
                "query_failed",
                query=search_filter.value,
                cursor_shape=cursor.shape.value,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise QueryFailedError() from exc

        page = SearchPage.from_rows(rows)
        logger.debug(
            "query_completed",
            query=search_filter.value,
            cursor_shape=cursor.shape.value,
            limit=page_size,
            returned=len(page.results),
            last=page.last,
        )
        return page
