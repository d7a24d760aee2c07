"""
Domain search endpoint.

Thin HTTP layer over `DomainSearchService`: it reads the query string,
delegates, and serializes the page. Admission control runs as a route
dependency before the handler body.

Cursor encoding: `from_time` + `last_id`. The older `offset` parameter is not
part of this protocol and is ignored if sent.
"""

import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from structlog import get_logger

from src.adapters.api.v1.schemas import QueryResponse
from src.core.rate_limit import enforce_admission
from src.infrastructure.dependency_injection.ledger_dependencies import DomainSearchServiceDep

logger = get_logger(__name__)
router = APIRouter()

_INTEGER = re.compile(r"^[+-]?\d+$")


def parse_int_param(raw: Optional[str]) -> Optional[int]:
    """Lenient integer parsing for query parameters.

    Missing or malformed values are treated as absent rather than rejected.
    """
    if raw is None:
        return None
    raw = raw.strip()
    if not _INTEGER.match(raw):
        return None
    return int(raw)


@router.get(
    "",
    response_model=QueryResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(enforce_admission)],
    summary="Search observed domains",
    description=(
        "Substring search over domain names, newest first, with keyset "
        "pagination via from_time and last_id."
    ),
    responses={
        200: {"description": "A page of matching domains"},
        400: {"description": "Invalid query length or query failure (plain text)"},
        429: {"description": "Throttled (plain text)"},
    },
)
async def query_domains(
    search_service: DomainSearchServiceDep,
    query: Optional[str] = Query(None, description="Substring filter, 3-255 characters"),
    from_time: Optional[str] = Query(None, description="Only records first seen at or before this time"),
    last_id: Optional[str] = Query(None, description="Tie-break for rows at from_time: only smaller ids"),
    limit: Optional[str] = Query(None, description="Page size, 1-1000 (default 1000)"),
) -> QueryResponse:
    """Run one page of a domain search.

    Raises:
        InvalidQueryError: Filter too short or too long (400).
        QueryFailedError: Store failure or timeout (400, opaque message).
    """
    page = await search_service.search(
        query,
        from_time=parse_int_param(from_time),
        last_id=parse_int_param(last_id),
        limit=parse_int_param(limit),
    )
    return QueryResponse.from_page(page)
