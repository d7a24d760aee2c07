from __future__ import annotations

"""Response Pydantic models for the public query API."""

from typing import List

from pydantic import BaseModel, Field

from src.domain.entities.domain_record import DomainRecord
from src.domain.services.search import SearchPage
from src.domain.value_objects.stats_snapshot import StatsSnapshot


class QueryResult(BaseModel):
    """Serialised representation of :class:`~src.domain.entities.domain_record.DomainRecord`."""

    domain: str
    etld: str
    first_seen: int
    last_seen: int
    id: int = Field(ge=0)

    @classmethod
    def from_entity(cls, record: DomainRecord) -> "QueryResult":
        return cls(
            domain=record.domain,
            etld=record.etld,
            first_seen=record.first_seen,
            last_seen=record.last_seen,
            id=record.id,
        )

    model_config = {
        "from_attributes": True
    }


class QueryResponse(BaseModel):
    """One page of search results.

    `last` is the smallest `id` on the page (2**64 - 1 when the page is empty).
    """

    results: List[QueryResult]
    last: int = Field(ge=0)

    @classmethod
    def from_page(cls, page: SearchPage) -> "QueryResponse":
        return cls(
            results=[QueryResult.from_entity(record) for record in page.results],
            last=page.last,
        )


class StatsResponse(BaseModel):
    domains: int
    etlds: int

    @classmethod
    def from_snapshot(cls, snapshot: StatsSnapshot) -> "StatsResponse":
        return cls(domains=snapshot.domain_count, etlds=snapshot.etld_count)
