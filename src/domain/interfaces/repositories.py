"""Repository interfaces for abstracting data access in the domain layer.

The domain layer talks to the domain ledger store through these interfaces
only. Concrete implementations live in the `infrastructure` layer; tests
substitute in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import List

from src.domain.entities.domain_record import DomainRecord
from src.domain.value_objects.search_query import QueryCursor, SearchFilter


class IDomainRepository(ABC):
    """Read-only access to the `domains` table.

    Implementations may raise any exception on store failure; callers are
    responsible for translating it before it reaches the HTTP layer.
    """

    @abstractmethod
    async def search(
        self, search_filter: SearchFilter, cursor: QueryCursor, limit: int
    ) -> List[DomainRecord]:
        """Returns up to `limit` records whose domain contains the filter.

        Rows are ordered by `first_seen DESC, last_seen DESC, id DESC` and
        bounded according to `cursor.shape`:

        - LATEST: no bound.
        - BEFORE_TIME: `first_seen <= cursor.from_time`.
        - BEFORE_TIME_AND_ID: as BEFORE_TIME, but rows at exactly
          `cursor.from_time` must also have `id < cursor.last_id`.

        Args:
            search_filter: The normalized substring filter.
            cursor: The keyset position to resume from.
            limit: Maximum number of rows (already clamped).

        Returns:
            The ordered page of matching records.
        """
        raise NotImplementedError

    @abstractmethod
    async def count_domains(self) -> int:
        """Returns the total number of rows."""
        raise NotImplementedError

    @abstractmethod
    async def count_etlds(self) -> int:
        """Returns the number of distinct eTLDs."""
        raise NotImplementedError
