"""Domain services for the ledger query API.

- DomainSearchService: keyset-paginated search (pagination engine)
- StatsCache / StatsRefresher: periodically refreshed aggregate counts
"""

from .search import DomainSearchService, SearchPage
from .stats import StatsCache, StatsRefresher

__all__ = ["DomainSearchService", "SearchPage", "StatsCache", "StatsRefresher"]
