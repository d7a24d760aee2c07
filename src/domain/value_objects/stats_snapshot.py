"""Aggregate counts served by the stats endpoint."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    """Immutable pair of aggregate counts.

    Instances are swapped wholesale by the refresher, so a reader always sees
    both counts from the same refresh.
    """

    domain_count: int = 0
    etld_count: int = 0
    refreshed_at: Optional[datetime] = None
