"""
Rate Limiting Domain Services

AdmissionController decides, per client key, whether a request may proceed.
It owns the table of token buckets and is passed explicitly to whoever needs
it (the HTTP dependency, tests), rather than living in a module global.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional

from structlog import get_logger

from src.core.exceptions import ThrottledError

from .entities import TokenBucket
from .value_objects import RateLimitPolicy

logger = get_logger(__name__)


class AdmissionController:
    """
    Per-client token bucket admission control.

    One bucket per distinct key (client IP), created lazily on first use and
    sharing a single `RateLimitPolicy`. A decision costs one dict lookup and
    one bucket update, independent of the number of tracked clients.

    The bucket table is unbounded by default. When `max_clients` is set, the
    least recently used bucket is dropped once the table grows past it; a
    dropped client starts again with a full bucket.
    """

    def __init__(
        self,
        policy: Optional[RateLimitPolicy] = None,
        clock: Callable[[], float] = time.monotonic,
        enabled: bool = True,
        max_clients: int = 0,
    ):
        """
        Args:
            policy: Bucket parameters; defaults to burst 5, refill 1/sec.
            clock: Monotonic time source in seconds, injectable for tests.
            enabled: When False every request is admitted without touching
                the table.
            max_clients: LRU bound on the bucket table; 0 means unbounded.
        """
        if max_clients < 0:
            raise ValueError("max_clients must be >= 0")
        self.policy = policy or RateLimitPolicy()
        self.enabled = enabled
        self.max_clients = max_clients
        self._clock = clock
        self._buckets: "OrderedDict[str, TokenBucket]" = OrderedDict()
        self._table_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "AdmissionController":
        """Build a controller from application settings."""
        return cls(
            policy=RateLimitPolicy(
                capacity=float(settings.RATE_LIMIT_CAPACITY),
                refill_per_second=settings.RATE_LIMIT_REFILL_PER_SECOND,
            ),
            enabled=not settings.NOTHROTTLE,
            max_clients=settings.RATE_LIMIT_MAX_CLIENTS,
        )

    @property
    def tracked_clients(self) -> int:
        return len(self._buckets)

    def _bucket_for(self, key: str, now: float) -> TokenBucket:
        with self._table_lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = TokenBucket.full(self.policy, now)
                self._buckets[key] = bucket
                if self.max_clients and len(self._buckets) > self.max_clients:
                    self._buckets.popitem(last=False)
            elif self.max_clients:
                self._buckets.move_to_end(key)
            return bucket

    def admit(self, key: str) -> bool:
        """Return True and deduct the cost if `key` has enough tokens."""
        if not self.enabled:
            return True
        now = self._clock()
        return self._bucket_for(key, now).take(now)

    def check(self, key: str) -> None:
        """Admit `key` or raise.

        Raises:
            ThrottledError: If the client's bucket is empty.
        """
        if not self.admit(key):
            logger.warning("request_throttled", client_ip=key)
            raise ThrottledError()
