"""Rate Limiting Domain Entities

TokenBucket holds the mutable state of a single client. It is only ever
mutated through `take`, under its own lock.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .value_objects import RateLimitPolicy


@dataclass
class TokenBucket:
    """Token bucket for one client key.

    Buckets start full. Refill is computed lazily from the elapsed time at
    each `take`, so an idle bucket costs nothing.
    """

    policy: RateLimitPolicy
    tokens: float
    updated_at: float
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @classmethod
    def full(cls, policy: RateLimitPolicy, now: float) -> "TokenBucket":
        return cls(policy=policy, tokens=policy.capacity, updated_at=now)

    def take(self, now: float) -> bool:
        """Refill for the elapsed time, then try to deduct one request's cost.

        Check-and-deduct happens under the bucket lock, so concurrent callers
        for the same key are serialized.

        Args:
            now: Current monotonic time in seconds.

        Returns:
            True if the cost was deducted (request admitted).
        """
        with self._lock:
            elapsed = max(0.0, now - self.updated_at)
            self.tokens = min(
                self.policy.capacity, self.tokens + elapsed * self.policy.refill_per_second
            )
            self.updated_at = max(self.updated_at, now)

            if self.tokens >= self.policy.cost:
                self.tokens -= self.policy.cost
                return True
            return False
