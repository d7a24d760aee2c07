"""
Rate Limiting Value Objects

Immutable configuration shared by every per-client bucket.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RateLimitPolicy:
    """
    Token bucket parameters applied uniformly to every client.

    Business Rules:
    - A bucket never holds more than `capacity` tokens (the burst size)
    - Tokens are replenished continuously at `refill_per_second`
    - Each admitted request consumes `cost` tokens
    """

    capacity: float = 5.0
    refill_per_second: float = 1.0
    cost: float = 1.0

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError("capacity must be positive")
        if self.refill_per_second <= 0:
            raise ValueError("refill_per_second must be positive")
        if not 0 < self.cost <= self.capacity:
            raise ValueError("cost must be positive and no larger than capacity")
