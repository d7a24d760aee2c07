"""Per-client admission control (token bucket rate limiting)."""

from .entities import TokenBucket
from .services import AdmissionController
from .value_objects import RateLimitPolicy

__all__ = ["AdmissionController", "RateLimitPolicy", "TokenBucket"]
