"""Unit tests for per-client token bucket admission control.

Covers:
- Burst capacity and continuous refill
- Per-client isolation
- Concurrent check-and-deduct on a single bucket
- Bypass when throttling is disabled
- Optional LRU bound on the bucket table
"""

import threading
from types import SimpleNamespace

import pytest

from src.core.exceptions import THROTTLED, ThrottledError
from src.domain.rate_limiting import AdmissionController, RateLimitPolicy, TokenBucket
from tests.utils.fakes import ManualClock


class TestTokenBucket:
    """Test the single-client bucket."""

    def test_starts_full(self):
        """A new bucket holds the full burst."""
        bucket = TokenBucket.full(RateLimitPolicy(), now=0.0)

        assert bucket.tokens == 5.0
        assert [bucket.take(0.0) for _ in range(6)] == [True] * 5 + [False]

    def test_refill_is_capped_at_capacity(self):
        """Idle time never builds up more than the burst."""
        bucket = TokenBucket.full(RateLimitPolicy(), now=0.0)

        assert bucket.take(3600.0) is True
        assert bucket.tokens == 4.0

    def test_refill_is_continuous(self):
        """Half a second of refill is half a token, not enough for a request."""
        bucket = TokenBucket(policy=RateLimitPolicy(), tokens=0.0, updated_at=0.0)

        assert bucket.take(0.5) is False
        assert bucket.take(1.0) is True

    def test_clock_going_backwards_does_not_drain(self):
        """A stale timestamp adds no tokens and removes none."""
        bucket = TokenBucket(policy=RateLimitPolicy(), tokens=2.0, updated_at=10.0)

        assert bucket.take(9.0) is True
        assert bucket.tokens == 1.0
        assert bucket.updated_at == 10.0


class TestRateLimitPolicy:
    """Test policy validation."""

    def test_defaults(self):
        policy = RateLimitPolicy()

        assert (policy.capacity, policy.refill_per_second, policy.cost) == (5.0, 1.0, 1.0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"capacity": 0},
            {"refill_per_second": 0},
            {"refill_per_second": -1},
            {"cost": 0},
            {"capacity": 2, "cost": 3},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            RateLimitPolicy(**kwargs)


class TestAdmissionController:
    """Test admission decisions across clients."""

    def test_burst_then_throttle(self, admission_controller):
        """Five requests in the same instant pass, the sixth does not."""
        decisions = [admission_controller.admit("203.0.113.7") for _ in range(6)]

        assert decisions == [True] * 5 + [False]

    def test_one_second_buys_exactly_one_request(self, admission_controller, clock):
        for _ in range(5):
            admission_controller.admit("203.0.113.7")

        clock.advance(1.0)

        assert admission_controller.admit("203.0.113.7") is True
        assert admission_controller.admit("203.0.113.7") is False

    def test_clients_are_isolated(self, admission_controller):
        for _ in range(5):
            admission_controller.admit("203.0.113.7")

        assert admission_controller.admit("203.0.113.7") is False
        assert admission_controller.admit("198.51.100.1") is True
        assert admission_controller.tracked_clients == 2

    def test_check_raises_throttled(self, admission_controller):
        for _ in range(5):
            admission_controller.check("203.0.113.7")

        with pytest.raises(ThrottledError) as exc_info:
            admission_controller.check("203.0.113.7")

        assert exc_info.value.message == THROTTLED

    def test_check_logs_throttled_client(self, admission_controller, mocker):
        mock_logger = mocker.patch("src.domain.rate_limiting.services.logger")
        for _ in range(5):
            admission_controller.check("203.0.113.7")

        with pytest.raises(ThrottledError):
            admission_controller.check("203.0.113.7")

        mock_logger.warning.assert_called_once_with("request_throttled", client_ip="203.0.113.7")

    def test_concurrent_requests_never_overspend(self):
        """Parallel requests for one key are admitted at most `capacity` times."""
        controller = AdmissionController(clock=ManualClock())
        workers = 20
        barrier = threading.Barrier(workers)
        results = []
        results_lock = threading.Lock()

        def hit():
            barrier.wait()
            admitted = controller.admit("203.0.113.7")
            with results_lock:
                results.append(admitted)

        threads = [threading.Thread(target=hit) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 5
        assert results.count(False) == workers - 5
        assert controller.tracked_clients == 1

    def test_disabled_admits_everything(self, clock):
        controller = AdmissionController(clock=clock, enabled=False)

        assert all(controller.admit("203.0.113.7") for _ in range(100))
        controller.check("203.0.113.7")
        assert controller.tracked_clients == 0

    def test_custom_policy(self, clock):
        controller = AdmissionController(
            policy=RateLimitPolicy(capacity=2, refill_per_second=0.5), clock=clock
        )

        assert [controller.admit("k") for _ in range(3)] == [True, True, False]
        clock.advance(1.0)
        assert controller.admit("k") is False
        clock.advance(1.0)
        assert controller.admit("k") is True


class TestAdmissionControllerTableBound:
    """Test the optional LRU bound on tracked clients."""

    def test_unbounded_by_default(self, admission_controller):
        for i in range(50):
            admission_controller.admit(f"10.0.0.{i}")

        assert admission_controller.tracked_clients == 50

    def test_least_recently_used_client_is_evicted(self, clock):
        controller = AdmissionController(clock=clock, max_clients=2)
        for _ in range(5):
            controller.admit("a")
        controller.admit("b")
        # Touch "a" so "b" becomes the eviction candidate.
        assert controller.admit("a") is False

        controller.admit("c")

        assert controller.tracked_clients == 2
        # "a" kept its empty bucket.
        assert controller.admit("a") is False

    def test_evicted_client_starts_full(self, clock):
        controller = AdmissionController(clock=clock, max_clients=1)
        for _ in range(5):
            controller.admit("a")

        controller.admit("b")

        assert controller.admit("a") is True

    def test_negative_bound_rejected(self):
        with pytest.raises(ValueError):
            AdmissionController(max_clients=-1)


class TestAdmissionControllerFromSettings:
    """Test construction from application settings."""

    def test_uses_configured_values(self):
        settings = SimpleNamespace(
            RATE_LIMIT_CAPACITY=3,
            RATE_LIMIT_REFILL_PER_SECOND=2.0,
            RATE_LIMIT_MAX_CLIENTS=100,
            NOTHROTTLE=False,
        )

        controller = AdmissionController.from_settings(settings)

        assert controller.policy == RateLimitPolicy(capacity=3.0, refill_per_second=2.0)
        assert controller.max_clients == 100
        assert controller.enabled is True

    def test_nothrottle_disables(self):
        settings = SimpleNamespace(
            RATE_LIMIT_CAPACITY=5,
            RATE_LIMIT_REFILL_PER_SECOND=1.0,
            RATE_LIMIT_MAX_CLIENTS=0,
            NOTHROTTLE=True,
        )

        assert AdmissionController.from_settings(settings).enabled is False
