from __future__ import annotations

from hotspot_gate.services.rate_limit import SlidingWindowRateLimiter


class ManualClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestSlidingWindowRateLimiter:
    def setup_method(self):
        self.clock = ManualClock()
        self.limiter = SlidingWindowRateLimiter(
            window_seconds=60, max_keys=3, max_history=10, clock=self.clock
        )

    def test_counts_hits_per_key(self):
        assert self.limiter.record("a") == 1
        assert self.limiter.record("a") == 2
        assert self.limiter.record("b") == 1

    def test_old_hits_fall_out_of_window(self):
        self.limiter.record("a")
        self.clock.now += 30
        self.limiter.record("a")
        self.clock.now += 31
        assert self.limiter.record("a") == 2

    def test_history_is_capped(self):
        for _ in range(25):
            count = self.limiter.record("a")
        assert count == 10

    def test_evicts_least_recently_seen(self):
        self.limiter.record("a")
        self.limiter.record("b")
        self.limiter.record("c")
        self.limiter.record("a")
        self.limiter.record("d")
        assert len(self.limiter) == 3
        assert "b" not in self.limiter
        assert "a" in self.limiter

    def test_evicted_key_starts_over(self):
        for key in ("a", "a", "b", "c", "d"):
            self.limiter.record(key)
        assert "a" not in self.limiter
        assert self.limiter.record("a") == 1

    def test_prune_drops_idle_keys(self):
        self.limiter.record("a")
        self.clock.now += 10
        self.limiter.record("b")
        self.clock.now += 55
        self.limiter.prune()
        assert "a" not in self.limiter
        assert "b" in self.limiter

    def test_record_sweeps_idle_keys_periodically(self):
        limiter = SlidingWindowRateLimiter(
            window_seconds=60, max_keys=10, max_history=10, prune_every=3, clock=self.clock
        )
        limiter.record("idle")
        limiter.record("busy")
        self.clock.now += 61
        assert "idle" in limiter
        limiter.record("busy")
        assert "idle" not in limiter
        assert "busy" in limiter
        assert len(limiter) == 1

    def test_sweep_keeps_keys_inside_window(self):
        limiter = SlidingWindowRateLimiter(
            window_seconds=60, max_keys=10, max_history=10, prune_every=2, clock=self.clock
        )
        limiter.record("a")
        self.clock.now += 30
        limiter.record("b")
        assert "a" in limiter
        assert limiter.record("a") == 2
