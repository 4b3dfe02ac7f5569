"""Tests for rate limiting."""
import threading
import time
from unittest.mock import MagicMock, patch

from tweet_cli import http
from tweet_cli.ratelimit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []
        self._lock = threading.Lock()

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        with self._lock:
            self.sleeps.append(seconds)
            self.now += seconds


def test_calls_within_budget_do_not_wait():
    clock = FakeClock()
    limiter = RateLimiter(max_calls=3, period=100, clock=clock, sleep=clock.sleep)

    assert [limiter.wait_if_needed() for _ in range(3)] == [0.0, 0.0, 0.0]
    assert clock.sleeps == []
    assert limiter.remaining() == 0


def test_call_over_budget_waits_for_window_reset():
    clock = FakeClock()
    limiter = RateLimiter(max_calls=3, period=100, clock=clock, sleep=clock.sleep)
    for _ in range(3):
        limiter.wait_if_needed()

    clock.now = 10.0
    slept = limiter.wait_if_needed()

    assert slept == 90.0
    assert clock.now >= 100.0
    # the delayed call was admitted, not dropped
    assert limiter.remaining() == 2


def test_window_slides():
    clock = FakeClock()
    limiter = RateLimiter(max_calls=2, period=100, clock=clock, sleep=clock.sleep)
    limiter.wait_if_needed()
    clock.now = 60.0
    limiter.wait_if_needed()

    clock.now = 100.0
    assert limiter.remaining() == 1
    assert limiter.wait_if_needed() == 0.0
    assert limiter.wait_if_needed() == 60.0


def test_concurrent_callers_share_one_budget():
    clock = FakeClock()
    limiter = RateLimiter(max_calls=2, period=100, clock=clock, sleep=clock.sleep)
    slept = []

    def worker():
        slept.append(limiter.wait_if_needed())

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert len(slept) == 4
    assert sorted(slept) == [0.0, 0.0, 0.0, 100.0]
    assert limiter.remaining() == 0


def test_reference_configuration_defaults():
    limiter = RateLimiter()
    assert limiter.limit == 300
    assert limiter.period == 3 * 60 * 60


def test_session_passes_every_post_through_limiter():
    limiter = MagicMock()
    session = MagicMock()
    wrapped = http.RateLimitedSession(limiter=limiter, session=session)

    wrapped.post("https://example.com", data="a=1", timeout=1)
    wrapped.get("https://example.com", timeout=1)

    assert limiter.wait_if_needed.call_count == 2
    session.post.assert_called_once_with("https://example.com", data="a=1", timeout=1)


def test_get_limiter_is_shared_and_configured(monkeypatch):
    monkeypatch.setattr(http, "_limiter", None)
    with patch("tweet_cli.http.get", side_effect=lambda key, default=None: {"api.max_requests": 5, "api.period_seconds": 60}[key]):
        first = http.get_limiter()
        second = http.get_limiter()

    assert first is second
    assert first.limit == 5
    assert first.period == 60


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        assert time.monotonic() < deadline, "timed out"
        time.sleep(0.001)


def test_waiters_are_admitted_in_arrival_order():
    clock = FakeClock()
    gate = threading.Event()
    sleepers = []

    def blocking_sleep(seconds):
        sleepers.append(threading.current_thread().name)
        gate.wait(timeout=5)
        clock.sleep(seconds)

    limiter = RateLimiter(max_calls=1, period=100, clock=clock, sleep=blocking_sleep)
    limiter.wait_if_needed()

    threads = []
    for i in range(4):
        t = threading.Thread(target=limiter.wait_if_needed, name=f"caller-{i}")
        t.start()
        threads.append(t)
        # caller i holds ticket i + 1 before the next one arrives
        _wait_for(lambda: limiter._next_ticket == i + 2)

    gate.set()
    for t in threads:
        t.join(timeout=5)

    assert sleepers == ["caller-0", "caller-1", "caller-2", "caller-3"]
    assert clock.now == 400.0
