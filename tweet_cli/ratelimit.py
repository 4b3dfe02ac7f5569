"""Client-side API rate limiting."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable

LOG = logging.getLogger(__name__)


class RateLimiter:
    """Sliding-window rate limiter (max_calls per period seconds).

    Callers that arrive while the window is full are queued and released in
    arrival order. Nothing is ever rejected, only delayed.
    """

    def __init__(
        self,
        max_calls: int = 300,
        period: float = 3 * 60 * 60,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.limit = max(1, int(max_calls))
        self.period = float(period)
        self._clock = clock
        self._sleep = sleep
        self._calls: deque[float] = deque()
        self._cond = threading.Condition()
        self._next_ticket = 0
        self._serving = 0

    def _evict(self, now: float) -> None:
        cutoff = now - self.period
        while self._calls and self._calls[0] <= cutoff:
            self._calls.popleft()

    def remaining(self) -> int:
        """Free slots in the current window."""
        with self._cond:
            self._evict(self._clock())
            return self.limit - len(self._calls)

    def wait_if_needed(self) -> float:
        """Block if needed and return sleep duration (seconds)."""
        with self._cond:
            ticket = self._next_ticket
            self._next_ticket += 1
            while ticket != self._serving:
                self._cond.wait()

        # Head of the queue: later tickets stay parked until we advance _serving.
        slept = 0.0
        try:
            while True:
                with self._cond:
                    now = self._clock()
                    self._evict(now)
                    if len(self._calls) < self.limit:
                        self._calls.append(now)
                        return slept
                    sleep_for = max(0.0, self.period - (now - self._calls[0]))

                LOG.info(
                    "Rate limiting Twitter API calls: sleeping %.2fs (limit=%d/%ds)",
                    sleep_for, self.limit, self.period,
                )
                self._sleep(sleep_for)
                slept += sleep_for
        finally:
            with self._cond:
                self._serving += 1
                self._cond.notify_all()
