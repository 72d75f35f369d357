"""Sliding-window rate limiter shared by throttled collaborators."""

import asyncio
import time
from collections import deque
from typing import Awaitable, Callable, Deque

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

# Added to computed waits so a float-rounded clock always clears the window.
_WAIT_EPSILON = 1e-6


class RateLimiter:
    """Allow at most ``max_requests`` acquisitions per ``window_seconds``.

    The clock and sleep functions are injectable so callers can throttle
    against a fake clock in tests instead of real wall-clock delays.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize the limiter.

        Args:
            max_requests: Acquisitions allowed per window
            window_seconds: Window length in seconds
            clock: Monotonic time source
            sleep: Coroutine used to wait for a free slot
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._max_requests = max_requests
        self._window = window_seconds
        self._clock = clock
        self._sleep = sleep
        self._timestamps: Deque[float] = deque()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self._window:
            self._timestamps.popleft()

    @property
    def remaining(self) -> int:
        """Acquisitions still available in the current window."""
        self._prune(self._clock())
        return self._max_requests - len(self._timestamps)

    def retry_after(self) -> float:
        """Seconds until the next acquisition can succeed."""
        now = self._clock()
        self._prune(now)
        if len(self._timestamps) < self._max_requests:
            return 0.0
        return max(0.0, self._window - (now - self._timestamps[0]))

    def try_acquire(self) -> bool:
        """Take a slot if one is free, without waiting."""
        now = self._clock()
        self._prune(now)
        if len(self._timestamps) >= self._max_requests:
            return False
        self._timestamps.append(now)
        return True

    async def acquire(self) -> None:
        """Wait until a slot is free, then take it."""
        while not self.try_acquire():
            await self._sleep(self.retry_after() + _WAIT_EPSILON)

    def reset(self) -> None:
        """Forget every recorded acquisition."""
        self._timestamps.clear()
