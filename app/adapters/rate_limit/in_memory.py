"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class _WindowState:
    window_start: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests per key in a fixed window.

    A key's window opens with the first request counted in it and lasts
    ``window_seconds``; the first request after it elapses opens a new one.
    Anchoring on the first request (rather than on wall-clock boundaries)
    guarantees no more than ``limit`` requests in any window that starts with
    an admitted request.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.time,
        max_keys: int | None = 100_000,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            window_seconds: Size of the fixed window in seconds.
            clock: Time source function returning UNIX time in seconds.
            max_keys: Soft cap on tracked keys; expired windows are purged
                when it is reached. None disables purging.

        Raises:
            ValueError: If window_seconds is invalid.
        """
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._window_seconds = window_seconds
        self._clock = clock
        self._max_keys = max_keys
        self._lock = threading.RLock()
        self._state_by_key: dict[str, _WindowState] = {}

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def _get_or_reset_state(self, key: str, now: float) -> _WindowState:
        """Get the current state for key or open a new window when expired."""
        state = self._state_by_key.get(key)
        if state is None or now >= state.window_start + self._window_seconds:
            if state is None:
                self._purge_expired_locked(now)
            state = _WindowState(window_start=now, count=0)
            self._state_by_key[key] = state
        return state

    def _purge_expired_locked(self, now: float) -> None:
        if self._max_keys is None or len(self._state_by_key) < self._max_keys:
            return
        expired = [
            k
            for k, s in self._state_by_key.items()
            if now >= s.window_start + self._window_seconds
        ]
        for k in expired:
            del self._state_by_key[k]

    def consume(self, key: str, *, limit: int, cost: int = 1) -> RateLimitResult:
        """Consume rate limit budget for the provided key.

        Checks the current window usage and counts the request only if it is
        allowed; rejected requests leave the counter untouched.

        Args:
            key: Unique bucket identifier.
            limit: Max units allowed per window for this key.
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty, or limit or cost are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if cost < 1:
            raise ValueError("cost must be >= 1")
        if not key:
            raise ValueError("key must be a non-empty string")

        with self._lock:
            now = self._clock()
            state = self._get_or_reset_state(key, now)
            reset_at = state.window_start + self._window_seconds

            if state.count + cost <= limit:
                state.count += cost
                return RateLimitResult(
                    allowed=True,
                    limit=limit,
                    remaining=max(0, limit - state.count),
                    reset_at=int(math.ceil(reset_at)),
                    retry_after_seconds=None,
                )

            return RateLimitResult(
                allowed=False,
                limit=limit,
                remaining=max(0, limit - state.count),
                reset_at=int(math.ceil(reset_at)),
                retry_after_seconds=max(1, int(math.ceil(reset_at - now))),
            )

    def reset(self, key: str | None = None) -> None:
        """Forget the counter for ``key``, or every counter when omitted."""
        with self._lock:
            if key is None:
                self._state_by_key.clear()
            else:
                self._state_by_key.pop(key, None)
