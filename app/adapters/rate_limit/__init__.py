"""Rate limiting adapters.

The gate only talks to ``AbstractRateLimiter``; the in-memory store is the
default and another shared store can be injected through ``create_app``.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
]
