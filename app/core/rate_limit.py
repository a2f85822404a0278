"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Injectable store: the limiter lives on ``app.state`` and is provided by
  ``create_app``; nothing here holds process-wide counters.

Rate limiting strategy:
- Fixed window per (tier, client); each tier has its own configured limit.
- Behind a trusted proxy, clients are identified by X-Client-ID, then by
  the first X-Forwarded-For hop; otherwise (and as a fallback) by the
  socket peer address.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

from fastapi import Depends, Request

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.core.config import settings
from app.core.errors import ConfigurationAppError, RateLimitAppError
from app.core.tiers import limit_for_tier, select_tier
from app.schemas.analysis import Tier

logger = logging.getLogger(__name__)


def build_default_rate_limiter() -> AbstractRateLimiter:
    """Create the in-memory limiter configured from settings."""
    return InMemoryFixedWindowRateLimiter(
        window_seconds=settings.app.rate_limit_window_seconds,
    )


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter attached to the running application.

    Raises:
        ConfigurationAppError: If the app was built without a limiter.
    """
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        raise ConfigurationAppError(
            code="rate_limiter_not_configured",
            message="Server misconfigured",
        )
    return limiter


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client identity."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def build_client_key(request: Request) -> str:
    """Identify the requesting client.

    Args:
        request: FastAPI request.

    Returns:
        str: Namespaced client key (``cid:<hash>`` or ``ip:<address>``).
    """
    # Client-supplied identity headers are only honoured behind a trusted proxy
    if settings.app.trust_proxy_headers:
        client_id = request.headers.get("X-Client-ID", "").strip()
        if client_id:
            return f"cid:{_hash_limiter_key(client_id)}"

        forwarded_for = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return f"ip:{first_hop}"

    client_host = request.client.host if request.client else None
    return f"ip:{client_host or 'unknown'}"


def build_rate_limit_key(tier: Tier, client_key: str) -> str:
    return f"{tier.value}:{client_key}"


async def enforce_rate_limit(
    request: Request,
    tier: Annotated[Tier, Depends(select_tier)],
    limiter: Annotated[AbstractRateLimiter, Depends(get_rate_limiter)],
) -> None:
    """FastAPI dependency enforcing the selected tier's rate limit.

    Consumes one unit from the client's budget for that tier. Over-quota
    requests raise RateLimitAppError, rendered as HTTP 429.

    Args:
        request: FastAPI request.
        tier: Tier selected from the request body.
        limiter: Counter store attached to the application.

    Raises:
        RateLimitAppError: When the tier's limit is exceeded for this client.
    """

    if not settings.app.rate_limit_enabled:
        return

    client_key = build_client_key(request)
    key = build_rate_limit_key(tier, client_key)
    limit = limit_for_tier(tier)
    log_fields = {
        "tier": tier.value,
        "key_type": client_key.split(":", 1)[0],
        "key_hash": _hash_limiter_key(key),
        "limit": limit,
    }

    result = limiter.consume(key, limit=limit)
    if result.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={**log_fields, "remaining": result.remaining},
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={**log_fields, "remaining": result.remaining, "retry_after_s": retry_after},
    )

    headers: dict[str, str] = {}
    if settings.app.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.reset_at)

    raise RateLimitAppError(
        code="rate_limited",
        message="Too many requests, please try again later.",
        details={"tier": tier.value, "limit": result.limit, "retry_after": retry_after},
        headers=headers or None,
    )
