"""Tier selection for the analysis endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import Body, Depends

from app.core.config import settings
from app.schemas.analysis import AnalysisRequest, Tier


def resolve_tier(mode: str | None) -> Tier:
    """Map a request ``mode`` to a tier.

    Matching is case-insensitive and ignores surrounding whitespace; absent or
    unrecognised values fall back to the standard tier.

    Examples:
        >>> resolve_tier(" PRO ")
        <Tier.PRO: 'pro'>
        >>> resolve_tier("premium")
        <Tier.STANDARD: 'standard'>
    """
    if not mode:
        return Tier.STANDARD
    try:
        return Tier(mode.strip().lower())
    except ValueError:
        return Tier.STANDARD


def limit_for_tier(tier: Tier) -> int:
    """Configured requests-per-window for ``tier``."""
    if tier is Tier.PRO:
        return settings.app.rate_limit_per_min_pro
    return settings.app.rate_limit_per_min


async def get_analysis_request(
    payload: Annotated[AnalysisRequest | None, Body()] = None,
) -> AnalysisRequest:
    """FastAPI dependency returning the parsed body, empty when none was sent."""
    return payload if payload is not None else AnalysisRequest()


async def select_tier(
    analysis_request: Annotated[AnalysisRequest, Depends(get_analysis_request)],
) -> Tier:
    """FastAPI dependency selecting the tier from the request body."""
    return resolve_tier(analysis_request.mode)
