import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.adapters.analysis.base import AbstractAnalysisProducer
from app.core.auth import verify_api_key
from app.core.config import settings
from app.core.errors import ConfigurationAppError
from app.core.rate_limit import enforce_rate_limit
from app.core.tiers import get_analysis_request, select_tier
from app.schemas.analysis import AnalysisRequest, AnalysisResult, AnalyzeUsageHint, Tier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


def get_analysis_producer(request: Request) -> AbstractAnalysisProducer:
    """Return the producer attached to the running application."""
    producer = getattr(request.app.state, "analysis_producer", None)
    if producer is None:
        raise ConfigurationAppError(
            code="analysis_producer_not_configured",
            message="Server misconfigured",
        )
    return producer


@router.get("/analyze", response_model=AnalyzeUsageHint)
async def analyze_usage() -> AnalyzeUsageHint:
    """Describe how to call the analysis endpoint (no credential needed)."""
    return AnalyzeUsageHint(
        engine=settings.analysis.engine_name,
        hint="Use POST /v1/analyze with header X-IA11-Key (or X-API-Key) and optional JSON { mode }",
        auth_accepted=["X-IA11-Key", "X-API-Key", "Authorization: Bearer <key>"],
        modes=[tier.value for tier in Tier],
    )


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    dependencies=[Depends(verify_api_key), Depends(enforce_rate_limit)],
)
async def analyze(
    analysis_request: Annotated[AnalysisRequest, Depends(get_analysis_request)],
    tier: Annotated[Tier, Depends(select_tier)],
    producer: Annotated[AbstractAnalysisProducer, Depends(get_analysis_producer)],
) -> AnalysisResult:
    """Run a credibility analysis for a request that passed the gate.

    The gate runs as route dependencies in order: API key check, then the
    tier's rate limit. The body is optional; only ``mode`` is read.

    Returns:
        AnalysisResult: Result from the configured producer.
    """
    result = await producer.produce(analysis_request, tier=tier)
    logger.info(
        "analysis.completed",
        extra={"tier": tier.value, "producer": producer.name, "score": result.score},
    )
    return result
