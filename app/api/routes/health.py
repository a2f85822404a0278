from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    """Plain-text liveness message."""

    return f"{settings.analysis.engine_name} API is running"


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Used by load balancers and monitoring systems to determine service health.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}
