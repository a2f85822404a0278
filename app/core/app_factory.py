"""Application factory for the FastAPI app.

Builds the app with its gate state (rate limiter store, analysis producer)
attached to ``app.state`` so tests and alternative deployments can inject
their own implementations.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.analysis.base import AbstractAnalysisProducer
from app.adapters.analysis.factory import create_analysis_producer
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.api.routes import analysis_router, health_router
from app.core.auth import configured_api_keys
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import body_size_limit_middleware, request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.core.rate_limit import build_default_rate_limiter

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


def _cors_origins() -> list[str]:
    return [o.strip() for o in settings.app.cors_allow_origins.split(",") if o.strip()]


def create_app(
    *,
    rate_limiter: AbstractRateLimiter | None = None,
    analysis_producer: AbstractAnalysisProducer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        rate_limiter: Counter store for the gate; defaults to an in-memory
            fixed-window limiter built from settings.
        analysis_producer: Response producer; defaults to the one named by
            ``ANALYSIS_ENGINE``.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="IA11 Credibility API",
        description=(
            "Credibility analysis endpoint behind a shared-secret API key and a "
            "per-client, per-tier fixed-window rate limit. Send X-IA11-Key (or "
            "X-API-Key) and an optional JSON body { mode: 'standard' | 'pro' }."
        ),
        version=APP_VERSION,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    app.state.rate_limiter = rate_limiter or build_default_rate_limiter()
    app.state.analysis_producer = analysis_producer or create_analysis_producer()

    # Middleware (last registered runs first)
    app.middleware("http")(body_size_limit_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(analysis_router, prefix="/v1")
    app.include_router(health_router)

    # OpenAPI customizations (security scheme, tags, exemptions)
    apply_openapi_customizations(app)

    if settings.app.api_key_required and not configured_api_keys():
        logger.error(
            "startup.api_key_missing",
            extra={"hint": "Set APP_API_KEY (or APP_API_KEYS); /v1/analyze will answer 500"},
        )

    logger.info(
        "startup.app_created",
        extra={
            "version": APP_VERSION,
            "producer": app.state.analysis_producer.name,
            "rate_limiter": type(app.state.rate_limiter).__name__,
            "rate_limit_per_min": settings.app.rate_limit_per_min,
            "rate_limit_per_min_pro": settings.app.rate_limit_per_min_pro,
            "api_keys_loaded": len(configured_api_keys()),
        },
    )

    return app
