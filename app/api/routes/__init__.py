from __future__ import annotations

from app.api.routes.analysis import router as analysis_router
from app.api.routes.health import router as health_router

__all__ = ["analysis_router", "health_router"]
