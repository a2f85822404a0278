"""Factory pattern for creating analysis producer instances."""

from app.adapters.analysis.base import AbstractAnalysisProducer
from app.adapters.analysis.static import StaticAnalysisProducer
from app.core.config import settings
from app.core.errors import ConfigurationAppError


def create_analysis_producer() -> AbstractAnalysisProducer:
    """Instantiate the analysis producer named by configuration.

    Reads ``settings.analysis`` (``ANALYSIS_ENGINE`` / ``ANALYSIS_ENGINE_NAME``).

    Returns:
        AbstractAnalysisProducer: Configured producer instance.

    Raises:
        ConfigurationAppError: If the configured engine is unknown.
    """
    engine = settings.analysis.engine.strip().lower()

    if engine == "static":
        return StaticAnalysisProducer(engine_name=settings.analysis.engine_name)

    raise ConfigurationAppError(
        code="analysis_unknown_engine",
        message=f"Unknown analysis engine: '{engine}'. Supported engines: static",
    )
