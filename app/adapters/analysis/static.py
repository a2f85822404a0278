"""Static analysis producer returning a fixed credibility result."""

import logging

from app.adapters.analysis.base import AbstractAnalysisProducer
from app.schemas.analysis import AnalysisRequest, AnalysisResult, Tier

logger = logging.getLogger(__name__)

STATIC_SCORE = 72
STATIC_VERDICT = "Likely credible"
STATIC_REASONS = (
    "Consistent wording with no emotional or persuasive markers",
    "No contradictory claims detected",
    "No external sources were checked",
)


class StaticAnalysisProducer(AbstractAnalysisProducer):
    """Producer that ignores its input and always returns the same result.

    Stands in for a real analysis engine; the request and tier are accepted
    only to satisfy the producer interface.
    """

    name = "static"

    def __init__(self, engine_name: str = "IA11") -> None:
        self.engine_name = engine_name

    def build_result(self) -> AnalysisResult:
        return AnalysisResult(
            status="success",
            engine=self.engine_name,
            score=STATIC_SCORE,
            verdict=STATIC_VERDICT,
            reasons=list(STATIC_REASONS),
            sources=[],
        )

    async def produce(self, request: AnalysisRequest, *, tier: Tier) -> AnalysisResult:
        logger.debug(
            "analysis.static_result",
            extra={"producer": self.name, "tier": tier.value},
        )
        return self.build_result()
