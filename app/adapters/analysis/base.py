from abc import ABC, abstractmethod

from app.schemas.analysis import AnalysisRequest, AnalysisResult, Tier


class AbstractAnalysisProducer(ABC):
	"""Interface for components that turn an admitted request into a result."""

	name: str = "abstract"

	@abstractmethod
	async def produce(self, request: AnalysisRequest, *, tier: Tier) -> AnalysisResult:
		"""Produce the analysis result for a request that passed the gate.

		Args:
			request: Parsed request body (may carry no fields at all).
			tier: Tier the request was rate limited under.

		Returns:
			AnalysisResult: Result to return to the client.
		"""
		...
