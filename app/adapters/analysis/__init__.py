"""Analysis producer layer - hides which engine builds the result."""

from app.adapters.analysis.base import AbstractAnalysisProducer
from app.adapters.analysis.factory import create_analysis_producer
from app.adapters.analysis.static import StaticAnalysisProducer

__all__ = [
    "AbstractAnalysisProducer",
    "StaticAnalysisProducer",
    "create_analysis_producer",
]
