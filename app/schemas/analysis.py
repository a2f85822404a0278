"""Pydantic schemas for the credibility analysis endpoint."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class Tier(str, Enum):
    """Rate-limit policy selected per request."""

    STANDARD = "standard"
    PRO = "pro"


class AnalysisRequest(BaseModel):
    """Body of ``POST /v1/analyze``.

    Only ``mode`` is read. Unknown fields are ignored, and a ``mode`` that is
    not a string is treated as absent so it falls back to the standard tier.
    Bodies sent with a non-JSON content type arrive as raw bytes and are read
    as an empty request.
    """

    mode: str | None = Field(
        default=None,
        description="Requested tier: 'standard' (default) or 'pro', case-insensitive.",
        examples=["standard", "pro"],
    )

    @model_validator(mode="before")
    @classmethod
    def _ignore_non_json_body(cls, data: Any) -> Any:
        if isinstance(data, (bytes, bytearray)):
            return {}
        return data

    @field_validator("mode", mode="before")
    @classmethod
    def _ignore_non_string_mode(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None


class AnalysisResult(BaseModel):
    """Credibility analysis returned on success."""

    status: str = Field(
        ...,
        description="Outcome flag; 'success' for every admitted request.",
    )
    engine: str = Field(
        ...,
        description="Name of the engine that produced the result.",
    )
    score: int = Field(
        ...,
        ge=0,
        le=100,
        description="Credibility score from 0 to 100.",
    )
    verdict: str = Field(
        ...,
        description="Short human-readable verdict.",
    )
    reasons: list[str] = Field(
        default_factory=list,
        description="Reasons supporting the verdict.",
    )
    sources: list[str] = Field(
        default_factory=list,
        description="Sources consulted (always empty: no web evidence is gathered).",
    )


class AnalyzeUsageHint(BaseModel):
    """Response of ``GET /v1/analyze`` describing how to call the endpoint."""

    status: str = "ok"
    engine: str
    hint: str
    auth_accepted: list[str]
    modes: list[str]
