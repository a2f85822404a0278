"""Application-level exception types.

This module defines the gate's error taxonomy. Each subclass maps to one HTTP
status in ``app.core.exception_handlers`` so dependencies can raise domain
errors without knowing about responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep backward compatibility while encouraging
    consistent shapes across the codebase.
    """

    code: str
    message: str
    hint: str
    limit: int
    remaining: int
    reset_at: int
    retry_after: int
    max_bytes: int
    actual_bytes: int
    tier: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class ConfigurationAppError(AppError):
    """Raised when the server is missing required configuration (operator error)."""


class AuthenticationAppError(AppError):
    """Raised when the client credential is missing or invalid."""


@dataclass
class RateLimitAppError(AppError):
    """Raised when a client exceeds its tier's request budget.

    Attributes:
        headers: Response headers advertising the limit and retry delay.
    """

    headers: dict[str, str] | None = None


class PayloadTooLargeAppError(AppError):
    """Raised when a request body exceeds the configured size limit."""
