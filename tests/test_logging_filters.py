"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    set_request_id,
)


@pytest.fixture
def log_stream() -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_sensitive_filter_redacts_credentials(log_stream):
    logger, stream = log_stream

    logger.info(
        "auth_event",
        extra={
            "api_key": "sk-secret-123",
            "x-api-key": "another-secret",
            "x-ia11-key": "ia11-secret",
            "authorization": "Bearer third-secret",
            "api_key_hash": "abcd1234",
        },
    )

    output = stream.getvalue()

    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert "third-secret" not in output
    assert "ia11-secret" not in output
    assert "[REDACTED]" in output
    # Hashes are safe to log
    assert "abcd1234" in output


def test_sensitive_filter_allows_safe_fields(log_stream):
    logger, stream = log_stream

    logger.info(
        "rate_limit.allowed",
        extra={"tier": "pro", "limit": 5, "remaining": 4},
    )

    record = json.loads(stream.getvalue())

    assert record["message"] == "rate_limit.allowed"
    assert record["tier"] == "pro"
    assert record["limit"] == 5
    assert "[REDACTED]" not in stream.getvalue()


def test_sensitive_filter_redacts_nested_dicts(log_stream):
    logger, stream = log_stream

    logger.info(
        "nested_event",
        extra={"headers": {"X-API-Key": "secret-key", "user-agent": "pytest"}},
    )

    output = stream.getvalue()

    assert "secret-key" not in output
    assert "pytest" in output


def test_request_id_is_attached_from_context(log_stream):
    logger, stream = log_stream

    set_request_id("req-777")
    try:
        logger.info("with_context")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-777"
