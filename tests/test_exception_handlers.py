"""Tests for global exception handlers.

Validates that each domain error maps to its HTTP status, that bodies keep a
consistent shape, and that unexpected errors leak nothing.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.errors import (
    AppError,
    AuthenticationAppError,
    ConfigurationAppError,
    PayloadTooLargeAppError,
    RateLimitAppError,
    ValidationAppError,
)
from app.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def handler_client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ValidationAppError(code="bad_input", message="Bad input"), 400),
            (AuthenticationAppError(code="invalid_api_key", message="Unauthorized"), 401),
            (PayloadTooLargeAppError(code="payload_too_large", message="Payload too large"), 413),
            (RateLimitAppError(code="rate_limited", message="Too many requests"), 429),
            (ConfigurationAppError(code="server_misconfigured", message="Server misconfigured"), 500),
        ],
    )
    def test_status_mapping(
        self,
        handler_client: TestClient,
        app_with_handlers: FastAPI,
        error: AppError,
        status_code: int,
    ) -> None:
        @app_with_handlers.get("/boom")
        async def boom():
            raise error

        response = handler_client.get("/boom")

        assert response.status_code == status_code
        data = response.json()
        assert data["error"] == error.message
        assert data["code"] == error.code
        assert "request_id" in data

    def test_details_included_when_present(
        self, handler_client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        @app_with_handlers.get("/details")
        async def details():
            raise ValidationAppError(
                code="too_long",
                message="Too long",
                details={"max_bytes": 10, "actual_bytes": 20},
            )

        data = handler_client.get("/details").json()

        assert data["details"] == {"max_bytes": 10, "actual_bytes": 20}

    def test_rate_limit_headers_forwarded(
        self, handler_client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        @app_with_handlers.get("/limited")
        async def limited():
            raise RateLimitAppError(
                code="rate_limited",
                message="Too many requests",
                headers={"Retry-After": "30"},
            )

        response = handler_client.get("/limited")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "30"


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI) -> None:
        assert Exception in app_with_handlers.exception_handlers
        assert AppError in app_with_handlers.exception_handlers

    def test_general_exception_handler_never_leaks_details(self) -> None:
        request = AsyncMock()
        request.url.path = "/test"
        request.method = "POST"

        exc = RuntimeError("connection to secret-host failed")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["code"] == "internal_server_error"
        assert "secret-host" not in data["error"]
        assert "RuntimeError" not in json.dumps(data)
