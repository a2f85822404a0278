from __future__ import annotations

from fastapi.testclient import TestClient

from app.adapters.analysis.base import AbstractAnalysisProducer
from app.core.app_factory import create_app
from app.schemas.analysis import AnalysisRequest, AnalysisResult, Tier


class _FailingProducer(AbstractAnalysisProducer):
    name = "failing"

    async def produce(self, request: AnalysisRequest, *, tier: Tier) -> AnalysisResult:
        raise RuntimeError("producer exploded")


def test_preserves_incoming_request_id_header(client: TestClient):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient):
    resp = client.get("/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_error_body_carries_request_id(client: TestClient):
    resp = client.post("/v1/analyze", headers={"X-Request-ID": "req-401"})

    assert resp.status_code == 401
    assert resp.json()["request_id"] == "req-401"
    assert resp.headers.get("X-Request-ID") == "req-401"


def test_unexpected_error_keeps_request_id(valid_api_key_headers: dict):
    client = TestClient(create_app(analysis_producer=_FailingProducer()))

    resp = client.post("/v1/analyze", headers={**valid_api_key_headers, "X-Request-ID": "rid-1"})

    assert resp.status_code == 500
    assert resp.json() == {
        "error": "Internal server error",
        "code": "internal_server_error",
        "request_id": "rid-1",
    }
    assert resp.headers.get("X-Request-ID") == "rid-1"
    assert "producer exploded" not in resp.text
