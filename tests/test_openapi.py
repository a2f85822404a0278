from fastapi.testclient import TestClient


def test_security_scheme_and_public_paths(client: TestClient) -> None:
    schema = client.get("/openapi.json").json()

    assert schema["components"]["securitySchemes"]["ApiKeyAuth"]["name"] == "X-API-Key"
    assert schema["components"]["securitySchemes"]["IA11KeyAuth"]["name"] == "X-IA11-Key"
    assert {"IA11KeyAuth": []} in schema["security"]
    assert schema["paths"]["/"]["get"]["security"] == []
    assert schema["paths"]["/health"]["get"]["security"] == []
    assert "security" not in schema["paths"]["/v1/analyze"]["post"]


def test_usage_hint_is_public_while_analyze_stays_secured(client: TestClient) -> None:
    schema = client.get("/openapi.json").json()
    analyze = schema["paths"]["/v1/analyze"]

    assert analyze["get"]["security"] == []
    assert analyze["post"].get("security") != []


def test_analyze_body_is_optional(client: TestClient) -> None:
    schema = client.get("/openapi.json").json()

    request_body = schema["paths"]["/v1/analyze"]["post"]["requestBody"]
    assert request_body.get("required", False) is False
