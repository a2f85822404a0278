"""OpenAPI customization: API key security scheme and tag metadata."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

# (path, method) pairs that never require a credential
PUBLIC_OPERATIONS = {
    ("/", "get"),
    ("/health", "get"),
    ("/v1/analyze", "get"),
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add metadata and security.

    - Declares ``X-IA11-Key``, ``X-API-Key`` and bearer security schemes
    - Requires any scheme globally, then exempts public operations with
      ``security: []``
    - Adds tags metadata if not present
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "IA11KeyAuth",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-IA11-Key",
                "description": "Provide your API key via the X-IA11-Key header.",
            },
        )
        security_schemes.setdefault(
            "ApiKeyAuth",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "Provide your API key via the X-API-Key header.",
            },
        )
        security_schemes.setdefault(
            "BearerAuth",
            {
                "type": "http",
                "scheme": "bearer",
                "description": "Alternatively send the API key as a bearer token.",
            },
        )

        schema.setdefault(
            "security",
            [{"IA11KeyAuth": []}, {"ApiKeyAuth": []}, {"BearerAuth": []}],
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {
                "name": "Analysis",
                "description": "Credibility analysis behind the API key and rate-limit gate.",
            },
            {
                "name": "Health",
                "description": "Liveness checks.",
            },
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            for method, method_obj in methods.items():
                if (path, method) in PUBLIC_OPERATIONS and isinstance(method_obj, dict):
                    method_obj["security"] = []

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
