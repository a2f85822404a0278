"""API key authentication for the request gate.

The expected credential comes from ``APP_API_KEY`` (plus optional
``APP_API_KEYS`` for rotation; ``IA11_API_KEY``/``IA11_API_KEYS`` are read
too). Clients send it in ``X-IA11-Key`` or ``X-API-Key`` or, as a fallback,
``Authorization: Bearer <key>``.

Outcomes:
- no credential configured → ConfigurationAppError (500, operator error)
- credential missing or not an exact match → AuthenticationAppError (401)
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from typing import Annotated

from fastapi import Header

from app.core.config import settings
from app.core.errors import AuthenticationAppError, ConfigurationAppError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def _unwrap_quotes(value: str) -> str:
    """Strip one pair of matching surrounding quotes left by some env editors."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1].strip()
    return value


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Args:
        keys_string: Comma-separated string of API keys, or None.

    Returns:
        Set of trimmed, non-empty API keys.

    Examples:
        >>> parse_api_keys("key1, key2 , key1")
        {'key1', 'key2'}
        >>> parse_api_keys('"key1,key2"')
        {'key1', 'key2'}
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()

    raw = _unwrap_quotes(keys_string)
    return {key for key in (_unwrap_quotes(k) for k in raw.split(",")) if key}


def configured_api_keys() -> set[str]:
    """Return every credential the server currently accepts."""
    keys = parse_api_keys(settings.app.api_keys)
    if settings.app.api_key:
        single = _unwrap_quotes(settings.app.api_key)
        if single:
            keys.add(single)
    return keys


def hash_secret(value: str) -> str:
    """Short, non-reversible fingerprint of a secret for logs."""
    return hashlib.sha256(value.encode()).hexdigest()[:16]


def extract_api_key(
    x_api_key: str | None,
    authorization: str | None,
    x_ia11_key: str | None = None,
) -> str | None:
    """Pick the client credential from the supported headers.

    Precedence: ``X-IA11-Key``, then ``X-API-Key``, then
    ``Authorization: Bearer <key>``.
    """
    if x_ia11_key:
        return x_ia11_key

    if x_api_key:
        return x_api_key

    if authorization and authorization[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        token = authorization[len(BEARER_PREFIX):].strip()
        if token:
            return token

    return None


def is_valid_api_key(provided_key: str, valid_keys: set[str]) -> bool:
    """Compare against every configured key in constant time."""
    provided = provided_key.encode()
    matched = False
    for key in valid_keys:
        # No short-circuit so timing does not reveal which key matched
        matched |= secrets.compare_digest(provided, key.encode())
    return matched


def validate_api_key(provided_key: str | None) -> None:
    """Validate that the provided API key matches a configured key.

    Pure validation logic without FastAPI dependencies for easy testing.

    Args:
        provided_key: Credential sent by the client, or None when absent.

    Raises:
        ConfigurationAppError: If no credential is configured server-side.
        AuthenticationAppError: If the key is missing or does not match.
    """
    if not settings.app.api_key_required:
        # Authentication disabled - allow all requests
        return

    valid_keys = configured_api_keys()

    if not valid_keys:
        logger.error(
            "auth.misconfigured",
            extra={"reason": "api_key_not_configured"},
        )
        raise ConfigurationAppError(
            code="server_misconfigured",
            message="Server misconfigured",
        )

    if not provided_key:
        logger.warning(
            "auth.missing_key",
            extra={"api_key_present": False},
        )
        raise AuthenticationAppError(
            code="missing_api_key",
            message="Unauthorized",
        )

    if not is_valid_api_key(provided_key, valid_keys):
        logger.warning(
            "auth.invalid_key",
            extra={
                "api_key_present": True,
                "api_key_hash": hash_secret(provided_key),
            },
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Unauthorized",
        )

    logger.info(
        "auth.success",
        extra={"api_key_hash": hash_secret(provided_key)},
    )


async def verify_api_key(
    x_ia11_key: Annotated[str | None, Header(alias="X-IA11-Key")] = None,
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
) -> None:
    """FastAPI dependency for API key authentication.

    Errors propagate as domain errors and are rendered by the global
    exception handlers (401 or 500).

    Usage:
        @router.post("/protected", dependencies=[Depends(verify_api_key)])
        async def protected_endpoint():
            return {"message": "Authenticated!"}
    """
    if not settings.app.api_key_required:
        logger.debug(
            "auth.skipped",
            extra={"reason": "auth_required_false"},
        )
        return

    validate_api_key(extract_api_key(x_api_key, authorization, x_ia11_key))
