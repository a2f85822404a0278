"""HTTP middleware for request correlation and body size enforcement.

Usage:
    app.middleware("http")(body_size_limit_middleware)
    app.middleware("http")(request_id_middleware)  # outermost
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from app.core.config import settings
from app.core.errors import PayloadTooLargeAppError
from app.core.exception_handlers import build_error_response, general_exception_handler
from app.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Attach a correlation id and timing to every request/response pair.

    Reuses the client's request id header (``LOG_REQUEST_ID_HEADER``,
    ``X-Request-ID`` by default) or generates a UUID, stores it in
    contextvars for log correlation, and echoes it back together with
    ``X-Request-Duration-ms``.

    Unexpected exceptions are rendered here rather than by Starlette's outer
    error middleware, so 500 responses still carry the request id.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with correlation headers added.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    except Exception as exc:
        response = await general_exception_handler(request, exc)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


def _payload_too_large(actual_bytes: int, max_bytes: int) -> Response:
    logger.warning(
        "body_size.rejected",
        extra={"content_length": actual_bytes, "max_bytes": max_bytes},
    )
    return build_error_response(
        PayloadTooLargeAppError(
            code="payload_too_large",
            message="Payload too large",
            details={"max_bytes": max_bytes, "actual_bytes": actual_bytes},
        )
    )


async def body_size_limit_middleware(request: Request, call_next) -> Response:
    """Reject request bodies larger than ``APP_MAX_BODY_BYTES`` (413).

    A declared Content-Length is checked without reading the body. Bodies
    sent without one (chunked transfer) are read and measured; Starlette
    hands the cached body on to the route.
    """

    max_bytes = settings.app.max_body_bytes
    content_length = request.headers.get("content-length")

    if content_length is not None:
        if content_length.isdigit() and int(content_length) > max_bytes:
            return _payload_too_large(int(content_length), max_bytes)
        return await call_next(request)

    body = await request.body()
    if len(body) > max_bytes:
        return _payload_too_large(len(body), max_bytes)

    return await call_next(request)
