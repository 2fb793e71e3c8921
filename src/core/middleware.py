"""
HTTP middleware.

- RequestIDMiddleware: one id per request, echoed as ``X-Request-ID``
- RequestLoggingMiddleware: one access line per request plus ``X-Response-Time``
- SecurityHeadersMiddleware: hardening headers for a JSON-only API
"""

import logging
import re
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.core.logging import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied ids end up in logs; anything else gets replaced
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

CONTENT_SECURITY_POLICY = "; ".join(
    (
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
        "img-src 'self' data: https://fastapi.tiangolo.com",
        "frame-ancestors 'none'",
        "base-uri 'self'",
    )
)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assign a request id.

    A well-formed ``X-Request-ID`` sent by the caller is kept so ids can be
    followed across services; otherwise a UUID4 is generated. The id is put on
    ``request.state.request_id`` (read by the exception handlers for the
    ``meta`` block) and bound to ``request_id_var`` for log records.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = incoming if _REQUEST_ID_PATTERN.match(incoming) else str(uuid.uuid4())
        request.state.request_id = request_id

        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log ``METHOD path status`` with timing; level follows the status class."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        client = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s crashed after %.3fs (client=%s)",
                request.method,
                request.url.path,
                time.perf_counter() - started,
                client,
            )
            raise

        elapsed = time.perf_counter() - started
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            "%s %s %s %.3fs (client=%s)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
            client,
        )

        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add nosniff, frame denial, referrer policy and a CSP to every response.

    The CSP admits the Swagger UI assets served at ``/docs`` in debug mode.
    ``Strict-Transport-Security`` is only sent when ``enable_hsts`` is set,
    which the app does in production.
    """

    def __init__(self, app: ASGIApp, enable_hsts: bool = False):
        super().__init__(app)
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        headers = response.headers
        headers["X-Content-Type-Options"] = "nosniff"
        headers["X-Frame-Options"] = "DENY"
        headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        if self.enable_hsts:
            headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
