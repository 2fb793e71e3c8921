"""
Exception handlers.

Every error leaves the API in one envelope:

    {"error": {"code", "message", "details"}, "meta": {"request_id"}}

- AppException -> its own status and code
- RequestValidationError / pydantic ValidationError -> 422 VALIDATION_ERROR,
  one ``details`` entry per failing field
- RateLimitExceeded -> 429 RATE_LIMIT_EXCEEDED
- anything else -> 500 INTERNAL_ERROR, text hidden unless DEBUG
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from slowapi.errors import RateLimitExceeded

from src.core.config import settings
from src.exceptions import AppException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please contact support."


def error_envelope(
    request: Request, status_code: int, code: str, message: str, details: Any
) -> JSONResponse:
    body = {
        "error": {"code": code, "message": message, "details": details},
        "meta": {"request_id": getattr(request.state, "request_id", None)},
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.error_code, exc.message)
    return error_envelope(request, exc.status_code, exc.error_code, exc.message, exc.details)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError | ValidationError
) -> JSONResponse:
    """
    422 for body/query/path errors.

    ``RequestValidationError`` covers FastAPI's own parsing. A plain pydantic
    ``ValidationError`` shows up when a ``model_validator`` of a model built
    through ``Depends()`` (filters, report ranges) rejects the combination of
    query parameters.
    """
    errors = exc.errors()
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"]) or None,
            "message": error["msg"],
            "type": error["type"],
        }
        for error in errors
    ]
    logger.info(
        "%s %s -> validation failed on %s",
        request.method,
        request.url.path,
        [d["field"] for d in details],
    )
    return error_envelope(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        details,
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    client = request.client.host if request.client else "unknown"
    logger.warning("Rate limit %s hit by %s on %s", exc.detail, client, request.url.path)
    return error_envelope(
        request,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "RATE_LIMIT_EXCEEDED",
        "Rate limit exceeded. Please try again later.",
        {"limit": str(exc.detail)},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log with traceback, answer 500 without leaking internals."""
    logger.error(
        "Unhandled %s on %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    message = str(exc) if settings.debug else GENERIC_ERROR_MESSAGE
    return error_envelope(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", message, {}
    )
