"""
ASGI entry point.

``create_app`` assembles the service: logging, exception handlers, the
middleware stack, the rate limiter and the routers. The module-level ``app``
is what uvicorn serves (``uvicorn src.main:app``).

URL layout:
    /                   service index
    /health             liveness and readiness
    /api/auth           registration, login, tokens, profile
    /api/v1/...         users, metadata and every account-scoped resource
"""

import logging

from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from slowapi.errors import RateLimitExceeded

from src.api.routes import (
    accounts,
    auth,
    calendar,
    categories,
    documents,
    health,
    metadata,
    movements,
    reports,
    root,
    tags,
    tasks,
    users,
)
from src.core.config import settings
from src.core.handlers import (
    app_exception_handler,
    general_exception_handler,
    rate_limit_handler,
    validation_exception_handler,
)
from src.core.lifespan import lifespan
from src.core.logging import setup_logging
from src.core.middleware import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from src.core.rate_limit import limiter
from src.exceptions import AppException

logger = logging.getLogger(__name__)

V1_ROUTERS = (
    users.router,
    metadata.router,
    accounts.router,
    categories.router,
    movements.router,
    documents.router,
    tags.router,
    calendar.router,
    reports.router,
    tasks.router,
)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    # Raised by model validators on Depends()-built query models
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, general_exception_handler)


def register_middleware(app: FastAPI) -> None:
    """
    Install middleware.

    The last middleware added is the outermost one. RequestIDMiddleware sits
    outside RequestLoggingMiddleware so the access line carries the request id.
    CORS is outermost so its headers reach every response.
    """
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def build_api_router() -> APIRouter:
    v1 = APIRouter(prefix="/v1")
    for router in V1_ROUTERS:
        v1.include_router(router)

    api = APIRouter(prefix="/api")
    api.include_router(auth.router)
    api.include_router(v1)
    return api


def create_app() -> FastAPI:
    """Build a fully wired FastAPI application."""
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description=settings.description,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.limiter = limiter

    register_exception_handlers(app)
    register_middleware(app)

    app.include_router(root.router)
    app.include_router(health.router)
    app.include_router(build_api_router())

    logger.debug("Application assembled (%s routes)", len(app.routes))
    return app


app = create_app()
