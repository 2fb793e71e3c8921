"""
Liveness and readiness probes.

- GET /health       - process is up (no I/O)
- GET /health/ready - database answers ``SELECT 1`` and, when rate limits are
  stored in Redis, Redis answers ``PING``; 503 otherwise
"""

import logging
from typing import Any

import redis.asyncio as redis
from fastapi import APIRouter, Request, Response, status
from redis.exceptions import RedisError

from src.core import check_database_connection
from src.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])

CHECK_OK = "ok"
CHECK_FAILED = "ko"
CHECK_SKIPPED = "not_configured"


async def check_redis_connection() -> str:
    if settings.redis_url is None:
        return CHECK_SKIPPED

    client = redis.from_url(str(settings.redis_url))
    try:
        await client.ping()
    except RedisError as exc:
        logger.error("Redis readiness check failed: %s", exc)
        return CHECK_FAILED
    finally:
        await client.aclose()
    return CHECK_OK


@router.get("")
async def health_check() -> dict[str, str]:
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
    }


@router.get("/ready")
async def readiness_check(request: Request, response: Response) -> dict[str, Any]:
    """Report each dependency; any failed check turns the probe to 503."""
    database_ok = await check_database_connection(request.app.state.sessionmaker)
    checks = {
        "database": CHECK_OK if database_ok else CHECK_FAILED,
        "redis": await check_redis_connection(),
    }

    ready = CHECK_FAILED not in checks.values()
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "ready" if ready else "degraded",
        "app": settings.app_name,
        "version": settings.version,
        "checks": checks,
    }
